"""
Covariance kernels for pyGeoSynth.

This subpackage contains the kernel contract and its implementations:
- Stationary univariate Matérn kernels and their parameter derivatives
- Non-stationary Matérn kernels with location-dependent parameters
- A space-time Matérn kernel
- Bivariate and trivariate Matérn kernels
- The name-keyed registry used to create kernels at run time

Every built-in kernel is registered in ``KERNEL_REGISTRY`` once per
precision when this package is imported.
"""

from functools import partial

from ..utils import PRECISIONS
from .base import (
    Kernel,
    UnivariateKernel,
    matern_correlation,
    euclidean_distance,
    great_circle_distance,
    distance_function,
    EARTH_RADIUS_KM,
)
from .univariate import (
    UnivariateMaternStationary,
    UnivariateMaternNuggetsStationary,
    UnivariateExpNonGaussian,
    UnivariateMaternDsigmaSquare,
    UnivariateMaternDbeta,
    UnivariateMaternDnu,
    UnivariateMaternDdsigmaSquareBeta,
    UnivariateMaternDdbetaNu,
    UnivariateMaternDdnuNu,
)
from .nonstationary import UnivariateMaternNonStat, UnivariateMaternNonStationary
from .spacetime import UnivariateMaternSpaceTime
from .multivariate import (
    MultivariateMaternKernel,
    BivariateMaternParsimonious,
    BivariateMaternParsimoniousBlocked,
    BivariateMaternFlexible,
    TrivariateMaternParsimonious,
)
from .registry import KernelRegistry

BUILTIN_KERNELS = (
    UnivariateMaternStationary,
    UnivariateMaternNuggetsStationary,
    UnivariateExpNonGaussian,
    UnivariateMaternDsigmaSquare,
    UnivariateMaternDbeta,
    UnivariateMaternDnu,
    UnivariateMaternDdsigmaSquareBeta,
    UnivariateMaternDdbetaNu,
    UnivariateMaternDdnuNu,
    UnivariateMaternNonStat,
    UnivariateMaternNonStationary,
    UnivariateMaternSpaceTime,
    BivariateMaternParsimonious,
    BivariateMaternParsimoniousBlocked,
    BivariateMaternFlexible,
    TrivariateMaternParsimonious,
)


def register_builtin_kernels(registry: KernelRegistry) -> KernelRegistry:
    """Add every built-in kernel to ``registry`` for each supported precision."""
    for kernel_class in BUILTIN_KERNELS:
        for precision, dtype in PRECISIONS.items():
            registry.add(kernel_class.__name__, partial(kernel_class, dtype=dtype), precision)
    return registry


KERNEL_REGISTRY = register_builtin_kernels(KernelRegistry())


def create_kernel(name: str, precision: str = "double") -> Kernel:
    """
    Create a kernel from the default registry.

    Examples
    --------
    >>> kernel = create_kernel('UnivariateMaternStationary')
    >>> kernel.parameters_number
    3
    """
    return KERNEL_REGISTRY.create(name, precision)


__all__ = [
    "Kernel",
    "UnivariateKernel",
    "MultivariateMaternKernel",
    "matern_correlation",
    "euclidean_distance",
    "great_circle_distance",
    "distance_function",
    "EARTH_RADIUS_KM",
    "UnivariateMaternStationary",
    "UnivariateMaternNuggetsStationary",
    "UnivariateExpNonGaussian",
    "UnivariateMaternDsigmaSquare",
    "UnivariateMaternDbeta",
    "UnivariateMaternDnu",
    "UnivariateMaternDdsigmaSquareBeta",
    "UnivariateMaternDdbetaNu",
    "UnivariateMaternDdnuNu",
    "UnivariateMaternNonStat",
    "UnivariateMaternNonStationary",
    "UnivariateMaternSpaceTime",
    "BivariateMaternParsimonious",
    "BivariateMaternParsimoniousBlocked",
    "BivariateMaternFlexible",
    "TrivariateMaternParsimonious",
    "KernelRegistry",
    "KERNEL_REGISTRY",
    "BUILTIN_KERNELS",
    "register_builtin_kernels",
    "create_kernel",
]
