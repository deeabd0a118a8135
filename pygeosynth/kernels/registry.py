"""
Name-keyed registry of covariance kernel factories.
"""

import warnings
from typing import Callable, Dict, List, Tuple

from ..exceptions import UnknownKernelError
from ..utils import normalize_kernel_name, parse_precision


class KernelRegistry:
    """
    Table mapping (kernel name, precision) to a zero-argument factory.

    Entries are independent of one another, so the order in which they are
    added does not matter. The first registration of a key wins; a later
    duplicate is ignored unless ``replace=True``.

    Examples
    --------
    >>> registry = KernelRegistry()
    >>> registry.add('UnivariateMaternStationary', UnivariateMaternStationary)
    True
    >>> kernel = registry.create('univariate_matern_stationary')
    """

    def __init__(self):
        self._factories: Dict[Tuple[str, str], Callable] = {}

    def add(self, name: str, factory: Callable, precision: str = "double",
            replace: bool = False) -> bool:
        """
        Register a factory.

        Parameters
        ----------
        name : str
            Kernel name (CamelCase or snake_case)
        factory : callable
            Zero-argument callable returning a new kernel instance
        precision : str, default='double'
            'double' or 'single'
        replace : bool, default=False
            Overwrite an existing entry instead of ignoring the duplicate

        Returns
        -------
        bool
            True if the entry was stored
        """
        if not callable(factory):
            raise TypeError(f"Factory for kernel '{name}' must be callable")
        key = (normalize_kernel_name(name, warn=False), parse_precision(precision)[0])
        if key in self._factories and not replace:
            warnings.warn(f"Kernel '{key[0]}' ({key[1]}) is already registered. Ignoring duplicate.")
            return False
        self._factories[key] = factory
        return True

    def create(self, name: str, precision: str = "double"):
        """
        Instantiate a registered kernel.

        Parameters
        ----------
        name : str
            Kernel name; snake_case names are converted to CamelCase
        precision : str, default='double'
            'double' or 'single'

        Returns
        -------
        Kernel
            A fresh instance owned by the caller

        Raises
        ------
        UnknownKernelError
            If no entry matches
        """
        key = (normalize_kernel_name(name), parse_precision(precision)[0])
        try:
            factory = self._factories[key]
        except KeyError:
            raise UnknownKernelError(
                f"Unknown kernel '{key[0]}' ({key[1]} precision). "
                f"Available: {self.names()}"
            ) from None
        return factory()

    def names(self) -> List[str]:
        """Sorted names of all registered kernels."""
        return sorted({name for name, _ in self._factories})

    def precisions(self, name: str) -> List[str]:
        name = normalize_kernel_name(name, warn=False)
        return sorted(precision for kernel, precision in self._factories if kernel == name)

    def __contains__(self, name) -> bool:
        return isinstance(name, str) and bool(name.strip()) and \
            normalize_kernel_name(name, warn=False) in self.names()

    def __len__(self):
        return len(self._factories)

    def __repr__(self):
        return f"KernelRegistry({len(self.names())} kernels)"
