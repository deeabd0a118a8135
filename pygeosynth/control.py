"""
Control parameters for synthetic data generation.
"""

from typing import List, Optional, Sequence, Union

from .exceptions import InvalidArgumentError
from .utils import (
    Dimension, parse_dimension, parse_distance_metric, parse_precision,
    normalize_kernel_name,
)

UNKNOWN_THETA = -1.0


def parse_theta(values: Union[str, Sequence[float], None]) -> Optional[List[float]]:
    """
    Parse a parameter vector.

    Accepts either a sequence of numbers or a colon-separated string such as
    ``"1:0.1:0.5"``. A ``?`` entry marks a parameter as unknown (to be
    estimated downstream) and is stored as -1.

    Parameters
    ----------
    values : str, sequence of float or None
        Parameter values

    Returns
    -------
    list of float or None
        Parsed parameter vector

    Examples
    --------
    >>> parse_theta("1:0.1:?")
    [1.0, 0.1, -1.0]
    """
    if values is None:
        return None
    if isinstance(values, str):
        tokens = [tok.strip() for tok in values.split(":")]
        theta = []
        for tok in tokens:
            if tok == "?":
                theta.append(UNKNOWN_THETA)
                continue
            try:
                theta.append(float(tok))
            except ValueError:
                raise InvalidArgumentError(f"Invalid theta value '{tok}' in '{values}'")
        return theta
    return [float(v) for v in values]


def parse_run_mode(run_mode: str) -> str:
    """Validate the run mode; only 'standard' and 'verbose' are known."""
    mode = str(run_mode).strip().lower()
    if mode not in ("standard", "verbose"):
        raise InvalidArgumentError(
            f"Invalid run mode '{run_mode}'. Please use verbose or standard values only."
        )
    return mode


class SynthesisControl:
    """
    Control parameters for synthetic location and covariance generation.

    Parameters
    ----------
    problem_size : int
        Number of spatial locations N
    kernel : str, default='UnivariateMaternStationary'
        Registry name of the covariance kernel (snake_case accepted)
    dimension : str or Dimension, default='2D'
        '2D', '3D' or 'ST' (space-time)
    time_slots : int, default=1
        Number of time slots for space-time data
    precision : str, default='double'
        'double' or 'single'
    seed : int, optional
        Seed for the location generator
    distance_metric : int or str, default=0
        0 / 'euclidean' or 1 / 'great_circle'
    tile_size : int, optional
        Dense tile size used when assembling covariance matrices
    p_grid : int, default=1
        Number of process-grid rows; Morton sorting is done per
        partition of ``problem_size // p_grid`` points
    initial_theta, lower_bounds, upper_bounds : str or sequence, optional
        Parameter vectors, see :func:`parse_theta`
    run_mode : str, default='standard'
        'verbose' prints generation progress
    """

    def __init__(
        self,
        problem_size: int,
        kernel: str = "UnivariateMaternStationary",
        dimension: Union[str, Dimension] = "2D",
        time_slots: int = 1,
        precision: str = "double",
        seed: Optional[int] = None,
        distance_metric: Union[int, str] = 0,
        tile_size: Optional[int] = None,
        p_grid: int = 1,
        initial_theta=None,
        lower_bounds=None,
        upper_bounds=None,
        run_mode: str = "standard",
    ):
        if int(problem_size) <= 0:
            raise InvalidArgumentError(f"problem_size must be positive, got {problem_size}")
        if int(time_slots) < 1:
            raise InvalidArgumentError(f"time_slots must be at least 1, got {time_slots}")
        if int(p_grid) < 1:
            raise InvalidArgumentError(f"p_grid must be at least 1, got {p_grid}")
        if tile_size is not None and int(tile_size) <= 0:
            raise InvalidArgumentError(f"tile_size must be positive, got {tile_size}")

        self.problem_size = int(problem_size)
        self.kernel = normalize_kernel_name(kernel)
        self.dimension = parse_dimension(dimension)
        self.time_slots = int(time_slots)
        self.precision, self.dtype = parse_precision(precision)
        self.seed = seed
        self.distance_metric = parse_distance_metric(distance_metric)
        self.tile_size = None if tile_size is None else int(tile_size)
        self.p_grid = int(p_grid)
        self.initial_theta = parse_theta(initial_theta)
        self.lower_bounds = parse_theta(lower_bounds)
        self.upper_bounds = parse_theta(upper_bounds)
        self.run_mode = parse_run_mode(run_mode)

        if self.dimension != Dimension.SPACE_TIME and self.time_slots != 1:
            raise InvalidArgumentError("time_slots is only meaningful for space-time ('ST') data")

        for name in ("lower_bounds", "upper_bounds"):
            bounds = getattr(self, name)
            if bounds is not None and self.initial_theta is not None \
                    and len(bounds) != len(self.initial_theta):
                raise InvalidArgumentError(
                    f"{name} has {len(bounds)} values, initial_theta has {len(self.initial_theta)}"
                )

    @property
    def monitoring(self) -> bool:
        """Whether progress should be printed."""
        return self.run_mode == "verbose"

    @property
    def partition_size(self) -> int:
        """Number of points sorted together by the Morton reordering."""
        return max(1, self.problem_size // self.p_grid)

    def __repr__(self):
        return (f"SynthesisControl(problem_size={self.problem_size}, kernel='{self.kernel}', "
                f"dimension='{self.dimension.value}', precision='{self.precision}', "
                f"seed={self.seed})")
