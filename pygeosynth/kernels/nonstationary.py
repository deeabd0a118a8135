"""
Non-stationary univariate Matérn kernels.

Both kernels follow the Paciorek-Schervish construction in which every
location s carries its own standard deviation sigma(s), squared length
scale lambda(s) and smoothness nu(s):

    C(s_i, s_j) = sigma_i sigma_j * sqrt(lambda_i lambda_j) * 2 / (lambda_i + lambda_j)
                  * M_{nu_ij}(2 sqrt(nu_ij Q_ij))

with nu_ij = (nu_i + nu_j) / 2 and Q_ij = 2 d_ij^2 / (lambda_i + lambda_j).
At i == j this reduces to sigma_i^2. The per-location functions are
evaluated once for every row and column of a tile before the pairwise
block is formed.
"""

import numpy as np
from typing import Callable, Optional

from ..exceptions import InvalidParameterError
from ..locations import Locations
from .base import Kernel, matern_correlation


def paciorek_matern(distance: np.ndarray,
                    sigma_rows: np.ndarray, sigma_cols: np.ndarray,
                    lambda_rows: np.ndarray, lambda_cols: np.ndarray,
                    nu_rows: np.ndarray, nu_cols: np.ndarray) -> np.ndarray:
    """
    Pairwise non-stationary Matérn covariance.

    Parameters
    ----------
    distance : np.ndarray
        (rows, cols) distance matrix
    sigma_rows, lambda_rows, nu_rows : np.ndarray
        Per-row standard deviation, squared length scale and smoothness
    sigma_cols, lambda_cols, nu_cols : np.ndarray
        Same for the columns

    Returns
    -------
    np.ndarray
        (rows, cols) covariance block
    """
    sig_i, sig_j = sigma_rows[:, np.newaxis], sigma_cols[np.newaxis, :]
    lam_i, lam_j = lambda_rows[:, np.newaxis], lambda_cols[np.newaxis, :]
    nu_ij = (nu_rows[:, np.newaxis] + nu_cols[np.newaxis, :]) / 2

    term1 = sig_i * sig_j * np.sqrt(lam_i * lam_j)
    term2 = 2.0 / (lam_i + lam_j)
    q = distance ** 2 * term2
    term3 = matern_correlation(2.0 * np.sqrt(nu_ij * q), nu_ij)
    return term1 * term2 * term3


def _check_smoothness(name: str, *arrays: np.ndarray) -> None:
    for values in arrays:
        if np.any(~(values > 0)):
            raise InvalidParameterError(
                f"{name}: smoothness function must be > 0 at every location, "
                f"got minimum {np.nanmin(values):.6g}"
            )


class UnivariateMaternNonStat(Kernel):
    """
    Non-stationary Matérn kernel with parametric location functions.

    theta = [a, b, d, e, f, g, h, ti]

    - lambda(s) = a * exp(sin(b x) + sin(b y))
    - sigma(s)  = d * exp(e (x + y)) + f
    - nu(s)     = g * exp(h (x + y)) + ti

    Only the planar coordinates enter the location functions.
    """

    parameters_number = 8
    positive_indices = (0,)

    @staticmethod
    def lambda_function(x, y, a, b):
        return a * np.exp(np.sin(b * x) + np.sin(b * y))

    @staticmethod
    def sigma_function(x, y, d, e, f):
        return d * np.exp(e * (x + y)) + f

    @staticmethod
    def nu_function(x, y, g, h, ti):
        return g * np.exp(h * (x + y)) + ti

    def _location_functions(self, locations, index, theta):
        a, b, d, e, f, g, h, ti = theta
        x, y = locations.x[index], locations.y[index]
        return (self.sigma_function(x, y, d, e, f),
                self.lambda_function(x, y, a, b),
                self.nu_function(x, y, g, h, ti))

    def _compute_block(self, row_index, col_index, locations1, locations2,
                       locations3, theta, distance):
        sigma_1, lambda_1, nu_1 = self._location_functions(locations1, row_index, theta)
        sigma_2, lambda_2, nu_2 = self._location_functions(locations2, col_index, theta)
        _check_smoothness(self.name, nu_1, nu_2)

        d = distance(locations1, row_index, locations2, col_index)
        return paciorek_matern(d, sigma_1, sigma_2, lambda_1, lambda_2, nu_1, nu_2)


class UnivariateMaternNonStationary(Kernel):
    """
    Matérn kernel whose variance, range and smoothness drift with the
    distance r(s) from a center point.

    theta = [sigma_square, beta, nu, alpha_sigma, alpha_beta, alpha_nu]

    - sigma^2(s) = sigma_square * exp(alpha_sigma r(s))
    - beta(s)    = beta * exp(alpha_beta r(s))
    - nu(s)      = nu * exp(alpha_nu r(s))

    The center is the first point of ``locations3`` when given, otherwise
    the per-axis center of ``locations1`` and ``locations2`` together, so
    that a cross block is the transpose of the swapped one. The squared length scale is
    lambda(s) = 4 nu(s) beta(s)^2, so with all alphas zero the kernel equals
    :class:`UnivariateMaternStationary`.
    """

    parameters_number = 6
    smoothness_indices = (2,)
    positive_indices = (0, 1)

    def _location_functions(self, locations: Locations, index: np.ndarray,
                            center: Locations, theta: np.ndarray, distance: Callable):
        sigma_square, beta, nu, alpha_sigma, alpha_beta, alpha_nu = theta
        r = distance(locations, index, center, np.array([0]))[:, 0]
        sigma = np.sqrt(sigma_square * np.exp(alpha_sigma * r))
        beta_s = beta * np.exp(alpha_beta * r)
        nu_s = nu * np.exp(alpha_nu * r)
        return sigma, 4.0 * nu_s * beta_s ** 2, nu_s

    def _compute_block(self, row_index, col_index, locations1, locations2,
                       locations3: Optional[Locations], theta, distance):
        center = locations3 if locations3 is not None else locations1.center(locations2)
        sigma_1, lambda_1, nu_1 = self._location_functions(locations1, row_index, center, theta, distance)
        sigma_2, lambda_2, nu_2 = self._location_functions(locations2, col_index, center, theta, distance)
        _check_smoothness(self.name, nu_1, nu_2)

        d = distance(locations1, row_index, locations2, col_index)
        return paciorek_matern(d, sigma_1, sigma_2, lambda_1, lambda_2, nu_1, nu_2)
