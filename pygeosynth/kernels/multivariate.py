"""
Multivariate Matérn kernels.

A P-variate kernel models P correlated fields at every location, so a
location set of n points spans P * n matrix rows. Two layouts map a
matrix index r to (point, variable):

- interleaved: point r // P, variable r % P (the variables of a point are
  adjacent)
- blocked: variable r // n, point r % n (one block of n rows per variable)

Every pair of variables (a, b) has its own Matérn covariance
sigma2_ab * M_{nu_ab}(d / beta_ab); the kernels below differ in how the
P x P tables of sigma2, beta and nu are derived from theta.
"""

import numpy as np
from abc import abstractmethod
from typing import Tuple

from ..exceptions import InvalidParameterError
from ..locations import Locations
from .base import Kernel, matern_correlation


def parsimonious_tables(sigma_squares: np.ndarray, beta: float, nus: np.ndarray,
                        rhos: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Parameter tables of the parsimonious multivariate Matérn model.

    All pairs share one range. Cross smoothness is the mean of the marginal
    smoothnesses, and the cross variance follows Gneiting et al. (2010):

        sigma2_ab = rho_ab sqrt(sigma2_a sigma2_b)
                    * sqrt(G(nu_a + 1) G(nu_b + 1) / (G(nu_a) G(nu_b))) * G(nu_ab) / G(nu_ab + 1)

    which, since G(v + 1) = v G(v), equals rho_ab sqrt(sigma2_a sigma2_b) sqrt(nu_a nu_b) / nu_ab.

    Parameters
    ----------
    sigma_squares : np.ndarray
        Marginal variances, length P
    beta : float
        Common range
    nus : np.ndarray
        Marginal smoothnesses, length P
    rhos : np.ndarray
        (P, P) symmetric co-located correlation matrix (diagonal ignored)

    Returns
    -------
    tuple
        (sigma2, beta, nu) tables, each (P, P)
    """
    sigma_squares = np.asarray(sigma_squares, dtype=float)
    nus = np.asarray(nus, dtype=float)
    nu = (nus[:, np.newaxis] + nus[np.newaxis, :]) / 2
    sigma2 = rhos * np.sqrt(np.outer(sigma_squares, sigma_squares)) * np.sqrt(np.outer(nus, nus)) / nu
    np.fill_diagonal(sigma2, sigma_squares)
    beta_table = np.full(nu.shape, float(beta))
    return sigma2, beta_table, nu


def _check_correlations(name: str, rhos) -> None:
    for rho in np.atleast_1d(rhos):
        if not -1 <= rho <= 1:
            raise InvalidParameterError(f"{name}: correlation must be in [-1, 1], got {rho}")


class MultivariateMaternKernel(Kernel):
    """Base class for P-variate Matérn kernels."""

    interleaved = True

    @abstractmethod
    def parameter_tables(self, theta: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return the (P, P) tables (sigma2, beta, nu) for a validated theta."""
        pass

    def split_index(self, index: np.ndarray, locations: Locations) -> Tuple[np.ndarray, np.ndarray]:
        """Map matrix indices to (point, variable) indices."""
        if self.interleaved:
            return index // self.variables_number, index % self.variables_number
        return index % locations.size, index // locations.size

    def _compute_block(self, row_index, col_index, locations1, locations2,
                       locations3, theta, distance):
        point_1, var_1 = self.split_index(row_index, locations1)
        point_2, var_2 = self.split_index(col_index, locations2)

        sigma2, beta, nu = self.parameter_tables(theta)
        var_r, var_c = var_1[:, np.newaxis], var_2[np.newaxis, :]

        d = distance(locations1, point_1, locations2, point_2)
        return sigma2[var_r, var_c] * matern_correlation(d, nu[var_r, var_c], beta[var_r, var_c])


class BivariateMaternParsimonious(MultivariateMaternKernel):
    """
    Parsimonious bivariate Matérn kernel, interleaved layout.

    theta = [sigma2_1, sigma2_2, beta, nu_1, nu_2, rho]
    """

    variables_number = 2
    parameters_number = 6
    smoothness_indices = (3, 4)
    positive_indices = (0, 1, 2)

    def _check_domain(self, theta):
        _check_correlations(self.name, theta[5])

    def parameter_tables(self, theta):
        sigma2_1, sigma2_2, beta, nu_1, nu_2, rho = theta
        rhos = np.array([[1.0, rho], [rho, 1.0]])
        return parsimonious_tables([sigma2_1, sigma2_2], beta, [nu_1, nu_2], rhos)


class BivariateMaternParsimoniousBlocked(BivariateMaternParsimonious):
    """
    Parsimonious bivariate Matérn kernel, blocked layout: the first n matrix
    rows hold variable 1 at every location, the next n rows variable 2.

    theta = [sigma2_1, sigma2_2, beta, nu_1, nu_2, rho]
    """

    interleaved = False


class BivariateMaternFlexible(MultivariateMaternKernel):
    """
    Full bivariate Matérn kernel with separate ranges and smoothnesses for the
    two margins and the cross covariance, interleaved layout.

    theta = [sigma2_1, sigma2_2, beta_1, beta_2, beta_12, nu_1, nu_2, nu_12, rho]

    The cross covariance is rho sqrt(sigma2_1 sigma2_2) M_{nu_12}(d / beta_12).
    Positive definiteness for arbitrary combinations is the caller's concern.
    """

    variables_number = 2
    parameters_number = 9
    smoothness_indices = (5, 6, 7)
    positive_indices = (0, 1, 2, 3, 4)

    def _check_domain(self, theta):
        _check_correlations(self.name, theta[8])

    def parameter_tables(self, theta):
        sigma2_1, sigma2_2, beta_1, beta_2, beta_12, nu_1, nu_2, nu_12, rho = theta
        cross = rho * np.sqrt(sigma2_1 * sigma2_2)
        sigma2 = np.array([[sigma2_1, cross], [cross, sigma2_2]])
        beta = np.array([[beta_1, beta_12], [beta_12, beta_2]])
        nu = np.array([[nu_1, nu_12], [nu_12, nu_2]])
        return sigma2, beta, nu


class TrivariateMaternParsimonious(MultivariateMaternKernel):
    """
    Parsimonious trivariate Matérn kernel, interleaved layout.

    theta = [sigma2_1, sigma2_2, sigma2_3, beta, nu_1, nu_2, nu_3, rho_12, rho_13, rho_23]
    """

    variables_number = 3
    parameters_number = 10
    smoothness_indices = (4, 5, 6)
    positive_indices = (0, 1, 2, 3)

    def _check_domain(self, theta):
        _check_correlations(self.name, theta[7:10])

    def parameter_tables(self, theta):
        rho_12, rho_13, rho_23 = theta[7:10]
        rhos = np.array([
            [1.0, rho_12, rho_13],
            [rho_12, 1.0, rho_23],
            [rho_13, rho_23, 1.0],
        ])
        return parsimonious_tables(theta[0:3], theta[3], theta[4:7], rhos)
