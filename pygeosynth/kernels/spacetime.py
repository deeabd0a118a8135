"""
Space-time Matérn kernel.
"""

import numpy as np

from ..exceptions import InvalidParameterError
from .base import Kernel, matern_correlation


class UnivariateMaternSpaceTime(Kernel):
    """
    Gneiting non-separable space-time covariance with a Matérn spatial margin.

    theta = [sigma_square, beta, nu, a, alpha, beta_sep, delta]

    With spatial distance h and time lag u,

        psi(u)  = |u|^(2 alpha) / a + 1
        C(h, u) = sigma_square / psi(u)^(delta + beta_sep)
                  * M_nu(h / beta / psi(u)^(beta_sep / 2))

    ``alpha`` must lie in (0, 1] and the separability ``beta_sep`` in [0, 1].
    C(0, 0) = sigma_square. The time coordinate is read from ``Locations.time``.
    """

    parameters_number = 7
    smoothness_indices = (2,)
    positive_indices = (0, 1, 3)
    requires_time = True

    def _check_domain(self, theta):
        alpha, beta_sep, delta = theta[4], theta[5], theta[6]
        if not 0 < alpha <= 1:
            raise InvalidParameterError(f"{self.name}: alpha theta[4] must be in (0, 1], got {alpha}")
        if not 0 <= beta_sep <= 1:
            raise InvalidParameterError(f"{self.name}: separability theta[5] must be in [0, 1], got {beta_sep}")
        if delta < 0:
            raise InvalidParameterError(f"{self.name}: delta theta[6] must be >= 0, got {delta}")

    def _compute_block(self, row_index, col_index, locations1, locations2,
                       locations3, theta, distance):
        sigma_square, beta, nu, a, alpha, beta_sep, delta = theta

        h = distance(locations1, row_index, locations2, col_index)
        u = np.abs(locations1.time[row_index][:, np.newaxis] - locations2.time[col_index][np.newaxis, :])

        psi = u ** (2 * alpha) / a + 1.0
        scaled = h / beta / psi ** (beta_sep / 2.0)
        return sigma_square / psi ** (delta + beta_sep) * matern_correlation(scaled, nu)
