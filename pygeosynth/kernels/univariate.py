"""
Stationary univariate covariance kernels and their parameter derivatives.

All kernels here share the layout ``theta = [sigma_square, beta, nu, ...]``
(variance, range, smoothness) except :class:`UnivariateExpNonGaussian`.
"""

import numpy as np
from scipy.special import digamma, gamma, kv, polygamma

from ..exceptions import InvalidParameterError
from .base import UnivariateKernel, matern_correlation

# Step in the Bessel order used to differentiate K_nu with respect to nu
BESSEL_ORDER_STEP = 1e-6
# Step for the second order difference of K_nu in nu
BESSEL_SECOND_ORDER_STEP = 1e-3


def _matern_constant(nu: float) -> float:
    return 1.0 / (2.0 ** (nu - 1) * gamma(nu))


class UnivariateMaternStationary(UnivariateKernel):
    """
    Stationary Matérn covariance.

    theta = [sigma_square, beta, nu]

        C(d) = sigma_square * M_nu(d / beta),   C(0) = sigma_square
    """

    parameters_number = 3
    smoothness_indices = (2,)
    positive_indices = (1,)

    def covariance(self, distance, theta):
        sigma_square, beta, nu = theta
        return sigma_square * matern_correlation(distance, nu, beta)


class UnivariateMaternNuggetsStationary(UnivariateKernel):
    """
    Stationary Matérn covariance with a nugget effect.

    theta = [sigma_square, beta, nu, tau_square]

        C(d) = sigma_square * M_nu(d / beta) + tau_square * [d == 0]
    """

    parameters_number = 4
    smoothness_indices = (2,)
    positive_indices = (1,)

    def _check_domain(self, theta):
        if theta[3] < 0:
            raise InvalidParameterError(f"{self.name}: nugget theta[3] must be >= 0, got {theta[3]}")

    def covariance(self, distance, theta):
        sigma_square, beta, nu, nugget = theta
        return sigma_square * matern_correlation(distance, nu, beta) + nugget * (distance == 0)


class UnivariateExpNonGaussian(UnivariateKernel):
    """
    Exponential correlation of the latent field of a Tukey g-and-h model.

    theta = [beta, g, h, xi, omega, delta]; only the range ``beta`` enters
    the covariance, the remaining terms describe the marginal transform.

        C(d) = exp(-d / beta),   C(0) = 1
    """

    parameters_number = 6
    positive_indices = (0,)

    def covariance(self, distance, theta):
        beta = theta[0]
        result = np.ones(distance.shape)
        nonzero = distance != 0
        result[nonzero] = np.exp(-distance[nonzero] / beta)
        return result


class UnivariateMaternDsigmaSquare(UnivariateKernel):
    """
    Derivative of the stationary Matérn covariance with respect to sigma_square.

    theta = [sigma_square, beta, nu]

        dC/dsigma_square = M_nu(d / beta),   value 1 at d = 0
    """

    parameters_number = 3
    smoothness_indices = (2,)
    positive_indices = (1,)

    def covariance(self, distance, theta):
        _, beta, nu = theta
        return matern_correlation(distance, nu, beta)


class UnivariateMaternDbeta(UnivariateKernel):
    """
    Derivative of the stationary Matérn covariance with respect to the range.

    theta = [sigma_square, beta, nu]

    Using d/dx [x^nu K_nu(x)] = -x^nu K_{nu-1}(x) with x = d / beta:

        dC/dbeta = sigma_square * c(nu) * x^(nu+1) * K_{nu-1}(x) / beta

    The derivative vanishes at d = 0.
    """

    parameters_number = 3
    smoothness_indices = (2,)
    positive_indices = (1,)

    def covariance(self, distance, theta):
        sigma_square, beta, nu = theta
        result = np.zeros(distance.shape)
        nonzero = distance != 0
        x = distance[nonzero] / beta
        result[nonzero] = sigma_square * _matern_constant(nu) * x ** (nu + 1) * kv(nu - 1, x) / beta
        return result


class UnivariateMaternDnu(UnivariateKernel):
    """
    Derivative of the stationary Matérn covariance with respect to smoothness.

    theta = [sigma_square, beta, nu]

        dC/dnu = sigma_square * c(nu) * x^nu * [(log(x/2) - psi(nu)) K_nu(x) + dK_nu/dnu (x)]

    where psi is the digamma function and dK_nu/dnu is taken by a central
    difference in the order. The derivative vanishes at d = 0.
    """

    parameters_number = 3
    smoothness_indices = (2,)
    positive_indices = (1,)

    def covariance(self, distance, theta):
        sigma_square, beta, nu = theta
        result = np.zeros(distance.shape)
        nonzero = distance != 0
        x = distance[nonzero] / beta

        k_nu = kv(nu, x)
        dk_dnu = (kv(nu + BESSEL_ORDER_STEP, x) - kv(nu - BESSEL_ORDER_STEP, x)) / (2 * BESSEL_ORDER_STEP)
        result[nonzero] = sigma_square * _matern_constant(nu) * x ** nu * (
            (np.log(x / 2.0) - digamma(nu)) * k_nu + dk_dnu
        )
        return result


class UnivariateMaternDdsigmaSquareBeta(UnivariateKernel):
    """
    Mixed second derivative with respect to sigma_square and the range.

    theta = [sigma_square, beta, nu]

        d2C/dsigma_square dbeta = c(nu) * x^(nu+1) * K_{nu-1}(x) / beta

    which is :class:`UnivariateMaternDbeta` without the variance factor.
    Vanishes at d = 0.
    """

    parameters_number = 3
    smoothness_indices = (2,)
    positive_indices = (1,)

    def covariance(self, distance, theta):
        _, beta, nu = theta
        result = np.zeros(distance.shape)
        nonzero = distance != 0
        x = distance[nonzero] / beta
        result[nonzero] = _matern_constant(nu) * x ** (nu + 1) * kv(nu - 1, x) / beta
        return result


class UnivariateMaternDdbetaNu(UnivariateKernel):
    """
    Mixed second derivative with respect to the range and smoothness.

    theta = [sigma_square, beta, nu]

    Differentiating dC/dbeta in nu:

        d2C/dbeta dnu = sigma_square * c(nu) * x^(nu+1) / beta
                        * [(log(x/2) - psi(nu)) K_{nu-1}(x) + dK_{nu-1}/dnu (x)]

    Vanishes at d = 0.
    """

    parameters_number = 3
    smoothness_indices = (2,)
    positive_indices = (1,)

    def covariance(self, distance, theta):
        sigma_square, beta, nu = theta
        result = np.zeros(distance.shape)
        nonzero = distance != 0
        x = distance[nonzero] / beta

        k_lower = kv(nu - 1, x)
        dk_lower = (kv(nu - 1 + BESSEL_ORDER_STEP, x) -
                    kv(nu - 1 - BESSEL_ORDER_STEP, x)) / (2 * BESSEL_ORDER_STEP)
        result[nonzero] = sigma_square * _matern_constant(nu) * x ** (nu + 1) / beta * (
            (np.log(x / 2.0) - digamma(nu)) * k_lower + dk_lower
        )
        return result


class UnivariateMaternDdnuNu(UnivariateKernel):
    """
    Second derivative of the stationary Matérn covariance in smoothness.

    theta = [sigma_square, beta, nu]

    With g(nu) = log(x/2) - psi(nu) and g'(nu) = -psi_1(nu) (trigamma):

        d2C/dnu2 = sigma_square * c(nu) * x^nu
                   * [(g^2 + g') K_nu(x) + 2 g dK_nu/dnu (x) + d2K_nu/dnu2 (x)]

    Both order derivatives of K_nu are central differences. Vanishes at d = 0.
    """

    parameters_number = 3
    smoothness_indices = (2,)
    positive_indices = (1,)

    def covariance(self, distance, theta):
        sigma_square, beta, nu = theta
        result = np.zeros(distance.shape)
        nonzero = distance != 0
        x = distance[nonzero] / beta

        h = BESSEL_SECOND_ORDER_STEP
        k_nu = kv(nu, x)
        k_upper, k_lower = kv(nu + h, x), kv(nu - h, x)
        dk_dnu = (k_upper - k_lower) / (2 * h)
        d2k_dnu2 = (k_upper - 2 * k_nu + k_lower) / h ** 2

        g = np.log(x / 2.0) - digamma(nu)
        result[nonzero] = sigma_square * _matern_constant(nu) * x ** nu * (
            (g ** 2 - polygamma(1, nu)) * k_nu + 2 * g * dk_dnu + d2k_dnu2
        )
        return result
