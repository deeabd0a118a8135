"""
Exception types raised by pyGeoSynth.
"""


class GeoSynthError(Exception):
    """Base class for all pyGeoSynth errors."""


class InvalidArgumentError(GeoSynthError, ValueError):
    """
    Raised for malformed call arguments: non-positive counts, unknown
    dimensions or metrics, coordinates outside the unit hypercube, or
    buffers and index ranges that do not fit.
    """


class InvalidParameterError(InvalidArgumentError):
    """
    Raised when a kernel parameter vector is unusable: too short, a
    smoothness term <= 0, or a range/scale term outside its domain.
    """


class UnknownKernelError(GeoSynthError, KeyError):
    """Raised when a kernel name has no registry entry."""


class NumericalDegenerateError(GeoSynthError, ArithmeticError):
    """Raised when a covariance block contains non-finite values."""
