"""Exception types raised by the Ziggurat calibration and sampling code.

All of them derive from ``ValueError`` so callers that already guard numeric
routines with ``except ValueError`` keep working.
"""


class ZigguratError(ValueError):
    """Base class for every failure raised by this package."""


class DomainError(ZigguratError):
    """A density inverse or logarithm received an argument outside its domain.

    Typical causes are a layer height above the density peak, a non-positive
    height, or a uniform draw of exactly zero fed to a logarithm.
    """

    def __init__(self, message: str, value: float | None = None):
        super().__init__(message)
        self.value = value


class RootNotFound(ZigguratError):
    """Bisection lost its bracket or ran out of iterations."""

    def __init__(
        self,
        message: str,
        lower: float | None = None,
        upper: float | None = None,
        iterations: int = 0,
    ):
        super().__init__(message)
        self.lower = lower
        self.upper = upper
        self.iterations = iterations


class ConfigurationError(ZigguratError):
    """The requested table parameters do not admit a valid Ziggurat."""


class SamplingError(ZigguratError):
    """A sampling attempt could not complete.

    Raised when a replayed uniform source runs dry or when an explicit cap on
    tail rejection iterations is exhausted.
    """
