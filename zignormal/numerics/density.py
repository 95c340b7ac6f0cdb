"""Gaussian density and its inverse on the decreasing branch."""

import math
from dataclasses import dataclass

from zignormal.errors import ConfigurationError, DomainError

SQRT_2PI = math.sqrt(2.0 * math.pi)


def _peak(sigma: float) -> float:
    if not sigma > 0:
        raise ConfigurationError(f"sigma must be positive, got {sigma}")
    return 1.0 / (sigma * SQRT_2PI)


def density(mu: float, sigma: float, x: float) -> float:
    """Normal probability density at ``x``.

    Arguments
    ---------
        mu (float): Mean.
        sigma (float): Standard deviation, must be positive.
        x (float): Evaluation point.

    Returns
    -------
        float: (1 / (sigma * sqrt(2 pi))) * exp(-(x - mu)^2 / (2 sigma^2))
    """
    factor = _peak(sigma)
    return factor * math.exp(-((x - mu) ** 2) / (2.0 * sigma * sigma))


def inverse_density(mu: float, sigma: float, y: float) -> float:
    """Inverse of :func:`density` restricted to ``x >= mu``.

    Arguments
    ---------
        mu (float): Mean.
        sigma (float): Standard deviation, must be positive.
        y (float): Density value, must satisfy 0 < y <= peak.

    Returns
    -------
        float: mu + sigma * sqrt(-2 ln(y / peak))

    Raises
    ------
        DomainError: If y is not finite, not positive, or above the peak.
    """
    factor = _peak(sigma)
    if not math.isfinite(y) or y <= 0.0:
        raise DomainError(f"inverse density needs 0 < y <= {factor}, got {y}", y)
    if y > factor:
        raise DomainError(f"density value {y} exceeds the peak {factor}", y)
    # y == factor gives -0.0 inside the root
    return mu + sigma * math.sqrt(max(0.0, -2.0 * math.log(y / factor)))


@dataclass(frozen=True)
class GaussianDensity:
    """Normal density with fixed ``(mu, sigma)`` and its inverse.

    Instances are callable and evaluate the density. The inverse is defined on
    the decreasing branch ``x >= mu``.
    """

    mu: float = 0.0
    sigma: float = 1.0

    def __post_init__(self):
        _peak(self.sigma)

    @property
    def peak(self) -> float:
        return _peak(self.sigma)

    def pdf(self, x: float) -> float:
        return density(self.mu, self.sigma, x)

    def inverse_pdf(self, y: float) -> float:
        return inverse_density(self.mu, self.sigma, y)

    def __call__(self, x: float) -> float:
        return self.pdf(x)


STANDARD_NORMAL = GaussianDensity(0.0, 1.0)
