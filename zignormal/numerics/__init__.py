"""Numeric building blocks: erf approximation, gaussian density, bisection."""

from .bisection import RootResult, bisect
from .density import (
    STANDARD_NORMAL,
    GaussianDensity,
    density,
    inverse_density,
)
from .erf import erf, erf_array, erfc, erfc_array

__all__ = [
    "erf",
    "erfc",
    "erf_array",
    "erfc_array",
    "density",
    "inverse_density",
    "GaussianDensity",
    "STANDARD_NORMAL",
    "bisect",
    "RootResult",
]
