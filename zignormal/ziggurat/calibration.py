"""Calibration of the base boundary ``x1`` for an equal-area Ziggurat.

For a trial ``x1`` the base strip has area ``x1 * f(x1) + tail(x1)``. Stacking
``n`` layers of that area from ``(x1, f(x1))`` upwards leaves a top layer whose
area is ``x_{n-1} * (f(0) - y_{n-1})``. The calibrated ``x1`` is the root of the
difference between the two.

The default tail term is :func:`~zignormal.numerics.erf.erfc` evaluated at
``x1``. That reproduces the historical tables exactly, but it is not the tail
mass of the standard normal, which is ``0.5 * erfc(x1 / sqrt(2))``; pass
``tail_area="gaussian"`` for tables whose base strip carries the true tail.
"""

import logging
import math
from collections.abc import Callable

import numpy as np

from zignormal.errors import ConfigurationError
from zignormal.numerics.bisection import bisect
from zignormal.numerics.density import STANDARD_NORMAL, GaussianDensity
from zignormal.numerics.erf import erfc
from zignormal.ziggurat.table import (
    DensityFunction,
    ZigguratTable,
    generate_table,
    layer_edges,
)

logger = logging.getLogger(__name__)

DEFAULT_LAYERS = 256
DEFAULT_EPS = 1e-5
DEFAULT_MAX_ITER = 100
DEFAULT_SEARCH_INTERVAL = (0.0, 100.0)

TailArea = Callable[[float], float]


def gaussian_tail_area(x: float) -> float:
    """Probability mass of the standard normal beyond ``x``."""
    return 0.5 * erfc(x / math.sqrt(2.0))


TAIL_AREAS: dict[str, TailArea] = {
    "erfc": erfc,
    "gaussian": gaussian_tail_area,
}


def resolve_tail_area(tail_area: str | TailArea) -> TailArea:
    """Look up a tail term by name, or pass a callable through."""
    if callable(tail_area):
        return tail_area
    try:
        return TAIL_AREAS[tail_area]
    except KeyError:
        raise ConfigurationError(
            f"unknown tail area '{tail_area}', expected one of {sorted(TAIL_AREAS)}"
        ) from None


def base_layer_area(
    x1: float, pfunc: DensityFunction, tail_area: str | TailArea = "erfc"
) -> float:
    """Area of the base rectangle ``x1 * f(x1)`` plus the tail term."""
    return x1 * pfunc(x1) + resolve_tail_area(tail_area)(x1)


def top_layer_area(
    n: int,
    x1: float,
    pfunc: DensityFunction,
    inv_pfunc: DensityFunction,
    tail_area: str | TailArea = "erfc",
) -> float:
    """Area left for the topmost layer after stacking from a trial ``x1``."""
    area = base_layer_area(x1, pfunc, tail_area)
    x_top, y_top = layer_edges(n, x1, area, pfunc, inv_pfunc)[n - 1]
    return x_top * (pfunc(0.0) - y_top)


def area_difference(
    x1: float,
    n: int,
    pfunc: DensityFunction,
    inv_pfunc: DensityFunction,
    tail_area: str | TailArea = "erfc",
) -> float:
    """Top layer area minus base strip area; zero at the calibrated ``x1``."""
    return top_layer_area(n, x1, pfunc, inv_pfunc, tail_area) - base_layer_area(
        x1, pfunc, tail_area
    )


def solve_x1(
    n: int,
    pfunc: DensityFunction,
    inv_pfunc: DensityFunction,
    tail_area: str | TailArea = "erfc",
    eps: float = DEFAULT_EPS,
    max_iter: int = DEFAULT_MAX_ITER,
    search_interval: tuple[float, float] = DEFAULT_SEARCH_INTERVAL,
) -> float:
    """Find ``x1`` such that every layer and the base strip have equal area.

    Arguments
    ---------
        n (int): Number of layers.
        pfunc (Callable): Density function.
        inv_pfunc (Callable): Inverse density on the decreasing branch.
        tail_area (str or Callable): Tail term of the base strip, by name
            ("erfc", "gaussian") or as a function of x1.
        eps (float): Bisection tolerance on x1.
        max_iter (int): Bisection iteration budget.
        search_interval (tuple[float, float]): Interval searched for x1.

    Returns
    -------
        float: The calibrated x1.

    Raises
    ------
        ConfigurationError: If n is not a positive integer.
        RootNotFound: If bisection fails to converge or loses its bracket.
    """
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
        raise ConfigurationError(f"number of layers must be a positive integer, got {n}")
    n = int(n)
    tail = resolve_tail_area(tail_area)

    def objective(x1: float) -> float:
        return area_difference(x1, n, pfunc, inv_pfunc, tail)

    lower, upper = search_interval
    result = bisect(objective, eps, max_iter, lower, upper)
    x1 = result.unwrap()
    logger.debug("Solved x1=%.12g for n=%d in %d iterations", x1, n, result.iterations)
    return x1


def calibrate(
    n: int = DEFAULT_LAYERS,
    density: GaussianDensity = STANDARD_NORMAL,
    tail_area: str | TailArea = "erfc",
    eps: float = DEFAULT_EPS,
    max_iter: int = DEFAULT_MAX_ITER,
    search_interval: tuple[float, float] = DEFAULT_SEARCH_INTERVAL,
) -> ZigguratTable:
    """Solve for ``x1`` and build the matching table.

    Any failure raises before a table exists, so callers never see a
    partially calibrated geometry.

    The sampler evaluates the standard normal density and tail, so only
    ``N(0, 1)`` tables can be built; scale samples with ``mu + sigma * x``
    instead.

    Raises
    ------
        ConfigurationError: If density is not the standard normal, or the
            layer count is invalid.
        RootNotFound: If x1 cannot be solved.
    """
    if density != STANDARD_NORMAL:
        raise ConfigurationError(
            f"only the standard normal can be calibrated, got mu={density.mu}, "
            f"sigma={density.sigma}; use mu + sigma * x to scale samples"
        )
    x1 = solve_x1(
        n,
        density.pdf,
        density.inverse_pdf,
        tail_area=tail_area,
        eps=eps,
        max_iter=max_iter,
        search_interval=search_interval,
    )
    y1 = density.pdf(x1)
    if not y1 > 0:
        raise ConfigurationError(f"density vanishes at the solved x1={x1}")
    area = base_layer_area(x1, density.pdf, tail_area)
    table = generate_table(n, y1, area, density.pdf, density.inverse_pdf)
    logger.info(
        "Calibrated %d-layer ziggurat: x1=%.10g, layer area=%.10g", n, x1, area
    )
    return table
