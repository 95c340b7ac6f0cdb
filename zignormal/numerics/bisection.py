"""Bisection root finder returning an explicit result object."""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

from zignormal.errors import ConfigurationError, RootNotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RootResult:
    """Outcome of a root search.

    Exactly one of ``value`` and ``error`` is set.
    """

    value: float | None
    iterations: int
    error: RootNotFound | None = None

    @property
    def found(self) -> bool:
        return self.error is None

    def unwrap(self) -> float:
        """Return the root or raise the carried :class:`RootNotFound`."""
        if self.error is not None:
            raise self.error
        return self.value


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def bisect(
    func: Callable[[float], float],
    eps: float,
    max_iter: int,
    a: float,
    b: float,
) -> RootResult:
    """Find a root of ``func`` between ``a`` and ``b`` by interval halving.

    The bounds may be given in either order. The search never extrapolates:
    if the endpoints of the current interval do not straddle a sign change the
    search fails.

    Arguments
    ---------
        func (Callable): Scalar function to find the root of.
        eps (float): Stop once the half width of the interval is below eps.
        max_iter (int): Maximum number of halvings.
        a (float): One end of the search interval.
        b (float): The other end.

    Returns
    -------
        RootResult: The midpoint of the final interval, or a failure carrying a
        RootNotFound error.
    """
    if not eps > 0:
        raise ConfigurationError(f"eps must be positive, got {eps}")
    if max_iter < 1:
        raise ConfigurationError(f"max_iter must be at least 1, got {max_iter}")

    lo, hi = (a, b) if a <= b else (b, a)
    f_lo, f_hi = func(lo), func(hi)

    for iteration in range(1, max_iter + 1):
        if math.isnan(f_lo) or math.isnan(f_hi) or _sign(f_lo) == _sign(f_hi):
            logger.debug(
                "bisect: no sign change on [%g, %g] (f=%g, %g)", lo, hi, f_lo, f_hi
            )
            return RootResult(
                value=None,
                iterations=iteration - 1,
                error=RootNotFound(
                    f"no sign change between {lo} and {hi}",
                    lower=lo,
                    upper=hi,
                    iterations=iteration - 1,
                ),
            )

        mid = 0.5 * (lo + hi)
        half_width = 0.5 * (hi - lo)
        f_mid = func(mid)
        if f_mid == 0 or half_width < eps:
            return RootResult(value=mid, iterations=iteration)

        if _sign(f_mid) == _sign(f_lo):
            lo, f_lo = mid, f_mid
        else:
            hi, f_hi = mid, f_mid

    return RootResult(
        value=None,
        iterations=max_iter,
        error=RootNotFound(
            f"bisection did not converge within {max_iter} iterations "
            f"(last interval [{lo}, {hi}])",
            lower=lo,
            upper=hi,
            iterations=max_iter,
        ),
    )
