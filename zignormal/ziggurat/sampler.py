"""Ziggurat sampler for the standard normal distribution.

One draw proceeds as follows, consuming uniforms from the source in this
order:

1. ``u_k``: pick one of ``n + 1`` equally likely strips,
   ``k = floor(u_k * (n + 1))``. Strips ``0..n-1`` are the layers of the table,
   strip ``n`` is the base strip (rectangle below ``y1`` plus the tail).
2. ``u_x``: horizontal position inside the strip.
3. Layer ``k``: ``x = u_x * x_k``. Accept if ``x < x_{k+1}`` (the point lies
   under the curve for sure). Otherwise draw ``u_y``, set
   ``y = y_k + u_y * (y_{k+1} - y_k)`` and accept if ``y < f(x)``; on rejection
   start over at step 1.
4. Base strip: ``x = u_x * layer_area / y1``. Accept if ``x < x1``, otherwise
   draw from the tail beyond ``x1`` with :func:`sample_tail` (pairs of
   uniforms).
5. ``u_s``: the result is negated when ``u_s < 0.5``.

For a normal with mean ``mu`` and standard deviation ``sigma`` use
``mu + sigma * x``.
"""

import logging
import math
from dataclasses import dataclass

import numpy as np

from zignormal.errors import ConfigurationError, DomainError, SamplingError
from zignormal.random_source import GeneratorSource, UniformSource
from zignormal.ziggurat.cache import get_standard_table
from zignormal.ziggurat.table import ZigguratTable

logger = logging.getLogger(__name__)

_INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)


def _neg_log(u: float) -> float:
    if not u > 0.0:
        raise DomainError(f"cannot take the logarithm of uniform draw {u}", u)
    return -math.log(u)


def sample_tail(
    x1: float, source: UniformSource, max_iterations: int | None = None
) -> float:
    """Draw from the standard normal tail beyond ``x1`` (Marsaglia 1964).

    Repeatedly draws ``(u1, u2)`` and sets ``x = -ln(u1) / x1``,
    ``y = -ln(u2)``; returns ``x1 + x`` once ``2 y > x^2``.

    Arguments
    ---------
        x1 (float): Tail boundary, must be positive.
        source (UniformSource): Source of uniform pairs.
        max_iterations (int, optional): Give up after this many rejected
            pairs. None (the default) retries until acceptance.

    Returns
    -------
        float: A value >= x1 (no sign applied).

    Raises
    ------
        DomainError: If x1 is not positive or a draw is exactly 0.
        SamplingError: If max_iterations pairs were all rejected.
    """
    if not x1 > 0.0:
        raise DomainError(f"tail boundary must be positive, got {x1}", x1)
    attempts = 0
    while True:
        u1, u2 = source.next_pair()
        x = _neg_log(u1) / x1
        y = _neg_log(u2)
        if 2.0 * y > x * x:
            return x1 + x
        attempts += 1
        if max_iterations is not None and attempts >= max_iterations:
            raise SamplingError(
                f"tail sampler rejected {attempts} consecutive pairs beyond x1={x1}"
            )


@dataclass
class SamplerStats:
    """Counters describing how draws were resolved."""

    draws: int = 0
    attempts: int = 0
    fast_accepts: int = 0
    wedge_accepts: int = 0
    wedge_rejections: int = 0
    base_accepts: int = 0
    tail_draws: int = 0

    @property
    def acceptance_rate(self) -> float:
        """Fraction of strip attempts that produced a value."""
        if self.attempts == 0:
            return float("nan")
        return self.draws / self.attempts


class ZigguratSampler:
    """Standard normal sampler driven by a :class:`ZigguratTable`.

    Arguments
    ---------
        table (ZigguratTable, optional): Table to sample from. Defaults to the
            shared 256-layer table.
        source (UniformSource, optional): Uniform source. Defaults to a fresh
            :class:`GeneratorSource`.
        max_tail_iterations (int, optional): Cap on rejected tail pairs per
            draw. None means no cap.

    Raises
    ------
        ConfigurationError: If the table was not built for the standard
            normal density.

    Example:
        >>> sampler = ZigguratSampler(source=GeneratorSource(seed=1))
        >>> samples = sampler.sample_n(1000)
        >>> samples.shape
        (1000,)
    """

    def __init__(
        self,
        table: ZigguratTable | None = None,
        source: UniformSource | None = None,
        max_tail_iterations: int | None = None,
    ):
        self.table = table if table is not None else get_standard_table()
        if not math.isclose(self.table.peak, _INV_SQRT_2PI, rel_tol=1e-12):
            raise ConfigurationError(
                f"table apex {self.table.peak} is not the standard normal peak "
                f"{_INV_SQRT_2PI}; the sampler only draws from N(0, 1)"
            )
        self.source = source if source is not None else GeneratorSource()
        self.max_tail_iterations = max_tail_iterations
        self.stats = SamplerStats()
        # plain lists index faster than numpy arrays for scalar access
        self._xs = [b.x for b in self.table.boundaries]
        self._ys = [b.y for b in self.table.boundaries]

    def sample_magnitude(self) -> float:
        """Draw ``|X|`` for ``X ~ N(0, 1)`` (steps 1-4, no sign)."""
        x = self._magnitude()
        self.stats.draws += 1
        return x

    def _magnitude(self) -> float:
        table = self.table
        n = table.n
        xs, ys = self._xs, self._ys
        next_float = self.source.next_float
        while True:
            self.stats.attempts += 1
            k = min(int(next_float() * (n + 1)), n)
            u_x = next_float()

            if k == n:
                x = u_x * table.base_width
                if x < table.x1:
                    self.stats.base_accepts += 1
                    return x
                self.stats.tail_draws += 1
                return sample_tail(table.x1, self.source, self.max_tail_iterations)

            x = u_x * xs[k]
            if x < xs[k + 1]:
                self.stats.fast_accepts += 1
                return x

            y = ys[k] + next_float() * (ys[k + 1] - ys[k])
            if y < _INV_SQRT_2PI * math.exp(-0.5 * x * x):
                self.stats.wedge_accepts += 1
                return x
            self.stats.wedge_rejections += 1

    def sample(self) -> float:
        """Draw one standard normal deviate."""
        x = self.sample_magnitude()
        return -x if self.source.next_float() < 0.5 else x

    def sample_n(self, size: int) -> np.ndarray:
        """Draw ``size`` deviates into a float64 array."""
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        out = np.empty(size, dtype=np.float64)
        for i in range(size):
            out[i] = self.sample()
        return out

    def __iter__(self):
        while True:
            yield self.sample()


def standard_normal(
    source: UniformSource | None = None, size: int | None = None
) -> float | np.ndarray:
    """Draw from N(0, 1) with the shared 256-layer table.

    Arguments
    ---------
        source (UniformSource, optional): Uniform source. Defaults to a fresh
            :class:`GeneratorSource` seeded from OS entropy.
        size (int, optional): Number of draws. None returns a single float.

    Returns
    -------
        float or np.ndarray: One deviate, or an array of ``size`` deviates.
    """
    sampler = ZigguratSampler(source=source)
    if size is None:
        return sampler.sample()
    return sampler.sample_n(size)
