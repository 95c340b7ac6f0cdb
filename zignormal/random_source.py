"""Uniform random sources consumed by the Ziggurat sampler.

The sampler only needs ``next_float()`` and ``next_pair()``. Anything with
those two methods can be used; two adapters are provided here.
"""

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

import numpy as np

from zignormal.errors import SamplingError


@runtime_checkable
class UniformSource(Protocol):
    """Protocol for uniform random sources.

    ``next_float`` returns a value in [0, 1). Values that are passed through a
    logarithm by the tail sampler must be nonzero, so sources should exclude 0
    where they can.
    """

    def next_float(self) -> float: ...

    def next_pair(self) -> tuple[float, float]: ...


class GeneratorSource:
    """Uniform source backed by a :class:`numpy.random.Generator`.

    Exact zeros are redrawn, so every value lies in the open interval (0, 1).

    Example:
        >>> source = GeneratorSource(seed=42)
        >>> 0.0 < source.next_float() < 1.0
        True
    """

    def __init__(
        self, seed: int | None = None, rng: np.random.Generator | None = None
    ):
        if rng is not None and seed is not None:
            raise ValueError("Pass either seed or rng, not both.")
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def next_float(self) -> float:
        u = self.rng.random()
        while u == 0.0:
            u = self.rng.random()
        return float(u)

    def next_pair(self) -> tuple[float, float]:
        return self.next_float(), self.next_float()


class SequenceSource:
    """Replays a fixed sequence of uniform values.

    Useful to reproduce a run exactly from recorded draws. Raises
    :class:`~zignormal.errors.SamplingError` once the sequence is used up.
    """

    def __init__(self, values: Iterable[float]):
        self.values = [float(v) for v in values]
        for v in self.values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"uniform values must lie in [0, 1), got {v}")
        self.position = 0

    @property
    def remaining(self) -> int:
        return len(self.values) - self.position

    def next_float(self) -> float:
        if self.position >= len(self.values):
            raise SamplingError(
                f"uniform sequence exhausted after {len(self.values)} draws"
            )
        u = self.values[self.position]
        self.position += 1
        return u

    def next_pair(self) -> tuple[float, float]:
        return self.next_float(), self.next_float()
