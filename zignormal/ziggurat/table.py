"""Equal-area layer tables for the Ziggurat sampler.

A table with ``n`` layers holds ``n + 1`` boundaries ``(x_i, y_i)``. Boundary 0
is ``(x1, f(x1))``, the edge between the layered region and the tail; boundary
``n`` is the apex ``(0, f(0))``. Layer ``i`` spans heights ``y_i`` to
``y_{i+1}`` with width ``x_i``, so its area is ``x_i * (y_{i+1} - y_i)``. Every
layer and the base strip (the rectangle ``x1 * y1`` plus the tail beyond
``x1``) share the same area.
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np
import pandas as pd

from zignormal.errors import ConfigurationError, DomainError

logger = logging.getLogger(__name__)

DensityFunction = Callable[[float], float]


class LayerBoundary(NamedTuple):
    """Right edge ``x`` and height ``y`` of one layer."""

    x: float
    y: float


@dataclass(frozen=True)
class ZigguratTable:
    """Immutable Ziggurat geometry.

    Attributes
    ----------
        boundaries (tuple[LayerBoundary, ...]): n + 1 boundaries, x strictly
            decreasing from x1 to 0, y strictly increasing up to the peak.
        x1 (float): Boundary between the base rectangle and the tail.
        layer_area (float): Area shared by every layer and the base strip.
        n (int): Number of layers above the base strip.
    """

    boundaries: tuple[LayerBoundary, ...]
    x1: float
    layer_area: float
    n: int
    xs: np.ndarray = field(init=False, repr=False, compare=False)
    ys: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if len(self.boundaries) != self.n + 1:
            raise ConfigurationError(
                f"table for {self.n} layers needs {self.n + 1} boundaries, "
                f"got {len(self.boundaries)}"
            )
        xs = np.array([b.x for b in self.boundaries], dtype=np.float64)
        ys = np.array([b.y for b in self.boundaries], dtype=np.float64)
        xs.setflags(write=False)
        ys.setflags(write=False)
        object.__setattr__(self, "xs", xs)
        object.__setattr__(self, "ys", ys)

    @property
    def y1(self) -> float:
        return self.boundaries[0].y

    @property
    def peak(self) -> float:
        return self.boundaries[-1].y

    @property
    def base_width(self) -> float:
        """Width of a rectangle of height y1 carrying the base strip's area."""
        return self.layer_area / self.y1

    @property
    def tail_area(self) -> float:
        """Area of the base strip beyond x1."""
        return self.layer_area - self.x1 * self.y1

    def layer_areas(self) -> np.ndarray:
        """Area of each of the n layers."""
        return self.xs[:-1] * np.diff(self.ys)

    def validate(self) -> "ZigguratTable":
        """Check monotonicity of the boundaries.

        Raises
        ------
            ConfigurationError: If x is not strictly decreasing or y is not
            strictly increasing.
        """
        if not np.all(np.isfinite(self.xs)) or not np.all(np.isfinite(self.ys)):
            raise ConfigurationError("table contains non-finite boundaries")
        bad_x = np.nonzero(np.diff(self.xs) >= 0)[0]
        if bad_x.size:
            raise ConfigurationError(
                f"x is not strictly decreasing at layer {int(bad_x[0])}"
            )
        bad_y = np.nonzero(np.diff(self.ys) <= 0)[0]
        if bad_y.size:
            raise ConfigurationError(
                f"y is not strictly increasing at layer {int(bad_y[0])}"
            )
        return self

    def to_frame(self) -> pd.DataFrame:
        """Boundaries as a DataFrame with one row per boundary.

        The ``area`` column holds the area of the layer starting at that
        boundary and is NaN on the apex row.
        """
        areas = np.append(self.layer_areas(), np.nan)
        return pd.DataFrame(
            {
                "layer": np.arange(self.n + 1),
                "x": self.xs,
                "y": self.ys,
                "area": areas,
            }
        )


def generate_table(
    n: int,
    y1: float,
    layer_area: float,
    pfunc: DensityFunction,
    inv_pfunc: DensityFunction,
) -> ZigguratTable:
    """Build a table by stacking equal-area layers from the base upwards.

    Starting at ``(inv_pfunc(y1), y1)`` each step sets
    ``y_{i+1} = y_i + layer_area / x_i`` and ``x_{i+1} = inv_pfunc(y_{i+1})``.
    The last boundary is the apex ``(0, pfunc(0))``.

    Arguments
    ---------
        n (int): Number of layers, at least 1.
        y1 (float): Height of the base boundary.
        layer_area (float): Common layer area.
        pfunc (Callable): Density function.
        inv_pfunc (Callable): Inverse of the density on its decreasing branch.

    Returns
    -------
        ZigguratTable: Validated table.

    Raises
    ------
        ConfigurationError: If n or layer_area are not positive, or if the
            boundaries come out non monotonic.
        DomainError: If a layer height leaves the domain of inv_pfunc, i.e.
            the layers reach the peak before n of them are stacked.
    """
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
        raise ConfigurationError(f"number of layers must be a positive integer, got {n}")
    if not (math.isfinite(layer_area) and layer_area > 0):
        raise ConfigurationError(f"layer area must be positive, got {layer_area}")
    n = int(n)

    x = inv_pfunc(y1)
    y = y1
    boundaries = [LayerBoundary(x, y)]
    for i in range(1, n):
        if x <= 0.0:
            raise ConfigurationError(
                f"layers reached the apex after {i} of {n} layers"
            )
        y = y + layer_area / x
        try:
            x = inv_pfunc(y)
        except DomainError as exc:
            raise DomainError(
                f"layer {i} of {n}: height {y} is outside the density's range "
                f"(layer area {layer_area} too large for this many layers)",
                y,
            ) from exc
        boundaries.append(LayerBoundary(x, y))
    boundaries.append(LayerBoundary(0.0, pfunc(0.0)))

    table = ZigguratTable(
        boundaries=tuple(boundaries), x1=boundaries[0].x, layer_area=layer_area, n=n
    )
    logger.debug("Generated %d-layer table with x1=%.10g", n, table.x1)
    return table.validate()


def layer_edges(
    n: int,
    x1: float,
    layer_area: float,
    pfunc: DensityFunction,
    inv_pfunc: DensityFunction,
) -> list[LayerBoundary]:
    """Run the layer recurrence for a trial ``x1`` without validating it.

    Used while searching for ``x1``, where most trial values give layers that
    either overshoot the peak or never get near it.

    A step with zero area keeps the previous width. Once a step lands at or
    above the peak (or starts from width 0) the remaining boundaries are the
    apex, so ``n + 1`` boundaries always come back.
    """
    peak = pfunc(0.0)
    apex = LayerBoundary(0.0, peak)
    x, y = x1, pfunc(x1)
    edges = [LayerBoundary(x, y)]
    while len(edges) < n + 1:
        if x <= 0.0:
            edges.append(apex)
            continue
        y_next = y + layer_area / x
        if y_next >= peak:
            x, y = apex
        elif y_next != y:
            x, y = inv_pfunc(y_next), y_next
        edges.append(LayerBoundary(x, y))
    return edges
