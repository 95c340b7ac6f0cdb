"""Ziggurat tables, their calibration, and the sampler built on them."""

from .table import LayerBoundary, ZigguratTable, generate_table, layer_edges
from .calibration import (
    DEFAULT_LAYERS,
    TAIL_AREAS,
    area_difference,
    base_layer_area,
    calibrate,
    gaussian_tail_area,
    solve_x1,
    top_layer_area,
)
from .cache import clear_table_cache, get_standard_table
from .sampler import SamplerStats, ZigguratSampler, sample_tail, standard_normal

__all__ = [
    "LayerBoundary",
    "ZigguratTable",
    "generate_table",
    "layer_edges",
    "DEFAULT_LAYERS",
    "TAIL_AREAS",
    "area_difference",
    "base_layer_area",
    "top_layer_area",
    "gaussian_tail_area",
    "solve_x1",
    "calibrate",
    "get_standard_table",
    "clear_table_cache",
    "ZigguratSampler",
    "SamplerStats",
    "sample_tail",
    "standard_normal",
]
