__version__ = "0.1.0"

from .errors import (
    ConfigurationError,
    DomainError,
    RootNotFound,
    SamplingError,
    ZigguratError,
)
from .random_source import GeneratorSource, SequenceSource, UniformSource
from .ziggurat import (
    ZigguratSampler,
    ZigguratTable,
    calibrate,
    get_standard_table,
    standard_normal,
)

__all__ = [
    "ZigguratError",
    "DomainError",
    "RootNotFound",
    "ConfigurationError",
    "SamplingError",
    "UniformSource",
    "GeneratorSource",
    "SequenceSource",
    "ZigguratSampler",
    "ZigguratTable",
    "calibrate",
    "get_standard_table",
    "standard_normal",
]
