from .sampler_config import (
    get_default_sampler_config,
    load_sampler_config,
    validate_sampler_config,
)

__all__ = [
    "get_default_sampler_config",
    "load_sampler_config",
    "validate_sampler_config",
]
