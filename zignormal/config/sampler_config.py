"""Sampler configuration.

Convenience functions for getting the default configuration and for reading
overrides from YAML files.
"""

import logging
import warnings
from pathlib import Path
from typing import IO

import yaml

from zignormal.errors import ConfigurationError
from zignormal.ziggurat.calibration import TAIL_AREAS

logger = logging.getLogger(__name__)


def get_default_sampler_config() -> dict:
    """Get the default sampler configuration.

    Returns
    -------
    dict
        Flat configuration dictionary:
        - 'n_layers': number of ziggurat layers
        - 'tail_area': tail term used when calibrating ('erfc' or 'gaussian')
        - 'eps', 'max_iter': bisection settings for the x1 search
        - 'seed': seed of the uniform source (None draws from OS entropy)
        - 'n_samples': number of deviates drawn by the CLI
        - 'max_tail_iterations': cap on rejected tail pairs (None = no cap)
    """
    return {
        "n_layers": 256,
        "tail_area": "erfc",
        "eps": 1e-5,
        "max_iter": 100,
        "seed": None,
        "n_samples": 100_000,
        "max_tail_iterations": None,
    }


def validate_sampler_config(config: dict) -> dict:
    """Coerce numeric values and check their ranges.

    YAML reads values such as ``1e-5`` as strings, so numbers are converted
    here before they reach the calibration code.

    Raises
    ------
        ConfigurationError: If a value is out of range.
    """
    n_layers = config["n_layers"]
    if isinstance(n_layers, bool) or not isinstance(n_layers, int) or n_layers < 1:
        raise ConfigurationError(f"n_layers must be a positive integer, got {n_layers}")
    if config["tail_area"] not in TAIL_AREAS:
        raise ConfigurationError(
            f"tail_area must be one of {sorted(TAIL_AREAS)}, got {config['tail_area']!r}"
        )
    try:
        config["eps"] = float(config["eps"])
        config["max_iter"] = int(config["max_iter"])
        config["n_samples"] = int(config["n_samples"])
        if config["max_tail_iterations"] is not None:
            config["max_tail_iterations"] = int(config["max_tail_iterations"])
        if config["seed"] is not None:
            config["seed"] = int(config["seed"])
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"invalid numeric sampler setting: {exc}") from exc
    if not config["eps"] > 0:
        raise ConfigurationError(f"eps must be positive, got {config['eps']}")
    if config["max_iter"] < 1:
        raise ConfigurationError(f"max_iter must be at least 1, got {config['max_iter']}")
    if config["n_samples"] < 0:
        raise ConfigurationError(
            f"n_samples must be non-negative, got {config['n_samples']}"
        )
    cap = config["max_tail_iterations"]
    if cap is not None and cap < 1:
        raise ConfigurationError(f"max_tail_iterations must be at least 1, got {cap}")
    return config


def load_sampler_config(yaml_config_path: str | Path | IO | None = None) -> dict:
    """Load a sampler configuration from YAML, merged over the defaults.

    Keys are case insensitive. Unknown keys are ignored with a warning.

    Arguments
    ---------
        yaml_config_path (str, Path or file-like, optional): YAML file to read.
            None returns the defaults.

    Returns
    -------
        dict: Validated configuration.
    """
    config = get_default_sampler_config()
    if yaml_config_path is None:
        return validate_sampler_config(config)

    # Handle both file paths and file-like objects
    if hasattr(yaml_config_path, "read"):
        from_yaml = yaml.safe_load(yaml_config_path)
    else:
        with open(yaml_config_path, "rb") as f:
            from_yaml = yaml.safe_load(f)

    if from_yaml is None:
        from_yaml = {}
    if not isinstance(from_yaml, dict):
        raise ConfigurationError("sampler configuration must be a YAML mapping")

    overrides = {str(k).lower(): v for k, v in from_yaml.items()}
    for key, value in overrides.items():
        if key not in config:
            warnings.warn(
                f"Ignoring unknown sampler configuration key '{key}'.",
                UserWarning,
                stacklevel=2,
            )
            continue
        config[key] = value
    logger.debug("Loaded sampler config: %s", config)
    return validate_sampler_config(config)
