#!/usr/bin/env -S uv run --script

import logging
from importlib.resources import as_file, files
from pathlib import Path
from pprint import pformat

import numpy as np
import tqdm
import typer

from zignormal.config import load_sampler_config, validate_sampler_config
from zignormal.diagnostics import diagnostic_report, format_report, plot_histogram
from zignormal.random_source import GeneratorSource
from zignormal.ziggurat import ZigguratSampler, calibrate

app = typer.Typer(add_completion=False)

log_level_option = typer.Option(
    "WARNING",
    "--log-level",
    "-l",
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    case_sensitive=False,
    show_default=True,
    rich_help_panel="Logging",
    metavar="LEVEL",
    autocompletion=lambda: ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
)

config_path_option = typer.Option(
    None, "--config-path", "-c", help="Path to the YAML sampler configuration."
)


def _setup_logging(log_level: str) -> logging.Logger:
    logging.basicConfig(
        level=log_level.upper(), format="%(asctime)s - %(levelname)s - %(message)s"
    )
    return logging.getLogger(__name__)


def collect_sampler_config(config_path: Path | None = None, **overrides) -> dict:
    """Load the sampler configuration and apply command line overrides.

    Without a path the packaged ``config_sampler.yaml`` is used. Overrides
    that are None are skipped.
    """
    if config_path is None:
        with as_file(files("zignormal.cli") / "config_sampler.yaml") as default_config:
            config = load_sampler_config(default_config)
    else:
        config = load_sampler_config(config_path)
    for key, value in overrides.items():
        if value is not None:
            config[key] = value
    return validate_sampler_config(config)


def build_sampler(config: dict) -> ZigguratSampler:
    table = calibrate(
        n=config["n_layers"],
        tail_area=config["tail_area"],
        eps=config["eps"],
        max_iter=config["max_iter"],
    )
    return ZigguratSampler(
        table=table,
        source=GeneratorSource(seed=config["seed"]),
        max_tail_iterations=config["max_tail_iterations"],
    )


def draw_samples(
    sampler: ZigguratSampler, n_samples: int, chunk_size: int = 10_000
) -> np.ndarray:
    """Draw ``n_samples`` deviates in chunks, showing a progress bar."""
    chunks = []
    remaining = n_samples
    n_chunks = -(-n_samples // chunk_size) if n_samples else 0
    for _ in tqdm.tqdm(range(n_chunks), desc="Drawing normal deviates", unit="chunk"):
        size = min(chunk_size, remaining)
        chunks.append(sampler.sample_n(size))
        remaining -= size
    if not chunks:
        return np.empty(0, dtype=np.float64)
    return np.concatenate(chunks)


@app.command()
def table(
    config_path: Path = config_path_option,
    n_layers: int = typer.Option(None, "--n-layers", "-n", min=1, help="Number of layers."),
    tail_area: str = typer.Option(
        None, "--tail-area", help="Tail term used for calibration (erfc, gaussian)."
    ),
    output: Path = typer.Option(None, "--output", "-o", help="CSV file for the table."),
    log_level: str = log_level_option,
):
    """
    Calibrate a ziggurat table and print or save its boundaries.
    """
    logger = _setup_logging(log_level)
    config = collect_sampler_config(config_path, n_layers=n_layers, tail_area=tail_area)
    logger.debug("SAMPLER CONFIG")
    logger.debug(pformat(config))

    zig_table = calibrate(
        n=config["n_layers"],
        tail_area=config["tail_area"],
        eps=config["eps"],
        max_iter=config["max_iter"],
    )
    typer.echo(f"n={zig_table.n} x1={zig_table.x1:.12g} layer_area={zig_table.layer_area:.12g}")
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        zig_table.to_frame().to_csv(output, index=False)
        logger.info("Saved table to: %s", output)


@app.command()
def draw(
    config_path: Path = config_path_option,
    output: Path = typer.Option(..., "--output", "-o", help="Output .npy file."),
    n_samples: int = typer.Option(
        None, "--n-samples", "-s", min=0, help="Number of deviates to draw."
    ),
    seed: int = typer.Option(None, "--seed", help="Seed of the uniform source."),
    log_level: str = log_level_option,
):
    """
    Draw standard normal deviates and save them as a numpy array.
    """
    logger = _setup_logging(log_level)
    config = collect_sampler_config(config_path, n_samples=n_samples, seed=seed)
    sampler = build_sampler(config)
    samples = draw_samples(sampler, config["n_samples"])
    output.parent.mkdir(parents=True, exist_ok=True)
    np.save(output, samples)
    logger.info(
        "Saved %d samples to %s (acceptance rate %.4f)",
        samples.size,
        output,
        sampler.stats.acceptance_rate,
    )


@app.command()
def report(
    config_path: Path = config_path_option,
    n_samples: int = typer.Option(
        None, "--n-samples", "-s", min=2, help="Number of deviates to draw."
    ),
    seed: int = typer.Option(None, "--seed", help="Seed of the uniform source."),
    plot: Path = typer.Option(None, "--plot", help="Save a histogram PNG here."),
    log_level: str = log_level_option,
):
    """
    Draw deviates and print a diagnostic report against N(0, 1).
    """
    _setup_logging(log_level)
    config = collect_sampler_config(config_path, n_samples=n_samples, seed=seed)
    if config["n_samples"] < 2:
        raise typer.BadParameter(
            f"report needs at least 2 samples, got {config['n_samples']}",
            param_hint="N_SAMPLES",
        )
    sampler = build_sampler(config)
    samples = draw_samples(sampler, config["n_samples"])
    typer.echo(format_report(diagnostic_report(samples)))
    if plot is not None:
        plot_histogram(samples, plot)


def main():  # pragma: no cover
    app()


if __name__ == "__main__":
    app()
