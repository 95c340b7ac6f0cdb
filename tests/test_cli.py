import numpy as np
import pandas as pd
import pytest
import yaml
from typer.testing import CliRunner

from zignormal.cli.zig import (
    app,
    build_sampler,
    collect_sampler_config,
    draw_samples,
)
from zignormal.errors import ConfigurationError
from zignormal.random_source import GeneratorSource

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "sampler.yaml"
    path.write_text(yaml.dump({"N_LAYERS": 32, "TAIL_AREA": "gaussian", "SEED": 5}))
    return path


def test_collect_packaged_config():
    config = collect_sampler_config()
    assert config["n_layers"] == 256
    assert config["tail_area"] == "erfc"
    assert config["eps"] == 1e-5
    assert config["seed"] is None


def test_collect_applies_overrides(config_file):
    config = collect_sampler_config(config_file, n_layers=64, seed=None)
    assert config["n_layers"] == 64
    assert config["tail_area"] == "gaussian"
    # None overrides are skipped
    assert config["seed"] == 5


def test_collect_validates_overrides():
    with pytest.raises(ConfigurationError):
        collect_sampler_config(tail_area="exponential")


def test_build_sampler(config_file):
    sampler = build_sampler(collect_sampler_config(config_file))
    assert sampler.table.n == 32
    assert isinstance(sampler.source, GeneratorSource)


@pytest.mark.parametrize("n_samples, chunk_size", [(25, 10), (10, 10), (0, 10)])
def test_draw_samples_chunks(n_samples, chunk_size, config_file):
    sampler = build_sampler(collect_sampler_config(config_file))
    samples = draw_samples(sampler, n_samples, chunk_size=chunk_size)
    assert samples.shape == (n_samples,)
    assert samples.dtype == np.float64


def test_table_command(tmp_path):
    output = tmp_path / "tables" / "zig.csv"
    result = runner.invoke(app, ["table", "-n", "64", "--output", str(output)])
    assert result.exit_code == 0, result.output
    assert "n=64 x1=" in result.output
    frame = pd.read_csv(output)
    assert list(frame.columns) == ["layer", "x", "y", "area"]
    assert len(frame) == 65


def test_table_command_with_config(config_file):
    result = runner.invoke(app, ["table", "--config-path", str(config_file)])
    assert result.exit_code == 0, result.output
    assert "n=32" in result.output


def test_table_command_rejects_unknown_tail():
    result = runner.invoke(app, ["table", "--tail-area", "exponential"])
    assert result.exit_code != 0
    assert isinstance(result.exception, ConfigurationError)


def test_draw_command(tmp_path):
    output = tmp_path / "samples.npy"
    result = runner.invoke(
        app, ["draw", "-o", str(output), "-s", "1000", "--seed", "1", "-l", "INFO"]
    )
    assert result.exit_code == 0, result.output
    samples = np.load(output)
    assert samples.shape == (1000,)
    assert np.all(np.isfinite(samples))


def test_draw_command_is_reproducible(tmp_path):
    first, second = tmp_path / "a.npy", tmp_path / "b.npy"
    for path in (first, second):
        result = runner.invoke(app, ["draw", "-o", str(path), "-s", "500", "--seed", "9"])
        assert result.exit_code == 0, result.output
    np.testing.assert_array_equal(np.load(first), np.load(second))


def test_draw_command_requires_output():
    result = runner.invoke(app, ["draw", "-s", "10"])
    assert result.exit_code != 0


def test_report_command(tmp_path):
    plot = tmp_path / "hist.png"
    result = runner.invoke(
        app, ["report", "-s", "5000", "--seed", "3", "--plot", str(plot)]
    )
    assert result.exit_code == 0, result.output
    assert "Ziggurat Gaussian Sampler Diagnostic Report" in result.output
    assert "Sample size: 5,000" in result.output
    assert plot.exists()


def test_report_command_rejects_too_few_samples_from_config(tmp_path):
    path = tmp_path / "sampler.yaml"
    path.write_text(yaml.dump({"N_SAMPLES": 1, "SEED": 1}))
    result = runner.invoke(app, ["report", "-c", str(path)])
    assert result.exit_code == 2
    assert "at least 2 samples" in result.output
