"""Statistical diagnostics for batches of normal deviates."""

import logging
from pathlib import Path

import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from scipy import stats

logger = logging.getLogger(__name__)

REPORT_QUANTILES = (0.001, 0.01, 0.1, 0.5, 0.9, 0.99, 0.999)
REPORT_TAIL_SIGMAS = (2.0, 3.0, 3.5, 4.0)


def _binned_chisquare(samples: np.ndarray, n_bins: int = 50) -> tuple[float, float]:
    # open-ended outer bins, sparse bins dropped
    bins = np.linspace(-4, 4, n_bins + 1)
    bins[0] = -np.inf
    bins[-1] = np.inf
    observed, _ = np.histogram(samples, bins=bins)
    expected = samples.size * np.diff(stats.norm.cdf(bins))
    mask = expected > 5
    if mask.sum() < 2:
        return float("nan"), float("nan")
    observed, expected = observed[mask], expected[mask]
    # chisquare wants matching totals
    expected = expected * observed.sum() / expected.sum()
    chi2, pvalue = stats.chisquare(observed, expected)
    return chi2, pvalue


def diagnostic_report(samples: np.ndarray) -> dict:
    """Compare a sample against N(0, 1).

    Arguments
    ---------
        samples (np.ndarray): One dimensional array of deviates.

    Returns
    -------
        dict: 'n', 'moments' (mean, std, variance, skewness, excess kurtosis),
        'quantiles' and 'tail_coverage' (observed vs expected), 'ks' and
        'chisquare' test results, and 'min' / 'max'.
    """
    samples = np.asarray(samples, dtype=np.float64)
    if samples.ndim != 1 or samples.size < 2:
        raise ValueError("diagnostic_report needs a 1-d array with at least 2 samples")

    ks_stat, ks_pvalue = stats.kstest(samples, "norm")
    chi2, chi2_pvalue = _binned_chisquare(samples)

    return {
        "n": int(samples.size),
        "moments": {
            "mean": float(np.mean(samples)),
            "std": float(np.std(samples, ddof=1)),
            "variance": float(np.var(samples, ddof=1)),
            "skewness": float(stats.skew(samples)),
            "kurtosis": float(stats.kurtosis(samples)),
        },
        "quantiles": {
            q: {
                "observed": float(np.percentile(samples, q * 100)),
                "expected": float(stats.norm.ppf(q)),
            }
            for q in REPORT_QUANTILES
        },
        "tail_coverage": {
            sigma: {
                "observed": float(np.mean(np.abs(samples) > sigma)),
                "expected": float(2 * stats.norm.sf(sigma)),
            }
            for sigma in REPORT_TAIL_SIGMAS
        },
        "ks": {"statistic": float(ks_stat), "pvalue": float(ks_pvalue)},
        "chisquare": {"statistic": float(chi2), "pvalue": float(chi2_pvalue)},
        "min": float(np.min(samples)),
        "max": float(np.max(samples)),
    }


def format_report(report: dict) -> str:
    """Render :func:`diagnostic_report` output as text."""
    lines = ["=" * 60, "Ziggurat Gaussian Sampler Diagnostic Report", "=" * 60]
    lines.append(f"\nSample size: {report['n']:,}")

    m = report["moments"]
    lines.append("\nMoments:")
    lines.append(f"  Mean:     {m['mean']:+.6f}  (expected: 0)")
    lines.append(f"  Std:      {m['std']:.6f}  (expected: 1)")
    lines.append(f"  Variance: {m['variance']:.6f}  (expected: 1)")
    lines.append(f"  Skewness: {m['skewness']:+.6f}  (expected: 0)")
    lines.append(f"  Kurtosis: {m['kurtosis']:+.6f}  (expected: 0)")

    lines.append("\nQuantiles:")
    for q, v in report["quantiles"].items():
        lines.append(
            f"  {q * 100:5.1f}%: {v['observed']:+.4f}  (expected: {v['expected']:+.4f})"
        )

    lines.append("\nTail coverage:")
    for sigma, v in report["tail_coverage"].items():
        lines.append(
            f"  |x| > {sigma}: {v['observed']:.6f}  (expected: {v['expected']:.6f})"
        )

    lines.append("\nExtreme values:")
    lines.append(f"  Min: {report['min']:.4f}")
    lines.append(f"  Max: {report['max']:.4f}")

    lines.append("\nStatistical tests:")
    lines.append(
        f"  KS test:     statistic={report['ks']['statistic']:.4f}, "
        f"p-value={report['ks']['pvalue']:.4f}"
    )
    lines.append(
        f"  Chi2 test:   statistic={report['chisquare']['statistic']:.2f}, "
        f"p-value={report['chisquare']['pvalue']:.4f}"
    )
    lines.append("=" * 60)
    return "\n".join(lines)


def plot_histogram(samples: np.ndarray, path: str | Path, bins: int = 100) -> Path:
    """Save a density histogram of ``samples`` with the N(0, 1) curve on top."""
    path = Path(path)
    # a detached Agg figure leaves the process-wide backend alone
    fig = Figure(figsize=(8, 5))
    FigureCanvasAgg(fig)
    ax = fig.add_subplot()
    ax.hist(samples, bins=bins, density=True, alpha=0.6, label="ziggurat samples")
    grid = np.linspace(min(-4.5, np.min(samples)), max(4.5, np.max(samples)), 400)
    ax.plot(grid, stats.norm.pdf(grid), "k-", lw=1.5, label="N(0, 1) density")
    ax.set_xlabel("x")
    ax.set_ylabel("density")
    ax.legend()
    fig.tight_layout()
    fig.savefig(path)
    logger.info("Saved histogram to %s", path)
    return path
