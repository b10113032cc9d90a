"""
Visualization of merge statistics.

Functions
---------
overlap_histogram
    Bar chart of merged pair counts per overlap length.
merge_rate_plot
    Stacked bar chart of merged vs unmerged pairs per sample.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd


def overlap_histogram(
    df: pd.DataFrame,
    *,
    samples: Optional[Sequence[str]] = None,
    title: Optional[str] = None,
    outpath: Optional[str | Path] = None,
    dpi: int = 200,
):
    """Plot the distribution of overlap lengths of merged pairs.

    Overlap length is the read length pair minus the fragment length, so
    this is the fragment length distribution seen from the read ends.

    Parameters
    ----------
    df : pd.DataFrame
        Overlap counts with overlap lengths as index and samples as
        columns (``MergePairedFASTQ.overlap_counts_df``).
    samples : sequence of str, optional
        Samples to include. Defaults to all columns, summed.
    title : str or None, default None
        Plot title.
    outpath : str, Path, or None, default None
        If provided, save the figure to this path.
    dpi : int, default 200
        Resolution for saved figure.

    Returns
    -------
    fig : matplotlib.figure.Figure
    ax : matplotlib.axes.Axes

    Raises
    ------
    ValueError
        If the input DataFrame is empty.
    """
    if df.empty:
        raise ValueError("overlap_histogram received an empty DataFrame.")

    cols = list(samples) if samples is not None else list(df.columns)
    counts = df[cols].sum(axis=1)
    overlaps = counts.index.to_numpy(dtype=int)
    values = counts.to_numpy(dtype=float)

    fig, ax = plt.subplots()
    ax.bar(overlaps, values, width=1.0, color="#33BBE2", edgecolor="none")

    # Weighted mean overlap
    if values.sum() > 0:
        mean_overlap = np.average(overlaps, weights=values)
        ax.axvline(mean_overlap, color="gray", linestyle="--", linewidth=0.8, alpha=0.6)

    ax.set_xlabel("Overlap length (bp)")
    ax.set_ylabel("Merged pairs")
    if title:
        ax.set_title(title)

    fig.tight_layout()
    if outpath is not None:
        fig.savefig(outpath, dpi=dpi)

    return fig, ax


def merge_rate_plot(
    df: pd.DataFrame,
    *,
    title: Optional[str] = None,
    outpath: Optional[str | Path] = None,
    dpi: int = 200,
):
    """Stacked bars of merged and unmerged pairs per sample.

    Parameters
    ----------
    df : pd.DataFrame
        Outcome counts with 'merged'/'unmerged' rows and samples as
        columns (``MergePairedFASTQ.outcome_counts_df``).
    """
    if df.empty:
        raise ValueError("merge_rate_plot received an empty DataFrame.")

    merged = df.loc["merged"].to_numpy(dtype=float) if "merged" in df.index else np.zeros(df.shape[1])
    unmerged = df.loc["unmerged"].to_numpy(dtype=float) if "unmerged" in df.index else np.zeros(df.shape[1])
    x = np.arange(df.shape[1])

    fig, ax = plt.subplots()
    ax.bar(x, merged, color="#3182bd", label="merged")
    ax.bar(x, unmerged, bottom=merged, color="#e34a33", label="unmerged")
    ax.set_xticks(x)
    ax.set_xticklabels(df.columns, rotation=45, ha="right")
    ax.set_ylabel("Read pairs")
    ax.legend(frameon=False)
    if title:
        ax.set_title(title)

    fig.tight_layout()
    if outpath is not None:
        fig.savefig(outpath, dpi=dpi)

    return fig, ax
