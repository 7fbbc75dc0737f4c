"""
Publication-quality visualizations for News Sentiment Scaling.

Figures generated:
    01_dictionary_series.png   - Dictionary scores with LOWESS trend
    02_lss_series.png          - LSS scores with LOWESS trend
    03_comparison.png          - Both smoothed series on one axis
    04_lss_terms.png           - LSS coefficients vs term frequency

Author: Jose Orlando Bobadilla Fuentes, CQF
"""
import os
from typing import Dict, Optional, Sequence

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use("Agg")                     # headless rendering
import matplotlib.pyplot as plt
import matplotlib.dates as mdates

NAVY = "#1a1a2e"; TEAL = "#16697a"; CORAL = "#db6400"
GOLD = "#c5a880"; SLATE = "#4a4e69"
SERIES_COLORS = {"dictionary": TEAL, "lss": CORAL}

plt.rcParams.update({
    "figure.facecolor": "white", "axes.facecolor": "white",
    "axes.grid": True, "grid.alpha": 0.3, "grid.linestyle": "--",
    "axes.spines.top": False, "axes.spines.right": False,
    "savefig.facecolor": "white",
})

LABELS = {"dictionary": "Dictionary (LSD)", "lss": "LSS"}


def _wm(fig):
    fig.text(0.99, 0.01, "J. Bobadilla | CQF", fontsize=7,
             color="gray", alpha=0.5, ha="right", va="bottom")


def _save(fig, save_path: Optional[str], dpi: int = 150) -> None:
    if save_path:
        folder = os.path.dirname(save_path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        fig.savefig(save_path, dpi=dpi, bbox_inches="tight")


def _mark_reference(ax, reference_date: Optional[str]) -> None:
    if reference_date is None:
        return
    ref = pd.Timestamp(reference_date)
    ax.axvline(ref, color=SLATE, linestyle="--", linewidth=1.2)
    ax.text(ref, 0.98, f" {ref.date()}", transform=ax.get_xaxis_transform(),
            fontsize=8, color=SLATE, va="top", ha="left")


def _date_axis(ax) -> None:
    ax.xaxis.set_major_locator(mdates.AutoDateLocator())
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%Y-%m"))


def plot_sentiment_series(
    scores: pd.DataFrame,
    smoothed: pd.DataFrame,
    column: str,
    reference_date: Optional[str] = None,
    ylim: Optional[Sequence[float]] = (-2.0, 2.0),
    figsize: tuple = (12, 5),
    save_path: Optional[str] = None,
    dpi: int = 150,
) -> plt.Figure:
    """
    Per-document scores as a scatter with the smoothed trend on top.

    Parameters
    ----------
    scores : pd.DataFrame
        Columns 'date' and `column`, one row per document.
    smoothed : pd.DataFrame
        Columns 'date' and `column` on a regular grid.
    """
    color = SERIES_COLORS.get(column, NAVY)
    fig, ax = plt.subplots(figsize=figsize)
    ax.scatter(scores["date"], scores[column], s=4, alpha=0.15,
               color=color, edgecolors="none", label="Documents")
    ax.plot(smoothed["date"], smoothed[column], color=NAVY, lw=2,
            label="LOWESS")
    ax.axhline(0, color="black", lw=0.5)
    _mark_reference(ax, reference_date)
    if ylim is not None:
        ax.set_ylim(*ylim)
    ax.set_title(f"Sentiment over time: {LABELS.get(column, column)}",
                 fontweight="bold")
    ax.set_xlabel("Date"); ax.set_ylabel("Standardized score")
    ax.legend(loc="lower left", fontsize=9)
    _date_axis(ax)
    fig.autofmt_xdate()
    _wm(fig)
    plt.tight_layout()
    _save(fig, save_path, dpi)
    return fig


def plot_sentiment_comparison(
    smoothed: pd.DataFrame,
    columns: Sequence[str] = ("dictionary", "lss"),
    reference_date: Optional[str] = None,
    correlation: Optional[float] = None,
    figsize: tuple = (12, 5),
    save_path: Optional[str] = None,
    dpi: int = 150,
) -> plt.Figure:
    """Smoothed series of several methods on one axis."""
    fig, ax = plt.subplots(figsize=figsize)
    for col in columns:
        ax.plot(smoothed["date"], smoothed[col], lw=2,
                color=SERIES_COLORS.get(col, None),
                label=LABELS.get(col, col))
    ax.axhline(0, color="black", lw=0.5)
    _mark_reference(ax, reference_date)
    title = "Dictionary vs LSS sentiment (LOWESS)"
    if correlation is not None and np.isfinite(correlation):
        title += f"   r = {correlation:.2f}"
    ax.set_title(title, fontweight="bold")
    ax.set_xlabel("Date"); ax.set_ylabel("Standardized score")
    ax.legend(fontsize=10)
    _date_axis(ax)
    fig.autofmt_xdate()
    _wm(fig)
    plt.tight_layout()
    _save(fig, save_path, dpi)
    return fig


def plot_terms(
    terms: pd.DataFrame,
    n_label: int = 15,
    highlight: Optional[Sequence[str]] = None,
    figsize: tuple = (12, 8),
    save_path: Optional[str] = None,
    dpi: int = 150,
) -> plt.Figure:
    """
    LSS polarity coefficients against log term frequency.

    Labels the `n_label` most positive and most negative terms, the seed
    words, and any extra `highlight` terms.

    Parameters
    ----------
    terms : pd.DataFrame
        Columns [term, coef, frequency, is_seed], as returned by
        LatentSemanticScaling.terms_frame().
    """
    df = terms.copy()
    df["log_freq"] = np.log(df["frequency"].clip(lower=1))

    fig, ax = plt.subplots(figsize=figsize)
    ax.scatter(df["coef"], df["log_freq"], s=10, color="lightgray",
               edgecolors="none")

    ranked = df.sort_values("coef")
    labelled = set(ranked["term"].head(n_label)) | set(ranked["term"].tail(n_label))
    labelled |= set(df.loc[df["is_seed"], "term"])
    if highlight:
        labelled |= set(highlight) & set(df["term"])

    for _, row in df[df["term"].isin(labelled)].iterrows():
        if row["is_seed"]:
            color = NAVY
        else:
            color = TEAL if row["coef"] > 0 else CORAL
        ax.scatter(row["coef"], row["log_freq"], s=18, color=color)
        ax.annotate(row["term"], (row["coef"], row["log_freq"]),
                    xytext=(3, 3), textcoords="offset points",
                    fontsize=8, color=color)

    ax.axvline(0, color="black", lw=0.5)
    ax.set_title("LSS term polarity", fontweight="bold")
    ax.set_xlabel("Polarity coefficient"); ax.set_ylabel("log(frequency)")
    _wm(fig)
    plt.tight_layout()
    _save(fig, save_path, dpi)
    return fig


def save_all(
    scores: pd.DataFrame,
    smoothed: pd.DataFrame,
    terms: pd.DataFrame,
    out_dir: str,
    reference_date: Optional[str] = None,
    correlation: Optional[float] = None,
    n_label: int = 15,
    dpi: int = 150,
) -> Dict[str, str]:
    """Render every figure into out_dir and close them. Returns paths."""
    os.makedirs(out_dir, exist_ok=True)
    paths = {
        "dictionary": os.path.join(out_dir, "01_dictionary_series.png"),
        "lss": os.path.join(out_dir, "02_lss_series.png"),
        "comparison": os.path.join(out_dir, "03_comparison.png"),
        "terms": os.path.join(out_dir, "04_lss_terms.png"),
    }
    figs = [
        plot_sentiment_series(scores, smoothed, "dictionary", reference_date,
                              save_path=paths["dictionary"], dpi=dpi),
        plot_sentiment_series(scores, smoothed, "lss", reference_date,
                              save_path=paths["lss"], dpi=dpi),
        plot_sentiment_comparison(smoothed, reference_date=reference_date,
                                  correlation=correlation,
                                  save_path=paths["comparison"], dpi=dpi),
        plot_terms(terms, n_label=n_label, save_path=paths["terms"], dpi=dpi),
    ]
    for fig in figs:
        plt.close(fig)
    return paths
