"""
Sentiment Time Series
=====================
Aligns per-document dictionary and LSS scores to publication dates and
smooths each series with locally weighted regression (LOWESS).

Smoothing is evaluated on a regular grid (daily by default) between the
first and last document date. The bandwidth `span` is the fraction of
documents used for each local fit; 0.1 keeps the curve responsive to
events while averaging out per-article noise.
"""

from typing import Dict, Optional, Sequence

import numpy as np
import pandas as pd
from statsmodels.nonparametric.smoothers_lowess import lowess

from news_sentiment.utils import get_logger

log = get_logger(__name__)


def align_scores(
    dates: pd.Series,
    scores: Dict[str, Sequence[float]],
) -> pd.DataFrame:
    """
    Put several per-document score vectors next to their dates.

    Parameters
    ----------
    dates : pd.Series
        Publication dates, one per document.
    scores : dict {name: sequence}
        Score vectors of the same length and document order as `dates`.

    Returns
    -------
    pd.DataFrame with a 'date' column plus one column per score,
    sorted by date.
    """
    n = len(dates)
    frame = {"date": pd.to_datetime(pd.Series(dates).reset_index(drop=True))}
    for name, values in scores.items():
        values = np.asarray(values, dtype=float)
        if len(values) != n:
            raise ValueError(
                f"Score '{name}' has {len(values)} values for {n} dates."
            )
        frame[name] = values
    df = pd.DataFrame(frame)
    return df.sort_values("date", kind="mergesort").reset_index(drop=True)


def smooth_scores(
    df: pd.DataFrame,
    columns: Optional[Sequence[str]] = None,
    span: float = 0.1,
    freq: str = "D",
    date_column: str = "date",
) -> pd.DataFrame:
    """
    LOWESS-smooth score columns onto a regular date grid.

    NaN scores are dropped per column before fitting. Same-day scores
    are averaged when ties would make the local fits singular. A column
    with fewer than three valid observations, or scores on fewer than
    five dates, is returned as all-NaN.

    Returns
    -------
    pd.DataFrame with the date grid and one smoothed column per score.
    """
    if not 0 < span <= 1:
        raise ValueError(f"span must be in (0, 1], got {span}")
    if df.empty:
        raise ValueError("Cannot smooth an empty series.")
    columns = list(columns) if columns is not None else [
        c for c in df.columns if c != date_column
    ]

    dates = pd.to_datetime(df[date_column])
    grid = pd.date_range(dates.min().normalize(), dates.max().normalize(),
                         freq=freq)
    origin = grid[0]
    x_grid = ((grid - origin) / pd.Timedelta(days=1)).to_numpy(dtype=float)
    x_all = ((dates - origin) / pd.Timedelta(days=1)).to_numpy(dtype=float)

    out = {date_column: grid}
    for col in columns:
        y = df[col].to_numpy(dtype=float)
        valid = ~np.isnan(y)
        if valid.sum() < 3:
            log.warning("Column '%s' has %d valid scores; not smoothed.",
                        col, int(valid.sum()))
            out[col] = np.full(len(grid), np.nan)
            continue
        out[col] = _lowess_on_grid(x_all[valid], y[valid], x_grid, span, col)
    return pd.DataFrame(out)


# Each local window must hold this many distinct dates, so that at least
# three of them keep a positive tricube weight.
_MIN_WINDOW_DATES = 5


def _lowess_on_grid(
    x: np.ndarray,
    y: np.ndarray,
    x_grid: np.ndarray,
    span: float,
    name: str,
) -> np.ndarray:
    """
    Local-linear LOWESS of y on x evaluated at x_grid.

    A window of span * n documents spans at least _MIN_WINDOW_DATES dates
    only if no date holds more than 1/_MIN_WINDOW_DATES of it. When many
    documents share a date, scores are averaged per date first. The span
    is widened when the window would still cover too few points.
    """
    n_neighbours = int(span * len(y) + 1e-10)
    max_ties = int(pd.Series(x).value_counts().max())
    if n_neighbours < _MIN_WINDOW_DATES * max_ties:
        daily = pd.Series(y).groupby(x).mean()
        log.warning("Column '%s': up to %d scores share one date and the "
                    "span covers %d; smoothing daily means instead.",
                    name, max_ties, n_neighbours)
        x, y = daily.index.to_numpy(dtype=float), daily.to_numpy(dtype=float)

    n = len(y)
    if n < _MIN_WINDOW_DATES:
        log.warning("Column '%s' has scores on %d dates; not smoothed.",
                    name, n)
        return np.full(len(x_grid), np.nan)

    frac = span
    if int(frac * n + 1e-10) < _MIN_WINDOW_DATES:
        frac = min(1.0, (_MIN_WINDOW_DATES + 0.5) / n)
        log.warning("Column '%s': span %.3f covers fewer than %d dates; "
                    "using %.3f.", name, span, _MIN_WINDOW_DATES, frac)

    fitted = lowess(y, x, frac=frac, it=0, xvals=x_grid)
    if not np.all(np.isfinite(fitted)):
        log.warning("Column '%s': LOWESS returned %d non-finite values.",
                    name, int((~np.isfinite(fitted)).sum()))
    return fitted


def series_correlation(smoothed: pd.DataFrame, a: str, b: str) -> float:
    """Pearson correlation between two smoothed series (NaN rows dropped)."""
    pair = smoothed[[a, b]].dropna()
    if len(pair) < 2:
        return float("nan")
    return float(pair[a].corr(pair[b]))
