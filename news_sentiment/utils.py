"""
utils.py
--------
Logging, timing decorators, and shared helper functions.
"""

import os
import logging
import random
import time
import functools
from datetime import datetime
from pathlib import Path
from typing import Optional

import numpy as np


def get_logger(name: str, log_dir: Optional[str] = None,
               level: Optional[str] = None) -> logging.Logger:
    """
    Return a named logger writing to both stdout and a daily log file.

    Parameters
    ----------
    name    : Logger name (typically the module __name__).
    log_dir : Directory for log files (default: LOG_DIR env or outputs/logs).
    level   : Logging level string (default: LOG_LEVEL env or "INFO").

    Returns
    -------
    logging.Logger
    """
    log_dir = log_dir or os.getenv("LOG_DIR", "outputs/logs")
    level = level or os.getenv("LOG_LEVEL", "INFO")
    logger = logging.getLogger(name)

    if logger.handlers:          # avoid duplicate handlers on re-import
        return logger

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    # File handler
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    log_file = os.path.join(
        log_dir, f"news_sentiment_{datetime.now().strftime('%Y%m%d')}.log"
    )
    fh = logging.FileHandler(log_file)
    fh.setFormatter(fmt)
    logger.addHandler(fh)

    return logger


def set_log_level(level: str) -> None:
    """Apply a level to every logger already created by get_logger."""
    lvl = getattr(logging, level.upper(), logging.INFO)
    for name in list(logging.root.manager.loggerDict):
        if name == "main" or name.startswith("news_sentiment"):
            logging.getLogger(name).setLevel(lvl)


def timeit(func):
    """Decorator that logs the execution time of any function."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__)
        t0 = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - t0
        logger.debug("%s completed in %.3f s", func.__qualname__, elapsed)
        return result
    return wrapper


def set_random_seed(seed: int = 42) -> None:
    """Seed python and numpy RNGs for reproducible runs."""
    random.seed(seed)
    np.random.seed(seed)


def standardize(values: np.ndarray) -> np.ndarray:
    """
    Centre and scale like R's scale(): (x - mean) / sd with ddof=1.

    NaN entries are ignored when computing the moments and stay NaN.
    Returns zeros (NaN preserved) when the sd is zero or undefined.
    """
    x = np.asarray(values, dtype=float)
    valid = ~np.isnan(x)
    out = np.full_like(x, np.nan)
    if valid.sum() < 2:
        out[valid] = 0.0
        return out
    mu = x[valid].mean()
    sd = x[valid].std(ddof=1)
    if not np.isfinite(sd) or sd == 0:
        out[valid] = 0.0
        return out
    out[valid] = (x[valid] - mu) / sd
    return out
