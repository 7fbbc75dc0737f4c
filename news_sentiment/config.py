"""
config.py
---------
Centralised configuration for the sentiment scaling pipeline.
Paths and logging are read from environment variables with sensible
defaults. Analysis defaults: min term frequency 5, top 500 keyness
terms, k = 300.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional


# Standard LSS sentiment seed words (positive = +1, negative = -1)
DEFAULT_SEEDS: Dict[str, int] = {
    "good": 1, "nice": 1, "excellent": 1, "positive": 1,
    "fortunate": 1, "correct": 1, "superior": 1,
    "bad": -1, "nasty": -1, "poor": -1, "negative": -1,
    "unfortunate": -1, "wrong": -1, "inferior": -1,
}


@dataclass
class CorpusConfig:
    """Where the corpus lives and which columns to read."""
    path:          Optional[str] = os.getenv("NEWS_CORPUS_PATH") or None
    text_column:   str = "text"
    date_column:   str = "date"
    # Synthetic corpus (used when no path is given)
    synthetic_start: str = "2012-01-01"
    synthetic_end:   str = "2016-12-31"
    articles_per_day: float = 1.5


@dataclass
class FeatureConfig:
    """Tokenization and document-feature matrix parameters."""
    remove_punct:     bool = True
    remove_stopwords: bool = True
    remove_numbers:   bool = False
    min_termfreq:     int  = 5                    # sentence-level matrix
    feature_pattern:  str  = r"^[a-z0-9]+$"       # alphanumeric terms only


@dataclass
class KeynessConfig:
    """Candidate vocabulary selection around a topic pattern."""
    pattern:   str   = "econom*"
    window:    int   = 10
    p:         float = 0.001
    min_count: int   = 10
    top_n:     int   = 500


@dataclass
class LSSConfig:
    """Latent Semantic Scaling model parameters."""
    k:            int  = 300
    seeds:        Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_SEEDS))
    rescale:      bool = True
    random_state: int  = 42


@dataclass
class SmoothingConfig:
    """LOWESS smoothing of the date-indexed series."""
    span: float = 0.1
    freq: str   = "D"


@dataclass
class PlotConfig:
    """Figure output settings."""
    reference_date: Optional[str] = "2016-06-23"
    dpi:            int = 150
    n_label_terms:  int = 15


@dataclass
class PipelineConfig:
    """Master configuration aggregating all sub-configs."""
    corpus:    CorpusConfig    = field(default_factory=CorpusConfig)
    features:  FeatureConfig   = field(default_factory=FeatureConfig)
    keyness:   KeynessConfig   = field(default_factory=KeynessConfig)
    lss:       LSSConfig       = field(default_factory=LSSConfig)
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    plots:     PlotConfig      = field(default_factory=PlotConfig)

    # Paths
    output_dir: str = os.getenv("OUTPUT_DIR", "outputs")
    log_level:  str = os.getenv("LOG_LEVEL", "INFO")
    save_csv:   bool = False
    seed:       int = 42
    progress:   bool = False                  # tqdm bar while reshaping

    # Lexicoder-format dictionary file; the curated LSD2015 subset if unset
    dictionary_path: Optional[str] = os.getenv("LSD_DICTIONARY_PATH") or None

    @property
    def figure_dir(self) -> str:
        return os.path.join(self.output_dir, "figures")


# Singleton instance used as the default throughout the project
CONFIG = PipelineConfig()
