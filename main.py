"""
News Sentiment Scaling - Main Entry Point
=========================================
Computes sentiment time series from a dated news corpus with two methods
and plots them side by side:

    1. Lexicoder-style sentiment dictionary, (pos - neg) / (ntoken + 1)
    2. Latent Semantic Scaling fitted on sentences with seed words and
       economy-related candidate terms

Usage:
    python main.py --synthetic                       # demo corpus
    python main.py --corpus data/guardian.pkl        # serialized corpus
    python main.py --corpus news.csv --text-column body --save-csv
    python main.py --synthetic --k 50 --span 0.2
    python main.py --corpus news.csv --dictionary LSD2015.lc3 --progress

Environment variables:
    NEWS_CORPUS_PATH, LSD_DICTIONARY_PATH, OUTPUT_DIR, LOG_LEVEL, LOG_DIR
    (see news_sentiment/config.py)

Author: Jose Orlando Bobadilla Fuentes, CQF
"""

import argparse
import warnings
warnings.filterwarnings("ignore")

from news_sentiment.config import PipelineConfig
from news_sentiment.utils import get_logger, set_log_level, set_random_seed

log = get_logger("main")

# SVD dimensions for the synthetic demo; its vocabulary is only a few
# hundred terms, so k=300 would leave term vectors nearly orthogonal.
SYNTHETIC_K = 20


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------
def _args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="News Sentiment Scaling Pipeline")
    src = p.add_mutually_exclusive_group()
    src.add_argument("--corpus", default=None,
                     help="Corpus file (.pkl, .parquet, .csv, .json, .jsonl)")
    src.add_argument("--synthetic", action="store_true",
                     help="Generate a synthetic economic news corpus")
    p.add_argument("--text-column",    default="text")
    p.add_argument("--date-column",    default="date")
    p.add_argument("--dictionary",     default=None,
                   help="Lexicoder-format dictionary file (default: LSD2015 subset)")
    p.add_argument("--output-dir",     default=None)
    p.add_argument("--k",              type=int,   default=None)
    p.add_argument("--min-termfreq",   type=int,   default=5)
    p.add_argument("--top-n",          type=int,   default=500)
    p.add_argument("--pattern",        default="econom*")
    p.add_argument("--span",           type=float, default=0.1)
    p.add_argument("--reference-date", default="2016-06-23")
    p.add_argument("--save-csv",       action="store_true")
    p.add_argument("--no-plots",       action="store_true")
    p.add_argument("--progress",       action="store_true",
                   help="Show a progress bar while splitting sentences")
    p.add_argument("--seed",           type=int,   default=42)
    p.add_argument("--log-level",      default=None)
    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Overlay command-line arguments on the default configuration."""
    cfg = PipelineConfig()
    if args.corpus:
        cfg.corpus.path = args.corpus
    cfg.corpus.text_column = args.text_column
    cfg.corpus.date_column = args.date_column
    if args.dictionary:
        cfg.dictionary_path = args.dictionary
    if args.output_dir:
        cfg.output_dir = args.output_dir
    if args.log_level:
        cfg.log_level = args.log_level

    synthetic = args.synthetic or not cfg.corpus.path
    if args.k is not None:
        cfg.lss.k = args.k
    elif synthetic:
        cfg.lss.k = SYNTHETIC_K

    cfg.features.min_termfreq = args.min_termfreq
    cfg.keyness.top_n = args.top_n
    cfg.keyness.pattern = args.pattern
    cfg.smoothing.span = args.span
    cfg.plots.reference_date = args.reference_date or None
    cfg.save_csv = args.save_csv
    cfg.progress = args.progress
    cfg.seed = args.seed
    cfg.lss.random_state = args.seed
    return cfg


def _banner(msg: str) -> None:
    print(f"\n{'='*60}\n  {msg}\n{'='*60}")


def main(argv=None):
    """Run the complete dictionary + LSS sentiment pipeline."""
    from news_sentiment.pipeline import run_pipeline

    args = _args(argv)
    cfg = build_config(args)
    set_log_level(cfg.log_level)
    set_random_seed(cfg.seed)

    _banner("NEWS SENTIMENT SCALING")
    source = "synthetic" if (args.synthetic or not cfg.corpus.path) else cfg.corpus.path
    log.info("Corpus: %s | k=%d | span=%.2f | pattern=%s",
             source, cfg.lss.k, cfg.smoothing.span, cfg.keyness.pattern)

    result = run_pipeline(cfg, synthetic=args.synthetic,
                          make_plots=not args.no_plots)

    model = result["model"]
    scores = result["scores"]
    print(f"\n  Documents:           {len(scores)}")
    print(f"  LSS dimensions (k):  {model.k_}")
    print(f"  Candidate terms:     {len(model.beta_)}")
    print(f"  Most positive:       {', '.join(model.most_positive(8).index)}")
    print(f"  Most negative:       {', '.join(model.most_negative(8).index)}")
    print(f"  Unscored by LSS:     {int(scores['lss'].isna().sum())}")
    print(f"  Smoothed correlation (dictionary vs LSS): {result['correlation']:.3f}")
    for name, path in result["figures"].items():
        print(f"  Figure [{name}]: {path}")

    _banner("PIPELINE COMPLETE")


if __name__ == "__main__":
    main()
