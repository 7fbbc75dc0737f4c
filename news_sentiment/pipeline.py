"""
pipeline.py
-----------
End-to-end workflow:

    corpus -> document matrix -> dictionary scores
           -> sentences -> sentence matrix -> keyness terms -> LSS fit
           -> LSS scores on the document matrix
           -> date alignment -> LOWESS -> figures
"""

import os
from typing import Any, Dict, Optional

from news_sentiment.config import PipelineConfig
from news_sentiment.corpus import Corpus, SyntheticNewsGenerator, load_corpus
from news_sentiment.features import build_dfm, dfm_from_tokens, feature_summary, tokens
from news_sentiment.keyness import char_context
from news_sentiment.models.lsd_dictionary import DictionarySentiment, SentimentDictionary
from news_sentiment.models.lss import LatentSemanticScaling
from news_sentiment.series import align_scores, series_correlation, smooth_scores
from news_sentiment.utils import get_logger

log = get_logger(__name__)


def get_corpus(cfg: PipelineConfig, synthetic: bool = False) -> Corpus:
    """Load the configured corpus file, or generate a synthetic one."""
    cc = cfg.corpus
    if synthetic or not cc.path:
        if not synthetic:
            log.info("No corpus path configured; generating synthetic news.")
        gen = SyntheticNewsGenerator(seed=cfg.seed,
                                     shock_date=cfg.plots.reference_date or "2016-06-23")
        return gen.generate(cc.synthetic_start, cc.synthetic_end,
                            cc.articles_per_day)
    return load_corpus(cc.path, text_column=cc.text_column,
                       date_column=cc.date_column)


def get_dictionary(cfg: PipelineConfig) -> DictionarySentiment:
    """Dictionary scorer from the configured Lexicoder file, or LSD2015."""
    if cfg.dictionary_path:
        return DictionarySentiment(
            SentimentDictionary.read_lexicoder(cfg.dictionary_path))
    return DictionarySentiment()


def fit_lss(corpus: Corpus, cfg: PipelineConfig) -> LatentSemanticScaling:
    """Fit LSS on the sentence-level version of the corpus."""
    fc, kc, lc = cfg.features, cfg.keyness, cfg.lss

    sentences = corpus.reshape_sentences(verbose=cfg.progress)
    toks_sent = tokens(sentences.texts, remove_punct=fc.remove_punct,
                       remove_numbers=fc.remove_numbers,
                       remove_stopwords=fc.remove_stopwords)

    dfmat_sent = dfm_from_tokens(toks_sent, sentences.docvars)
    dfmat_sent = dfmat_sent.select(fc.feature_pattern, valuetype="regex")
    dfmat_sent = dfmat_sent.trim(min_termfreq=fc.min_termfreq)
    if dfmat_sent.n_features == 0:
        raise ValueError(
            f"Empty vocabulary after keeping {fc.feature_pattern} terms with "
            f"frequency >= {fc.min_termfreq}."
        )
    log.info("Sentence matrix: %r", dfmat_sent)

    terms = char_context(toks_sent, kc.pattern, window=kc.window, p=kc.p,
                         min_count=kc.min_count, top_n=kc.top_n)

    model = LatentSemanticScaling(seeds=lc.seeds, k=lc.k, rescale=lc.rescale,
                                  random_state=lc.random_state)
    return model.fit(dfmat_sent, terms=terms)


def run_pipeline(
    cfg: PipelineConfig,
    corpus: Optional[Corpus] = None,
    synthetic: bool = False,
    make_plots: bool = True,
) -> Dict[str, Any]:
    """
    Run the full dictionary + LSS workflow.

    Returns
    -------
    dict with keys:
        'corpus'     : Corpus
        'dictionary' : per-document dictionary score table
        'model'      : fitted LatentSemanticScaling
        'scores'     : DataFrame [date, dictionary, lss] per document
        'smoothed'   : DataFrame [date, dictionary, lss] on a daily grid
        'correlation': Pearson r of the smoothed series
        'figures'    : dict of saved figure paths (empty if make_plots=False)
    """
    if corpus is None:
        corpus = get_corpus(cfg, synthetic=synthetic)
    log.info("Corpus: %r", corpus)

    # --- Document-level matrix and dictionary scores ---
    fc = cfg.features
    dfmat = build_dfm(corpus, remove_punct=fc.remove_punct,
                      remove_stopwords=fc.remove_stopwords,
                      remove_numbers=fc.remove_numbers)
    log.debug("Top features: %s", feature_summary(dfmat, 20))
    scorer = get_dictionary(cfg)
    log.info("Dictionary: %r", scorer)
    dict_scores = scorer.score(dfmat)

    # --- LSS ---
    model = fit_lss(corpus, cfg)
    log.info("Most positive terms: %s", ", ".join(model.most_positive(10).index))
    log.info("Most negative terms: %s", ", ".join(model.most_negative(10).index))
    lss_scores = model.predict(dfmat)

    # --- Presentation ---
    scores = align_scores(corpus.dates, {
        "dictionary": dict_scores["score"].to_numpy(),
        "lss": lss_scores.to_numpy(),
    })
    smoothed = smooth_scores(scores, ["dictionary", "lss"],
                             span=cfg.smoothing.span, freq=cfg.smoothing.freq)
    corr = series_correlation(smoothed, "dictionary", "lss")
    log.info("Correlation of smoothed series: %.3f", corr)

    if cfg.save_csv:
        os.makedirs(cfg.output_dir, exist_ok=True)
        csv_path = os.path.join(cfg.output_dir, "sentiment_series.csv")
        scores.to_csv(csv_path, index=False)
        log.info("Saved %s", csv_path)

    figures: Dict[str, str] = {}
    if make_plots:
        from news_sentiment.visualization.sentiment_plots import save_all
        figures = save_all(scores, smoothed, model.terms_frame(), cfg.figure_dir,
                           reference_date=cfg.plots.reference_date,
                           correlation=corr,
                           n_label=cfg.plots.n_label_terms, dpi=cfg.plots.dpi)
        log.info("Saved %d figures to %s", len(figures), cfg.figure_dir)

    return {
        "corpus": corpus,
        "dictionary": dict_scores,
        "model": model,
        "scores": scores,
        "smoothed": smoothed,
        "correlation": corr,
        "figures": figures,
    }
