"""
================================================================================
UNIT TESTS -- NEWS CORPUS, FEATURES, DICTIONARY SCORING, SERIES, PLOTS
================================================================================
Tests cover:
    1. Corpus construction, loading and sentence reshaping
    2. Synthetic news generation
    3. Tokenization and document-feature matrices
    4. Lexicoder-style dictionary scoring
    5. Date alignment and LOWESS smoothing
    6. Figures

Author: Jose Orlando Bobadilla Fuentes, CQF | MSc AI
================================================================================
"""

import os

import pytest
import numpy as np
import pandas as pd


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def news_frame():
    """Three short dated articles."""
    return pd.DataFrame({
        "text": [
            "The economy grew strongly. Exports rose to a record.",
            "Recession fears mounted as factories cut jobs.",
            "The minister spoke about the budget. Parliament met on Monday. "
            "No decision was taken.",
        ],
        "date": ["2016-05-02", "2016-06-24", "2016-07-01"],
        "source": ["guardian", "guardian", "bbc"],
    })


@pytest.fixture
def toy_dfm():
    """Three documents of ten tokens with known dictionary counts."""
    from news_sentiment.features import DocumentFeatureMatrix
    features = ["good", "growth", "recession", "weak", "crisis",
                "table", "chair", "window", "door", "floor"]
    counts = np.array([
        # pos 2, neg 0 -> 2/11
        [1, 1, 0, 0, 0, 8, 0, 0, 0, 0],
        # pos 0, neg 3 -> -3/11
        [0, 0, 1, 1, 1, 0, 7, 0, 0, 0],
        # pos 1, neg 1 -> 0
        [1, 0, 0, 1, 0, 0, 0, 8, 0, 0],
    ])
    return DocumentFeatureMatrix(counts, features)


@pytest.fixture
def score_frame():
    """Sixty days of per-document scores with a level shift."""
    rng = np.random.RandomState(0)
    dates = pd.date_range("2016-05-01", periods=60, freq="D")
    level = np.where(dates < pd.Timestamp("2016-06-01"), 1.0, -1.0)
    return pd.DataFrame({
        "date": dates,
        "dictionary": level + rng.normal(0, 0.3, 60),
        "lss": level + rng.normal(0, 0.3, 60),
    })


# ============================================================================
# TEST: CORPUS
# ============================================================================

class TestCorpus:
    """Tests for corpus construction and loading."""

    def test_canonical_columns(self, news_frame):
        from news_sentiment.corpus import Corpus
        corp = Corpus(news_frame)
        assert len(corp) == 3
        assert list(corp.data.columns[:3]) == ["doc_id", "text", "date"]
        assert corp.doc_ids == ["text1", "text2", "text3"]
        assert pd.api.types.is_datetime64_any_dtype(corp.dates)
        assert "source" in corp.docvars.columns
        assert "text" not in corp.docvars.columns

    def test_custom_columns(self, news_frame):
        from news_sentiment.corpus import Corpus
        df = news_frame.rename(columns={"text": "body", "date": "published"})
        corp = Corpus(df, text_column="body", date_column="published")
        assert corp.texts[1].startswith("Recession")

    def test_missing_column_raises(self, news_frame):
        from news_sentiment.corpus import Corpus
        with pytest.raises(ValueError, match="missing"):
            Corpus(news_frame.drop(columns=["date"]))

    def test_duplicate_ids_raise(self, news_frame):
        from news_sentiment.corpus import Corpus
        news_frame["doc_id"] = ["a", "a", "b"]
        with pytest.raises(ValueError):
            Corpus(news_frame)

    def test_bad_dates_dropped(self, news_frame):
        from news_sentiment.corpus import Corpus
        news_frame.loc[1, "date"] = "not a date"
        corp = Corpus(news_frame)
        assert len(corp) == 2
        assert corp.doc_ids == ["text1", "text3"]

    def test_subset(self, news_frame):
        from news_sentiment.corpus import Corpus
        corp = Corpus(news_frame)
        sub = corp.subset(corp.docvars["source"] == "bbc")
        assert len(sub) == 1
        assert sub.doc_ids == ["text3"]

    def test_load_csv(self, news_frame, tmp_path):
        from news_sentiment.corpus import load_corpus
        path = tmp_path / "news.csv"
        news_frame.to_csv(path, index=False)
        corp = load_corpus(path)
        assert len(corp) == 3
        assert corp.dates.iloc[0] == pd.Timestamp("2016-05-02")

    def test_load_pickle(self, news_frame, tmp_path):
        from news_sentiment.corpus import load_corpus
        path = tmp_path / "news.pkl"
        news_frame.to_pickle(path)
        assert len(load_corpus(path)) == 3

    def test_missing_file(self, tmp_path):
        from news_sentiment.corpus import load_corpus
        with pytest.raises(FileNotFoundError):
            load_corpus(tmp_path / "nope.csv")

    def test_unsupported_format(self, tmp_path):
        from news_sentiment.corpus import load_corpus
        path = tmp_path / "news.txt"
        path.write_text("hello")
        with pytest.raises(ValueError, match="Unsupported"):
            load_corpus(path)


class TestSentences:
    """Tests for sentence reshaping."""

    def test_split_sentences(self):
        from news_sentiment.corpus import split_sentences
        out = split_sentences("Growth was strong. Prices rose.")
        assert out == ["Growth was strong.", "Prices rose."]
        assert split_sentences("") == []
        assert split_sentences(None) == []

    def test_reshape_keeps_metadata(self, news_frame):
        from news_sentiment.corpus import Corpus
        corp = Corpus(news_frame)
        sents = corp.reshape_sentences()
        assert len(sents) == 6
        first = sents.data[sents.data["parent_id"] == "text1"]
        assert first["doc_id"].tolist() == ["text1.1", "text1.2"]
        assert (first["date"] == pd.Timestamp("2016-05-02")).all()
        assert (sents.data.loc[sents.data["parent_id"] == "text3", "source"]
                == "bbc").all()

    def test_reshape_with_progress(self, news_frame):
        from news_sentiment.corpus import Corpus
        sents = Corpus(news_frame).reshape_sentences(verbose=True)
        assert sents.data["parent_id"].nunique() == 3


class TestSyntheticNews:
    """Tests for synthetic news generation."""

    def test_generation(self):
        from news_sentiment.corpus import SyntheticNewsGenerator
        corp = SyntheticNewsGenerator(seed=1).generate(
            "2016-01-01", "2016-03-31", articles_per_day=2.0)
        assert len(corp) > 50
        assert corp.dates.min() >= pd.Timestamp("2016-01-01")
        assert corp.dates.max() <= pd.Timestamp("2016-03-31")
        assert "p_positive" in corp.docvars.columns

    def test_reproducible(self):
        from news_sentiment.corpus import SyntheticNewsGenerator
        a = SyntheticNewsGenerator(seed=7).generate("2016-01-01", "2016-01-31")
        b = SyntheticNewsGenerator(seed=7).generate("2016-01-01", "2016-01-31")
        assert a.texts == b.texts

    def test_tone_drops_after_shock(self):
        from news_sentiment.corpus import SyntheticNewsGenerator
        corp = SyntheticNewsGenerator(seed=3, shock_date="2016-06-23").generate(
            "2016-01-01", "2016-12-31")
        p = corp.docvars.set_index("date")["p_positive"]
        assert p[p.index < "2016-06-23"].mean() > p[p.index >= "2016-06-23"].mean() + 0.2


# ============================================================================
# TEST: FEATURES
# ============================================================================

class TestTokenize:
    """Tests for tokenization."""

    def test_punctuation_removed(self):
        from news_sentiment.features import tokenize
        assert tokenize("Hello, World! It's 2.5%") == ["hello", "world", "it's", "2.5"]

    def test_punctuation_kept(self):
        from news_sentiment.features import tokenize
        toks = tokenize("Up 5%!", remove_punct=False)
        assert toks == ["up", "5", "%", "!"]

    def test_numbers_removed(self):
        from news_sentiment.features import tokenize
        assert tokenize("rose 3.2 percent in 2016", remove_numbers=True) == \
            ["rose", "percent", "in"]

    def test_stopwords(self):
        from news_sentiment.features import tokens
        out = tokens(["The economy is growing"], remove_stopwords=True)
        assert out == [["economy", "growing"]]


class TestDocumentFeatureMatrix:
    """Tests for the sparse count matrix."""

    @pytest.fixture
    def dfmat(self):
        from news_sentiment.features import dfm_from_tokens
        return dfm_from_tokens([
            ["growth", "rose", "growth", "2016"],
            ["growth", "fell"],
            ["prices", "fell", "fell"],
        ])

    def test_vocabulary(self, dfmat):
        assert list(dfmat.features) == ["2016", "fell", "growth", "prices", "rose"]
        assert dfmat.shape == (3, 5)
        assert dfmat.doc_ids == ["text1", "text2", "text3"]
        np.testing.assert_array_equal(dfmat.ntoken(), [4, 2, 3])

    def test_frequencies(self, dfmat):
        assert dfmat.featfreq()["fell"] == 3
        assert dfmat.docfreq()["fell"] == 2
        assert dfmat.topfeatures(1).index[0] in ("fell", "growth")

    def test_trim(self, dfmat):
        trimmed = dfmat.trim(min_termfreq=3)
        assert sorted(trimmed.features) == ["fell", "growth"]
        assert trimmed.n_docs == 3

    def test_select_regex(self, dfmat):
        kept = dfmat.select("^[a-z]+$", valuetype="regex")
        assert "2016" not in kept.features
        removed = dfmat.select("gr*", selection="remove")
        assert "growth" not in removed.features

    def test_match_features(self, dfmat):
        m = dfmat.match_features(["rose", "missing", "2016"])
        assert list(m.features) == ["rose", "missing", "2016"]
        np.testing.assert_array_equal(m.matrix.toarray(),
                                      [[1, 0, 1], [0, 0, 0], [0, 0, 0]])

    def test_weight_prop(self, dfmat):
        prop = dfmat.weight("prop").matrix.toarray()
        np.testing.assert_allclose(prop.sum(axis=1), 1.0)
        with pytest.raises(ValueError):
            dfmat.weight("tfidf")

    def test_lookup(self, dfmat):
        counts = dfmat.lookup({"up": ["grow*", "rose"], "down": ["fell"]}).to_frame()
        assert counts["up"].tolist() == [3, 1, 0]
        assert counts["down"].tolist() == [0, 1, 2]

    def test_lookup_counts_feature_once(self):
        from news_sentiment.features import DocumentFeatureMatrix
        dfmat = DocumentFeatureMatrix(np.array([[2, 1]]), ["good", "table"])
        counts = dfmat.lookup({"up": ["good", "goo*"]}).to_frame()
        assert counts["up"].tolist() == [2]

    def test_empty_pattern_list(self, dfmat):
        from news_sentiment.features import pattern_mask
        assert not pattern_mask(dfmat.features, []).any()
        assert dfmat.select([]).n_features == 0
        counts = dfmat.lookup({"up": [], "down": ["fell"]}).to_frame()
        assert counts["up"].tolist() == [0, 0, 0]

    def test_empty_vocabulary(self):
        from news_sentiment.features import dfm_from_tokens
        with pytest.raises(ValueError, match="Empty vocabulary"):
            dfm_from_tokens([[], []])

    def test_build_from_corpus(self, news_frame):
        from news_sentiment.corpus import Corpus
        from news_sentiment.features import build_dfm
        dfmat = build_dfm(Corpus(news_frame))
        assert dfmat.n_docs == 3
        assert "the" not in dfmat.features
        assert "recession" in dfmat.features
        assert "date" in dfmat.docvars.columns


# ============================================================================
# TEST: DICTIONARY SCORING
# ============================================================================

class TestDictionarySentiment:
    """Tests for Lexicoder-style dictionary scoring."""

    def test_raw_scores(self, toy_dfm):
        from news_sentiment.models.lsd_dictionary import DictionarySentiment
        result = DictionarySentiment().score(toy_dfm)
        np.testing.assert_allclose(result["raw"], [2 / 11, -3 / 11, 0.0])
        assert result["n_positive"].tolist() == [2, 0, 1]
        assert result["n_negative"].tolist() == [0, 3, 1]
        assert result["n_tokens"].tolist() == [10, 10, 10]

    def test_standardized(self, toy_dfm):
        from news_sentiment.models.lsd_dictionary import DictionarySentiment
        score = DictionarySentiment().score(toy_dfm)["score"]
        assert abs(score.mean()) < 1e-12
        assert abs(score.std(ddof=1) - 1.0) < 1e-12
        assert score.iloc[0] > score.iloc[2] > score.iloc[1]

    def test_raw_bounded(self):
        from news_sentiment.features import DocumentFeatureMatrix
        from news_sentiment.models.lsd_dictionary import DictionarySentiment
        dfmat = DocumentFeatureMatrix(np.array([[5, 0], [0, 9], [3, 4]]),
                                      ["good", "crisis"])
        raw = DictionarySentiment().score(dfmat)["raw"]
        assert raw.between(-1, 1).all()

    def test_empty_document(self):
        from news_sentiment.features import DocumentFeatureMatrix
        from news_sentiment.models.lsd_dictionary import DictionarySentiment
        dfmat = DocumentFeatureMatrix(np.array([[0, 0], [2, 1]]), ["good", "table"])
        raw = DictionarySentiment().score(dfmat)["raw"]
        assert raw.iloc[0] == 0.0
        assert raw.iloc[1] == pytest.approx(2 / 4)

    def test_zero_variance(self):
        from news_sentiment.features import DocumentFeatureMatrix
        from news_sentiment.models.lsd_dictionary import DictionarySentiment
        dfmat = DocumentFeatureMatrix(np.array([[1], [1]]), ["table"])
        assert (DictionarySentiment().score(dfmat)["score"] == 0.0).all()

    def test_unknown_category(self):
        from news_sentiment.models.lsd_dictionary import (
            DictionarySentiment, SentimentDictionary)
        with pytest.raises(ValueError):
            DictionarySentiment(SentimentDictionary({"positive": ["good"]}))

    def test_read_lexicoder(self, tmp_path):
        from news_sentiment.models.lsd_dictionary import SentimentDictionary
        path = tmp_path / "lsd.lc3"
        path.write_text("# test dictionary\n+negative\nbad*\nCrisis\n\n"
                        "+positive\ngood\nboom*\n")
        lsd = SentimentDictionary.read_lexicoder(path)
        assert list(lsd) == ["negative", "positive"]
        assert lsd["negative"] == ["bad*", "crisis"]

    def test_read_lexicoder_no_header(self, tmp_path):
        from news_sentiment.models.lsd_dictionary import SentimentDictionary
        path = tmp_path / "bad.lc3"
        path.write_text("good\n+positive\n")
        with pytest.raises(ValueError):
            SentimentDictionary.read_lexicoder(path)

    def test_empty_category_matches_nothing(self, tmp_path):
        from news_sentiment.features import DocumentFeatureMatrix
        from news_sentiment.models.lsd_dictionary import (
            DictionarySentiment, SentimentDictionary)
        path = tmp_path / "partial.lc3"
        path.write_text("+negative\nbad\n+positive\n")
        lsd = SentimentDictionary.read_lexicoder(path)
        assert lsd["positive"] == []
        dfmat = DocumentFeatureMatrix(np.array([[0, 5], [1, 4]]), ["bad", "table"])
        result = DictionarySentiment(lsd).score(dfmat)
        assert result["n_positive"].tolist() == [0, 0]
        assert result["n_negative"].tolist() == [0, 1]
        np.testing.assert_allclose(result["raw"], [0.0, -1 / 6])


# ============================================================================
# TEST: SERIES
# ============================================================================

class TestSeries:
    """Tests for date alignment and LOWESS smoothing."""

    def test_align_sorts_by_date(self):
        from news_sentiment.series import align_scores
        dates = pd.Series(pd.to_datetime(["2016-03-01", "2016-01-01", "2016-02-01"]))
        out = align_scores(dates, {"dictionary": [3.0, 1.0, 2.0]})
        assert out["dictionary"].tolist() == [1.0, 2.0, 3.0]
        assert out["date"].is_monotonic_increasing

    def test_align_length_mismatch(self):
        from news_sentiment.series import align_scores
        with pytest.raises(ValueError):
            align_scores(pd.Series(pd.to_datetime(["2016-01-01"])), {"x": [1.0, 2.0]})

    def test_smooth_grid(self, score_frame):
        from news_sentiment.series import smooth_scores
        out = smooth_scores(score_frame, ["dictionary", "lss"], span=0.3)
        assert len(out) == 60
        assert out["date"].iloc[0] == pd.Timestamp("2016-05-01")
        assert out["dictionary"].notna().all()
        early = out.loc[out["date"] < "2016-05-20", "dictionary"].mean()
        late = out.loc[out["date"] > "2016-06-12", "dictionary"].mean()
        assert early > late

    def test_smooth_skips_nan(self, score_frame):
        from news_sentiment.series import smooth_scores
        score_frame.loc[::2, "lss"] = np.nan
        out = smooth_scores(score_frame, ["lss"], span=0.5)
        assert out["lss"].notna().all()

    def test_too_few_points(self, score_frame):
        from news_sentiment.series import smooth_scores
        score_frame["lss"] = np.nan
        score_frame.loc[:1, "lss"] = 1.0
        out = smooth_scores(score_frame, ["lss"])
        assert out["lss"].isna().all()

    def test_tied_dates(self):
        from news_sentiment.series import series_correlation, smooth_scores
        # 5 days x 20 documents; same-day scores average to -day
        days = pd.date_range("2016-06-20", periods=5, freq="D")
        dates = np.repeat(days, 20)
        offset = np.tile([0.5, -0.5], 50)
        level = -np.repeat(np.arange(5.0), 20)
        df = pd.DataFrame({"date": dates, "dictionary": level + offset,
                           "lss": level - offset})
        out = smooth_scores(df, ["dictionary", "lss"], span=0.1)
        assert len(out) == 5
        np.testing.assert_allclose(out["lss"], [0, -1, -2, -3, -4], atol=1e-8)
        assert np.isfinite(series_correlation(out, "dictionary", "lss"))

    def test_too_few_dates(self):
        from news_sentiment.series import smooth_scores
        df = pd.DataFrame({
            "date": np.repeat(pd.date_range("2016-01-01", periods=3), 10),
            "lss": np.arange(30.0),
        })
        assert smooth_scores(df, ["lss"]).isna()["lss"].all()

    def test_invalid_span(self, score_frame):
        from news_sentiment.series import smooth_scores
        with pytest.raises(ValueError):
            smooth_scores(score_frame, span=0.0)
        with pytest.raises(ValueError):
            smooth_scores(score_frame.iloc[:0])

    def test_correlation(self, score_frame):
        from news_sentiment.series import series_correlation, smooth_scores
        out = smooth_scores(score_frame, ["dictionary", "lss"], span=0.3)
        assert series_correlation(out, "dictionary", "lss") > 0.8


# ============================================================================
# TEST: PLOTS
# ============================================================================

class TestPlots:
    """Smoke tests for the figures."""

    def test_series_plot(self, score_frame, tmp_path):
        import matplotlib.pyplot as plt
        from news_sentiment.series import smooth_scores
        from news_sentiment.visualization.sentiment_plots import plot_sentiment_series
        smoothed = smooth_scores(score_frame, ["dictionary", "lss"], span=0.3)
        path = tmp_path / "series.png"
        fig = plot_sentiment_series(score_frame, smoothed, "dictionary",
                                    reference_date="2016-06-01", save_path=str(path))
        assert isinstance(fig, plt.Figure)
        assert path.exists()
        plt.close(fig)

    def test_save_all(self, score_frame, tmp_path):
        from news_sentiment.series import smooth_scores
        from news_sentiment.visualization.sentiment_plots import save_all
        smoothed = smooth_scores(score_frame, ["dictionary", "lss"], span=0.3)
        terms = pd.DataFrame({
            "term": ["good", "growth", "bad", "recession"],
            "coef": [0.9, 0.4, -0.8, -0.5],
            "frequency": [40, 25, 30, 12],
            "is_seed": [True, False, True, False],
        })
        paths = save_all(score_frame, smoothed, terms, str(tmp_path / "figs"),
                         reference_date="2016-06-01", correlation=0.9)
        assert set(paths) == {"dictionary", "lss", "comparison", "terms"}
        for p in paths.values():
            assert os.path.exists(p)


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
