"""
================================================================================
TOKENIZATION AND DOCUMENT-FEATURE MATRICES
================================================================================
Turns a corpus into a sparse documents x terms count matrix.

Tokenization rules:
    - lowercase
    - word tokens are runs of letters/digits, optionally joined by an
      apostrophe or hyphen ("don't", "long-term")
    - decimal numbers ("2.5", "1,000") are kept as single tokens
    - punctuation is dropped (remove_punct=True) or kept as one token per
      symbol
    - stop words come from scikit-learn's English list

The matrix itself is built with scikit-learn's CountVectorizer over the
pre-tokenized documents and kept as a scipy CSR matrix, so a corpus of
tens of thousands of articles stays small in memory.

Feature selection supports glob patterns ("econom*") and regular
expressions ("^[a-z0-9]+$"), matched case-insensitively.

Author: Jose Orlando Bobadilla Fuentes, CQF | MSc AI
================================================================================
"""

import fnmatch
import re
from typing import Dict, Iterable, List, Optional, Sequence, Union

import numpy as np
import pandas as pd
import scipy.sparse as sp
from sklearn.feature_extraction.text import CountVectorizer, ENGLISH_STOP_WORDS

from news_sentiment.corpus import Corpus
from news_sentiment.utils import get_logger, timeit

log = get_logger(__name__)

_NUMBER = r"\d+(?:[.,]\d+)+"
_WORD = r"[^\W_]+(?:['’\-][^\W_]+)*"
_PUNCT = r"[^\w\s]"

_TOKEN_RE = re.compile(f"{_NUMBER}|{_WORD}")
_TOKEN_PUNCT_RE = re.compile(f"{_NUMBER}|{_WORD}|{_PUNCT}")
_NUMERIC_RE = re.compile(r"^\d+(?:[.,]\d+)*$")
_NEVER_RE = re.compile(r"(?!)")

STOPWORDS = frozenset(ENGLISH_STOP_WORDS)


# ============================================================================
# TOKENS
# ============================================================================

def tokenize(
    text: str,
    remove_punct: bool = True,
    remove_numbers: bool = False,
    lowercase: bool = True,
) -> List[str]:
    """Split one text into tokens."""
    if not isinstance(text, str) or not text:
        return []
    if lowercase:
        text = text.lower()
    pattern = _TOKEN_RE if remove_punct else _TOKEN_PUNCT_RE
    toks = pattern.findall(text)
    if remove_numbers:
        toks = [t for t in toks if not _NUMERIC_RE.match(t)]
    return toks


def tokens(
    texts: Iterable[str],
    remove_punct: bool = True,
    remove_numbers: bool = False,
    remove_stopwords: bool = False,
    stopwords: Optional[Iterable[str]] = None,
) -> List[List[str]]:
    """Tokenize a sequence of texts, optionally dropping stop words."""
    out = [tokenize(t, remove_punct=remove_punct, remove_numbers=remove_numbers)
           for t in texts]
    if remove_stopwords:
        stop = frozenset(stopwords) if stopwords is not None else STOPWORDS
        out = [[t for t in toks if t not in stop] for toks in out]
    return out


# ============================================================================
# PATTERN MATCHING
# ============================================================================

def compile_patterns(
    patterns: Union[str, Sequence[str]],
    valuetype: str = "glob",
) -> re.Pattern:
    """
    Compile one or more glob or regex patterns into a single
    case-insensitive regular expression. An empty pattern list compiles
    to an expression that matches nothing.
    """
    if isinstance(patterns, str):
        patterns = [patterns]
    patterns = list(patterns)
    if valuetype == "glob":
        parts = [fnmatch.translate(p.lower()) for p in patterns]
    elif valuetype == "regex":
        parts = [f"(?:{p})" for p in patterns]
    else:
        raise ValueError(f"valuetype must be 'glob' or 'regex', got '{valuetype}'")
    if not parts:
        return _NEVER_RE
    return re.compile("|".join(parts), re.IGNORECASE)


def pattern_mask(
    features: Sequence[str],
    patterns: Union[str, Sequence[str]],
    valuetype: str = "glob",
) -> np.ndarray:
    """Boolean mask of features matching any of the patterns."""
    rx = compile_patterns(patterns, valuetype)
    if valuetype == "glob":
        return np.array([bool(rx.match(f)) for f in features], dtype=bool)
    return np.array([bool(rx.search(f)) for f in features], dtype=bool)


# ============================================================================
# DOCUMENT-FEATURE MATRIX
# ============================================================================

class DocumentFeatureMatrix:
    """
    Sparse documents x features count matrix with document metadata.

    Parameters
    ----------
    matrix : scipy.sparse matrix (n_docs x n_features)
    features : sequence of str
        Feature (term) names, one per column, unique.
    docvars : pd.DataFrame, optional
        One row per document (index is reset).
    """

    def __init__(
        self,
        matrix: sp.spmatrix,
        features: Sequence[str],
        docvars: Optional[pd.DataFrame] = None,
    ):
        matrix = sp.csr_matrix(matrix)
        features = [str(f) for f in features]
        if matrix.shape[1] != len(features):
            raise ValueError(
                f"Matrix has {matrix.shape[1]} columns but {len(features)} "
                "feature names were given."
            )
        if len(set(features)) != len(features):
            raise ValueError("Feature names must be unique.")
        if docvars is None:
            docvars = pd.DataFrame(
                {"doc_id": [f"text{i + 1}" for i in range(matrix.shape[0])]}
            )
        if len(docvars) != matrix.shape[0]:
            raise ValueError(
                f"docvars has {len(docvars)} rows but the matrix has "
                f"{matrix.shape[0]} documents."
            )
        self.matrix = matrix
        self.features = np.asarray(features, dtype=object)
        self.docvars = docvars.reset_index(drop=True)

    # ------------------------------------------------------------------
    # Basic properties
    # ------------------------------------------------------------------
    @property
    def shape(self):
        return self.matrix.shape

    @property
    def n_docs(self) -> int:
        return self.matrix.shape[0]

    @property
    def n_features(self) -> int:
        return self.matrix.shape[1]

    @property
    def doc_ids(self) -> List[str]:
        if "doc_id" in self.docvars.columns:
            return self.docvars["doc_id"].astype(str).tolist()
        return [f"text{i + 1}" for i in range(self.n_docs)]

    def __len__(self) -> int:
        return self.n_docs

    def __repr__(self) -> str:
        density = self.matrix.nnz / max(self.n_docs * self.n_features, 1)
        return (f"DocumentFeatureMatrix(docs={self.n_docs}, "
                f"features={self.n_features}, density={density:.4f})")

    def ntoken(self) -> np.ndarray:
        """Total token count per document."""
        return np.asarray(self.matrix.sum(axis=1)).ravel()

    def featfreq(self) -> pd.Series:
        """Corpus-wide frequency of every feature."""
        freq = np.asarray(self.matrix.sum(axis=0)).ravel()
        return pd.Series(freq, index=self.features, name="frequency")

    def docfreq(self) -> pd.Series:
        """Number of documents in which each feature occurs."""
        df = np.asarray((self.matrix > 0).sum(axis=0)).ravel()
        return pd.Series(df, index=self.features, name="docfreq")

    def topfeatures(self, n: int = 10) -> pd.Series:
        return self.featfreq().sort_values(ascending=False).head(n)

    def to_frame(self) -> pd.DataFrame:
        """Dense DataFrame (documents x features); use on small matrices only."""
        return pd.DataFrame(self.matrix.toarray(), index=self.doc_ids,
                            columns=self.features)

    # ------------------------------------------------------------------
    # Column operations
    # ------------------------------------------------------------------
    def _keep_columns(self, mask: np.ndarray) -> "DocumentFeatureMatrix":
        idx = np.flatnonzero(mask)
        return DocumentFeatureMatrix(self.matrix[:, idx], self.features[idx],
                                     self.docvars)

    def trim(
        self,
        min_termfreq: Optional[int] = None,
        max_termfreq: Optional[int] = None,
        min_docfreq: Optional[int] = None,
    ) -> "DocumentFeatureMatrix":
        """Drop features outside the term/document frequency bounds."""
        mask = np.ones(self.n_features, dtype=bool)
        freq = self.featfreq().values
        if min_termfreq is not None:
            mask &= freq >= min_termfreq
        if max_termfreq is not None:
            mask &= freq <= max_termfreq
        if min_docfreq is not None:
            mask &= self.docfreq().values >= min_docfreq
        out = self._keep_columns(mask)
        log.debug("trim: %d -> %d features", self.n_features, out.n_features)
        return out

    def select(
        self,
        pattern: Union[str, Sequence[str]],
        valuetype: str = "glob",
        selection: str = "keep",
    ) -> "DocumentFeatureMatrix":
        """Keep (or remove) features matching the pattern(s)."""
        if selection not in ("keep", "remove"):
            raise ValueError("selection must be 'keep' or 'remove'")
        mask = pattern_mask(self.features, pattern, valuetype)
        if selection == "remove":
            mask = ~mask
        return self._keep_columns(mask)

    def match_features(self, features: Sequence[str]) -> "DocumentFeatureMatrix":
        """
        Conform the matrix to an exact feature list, in that order.
        Features absent from this matrix become all-zero columns.
        """
        pos = {f: i for i, f in enumerate(self.features)}
        cols, src = [], []
        for j, f in enumerate(features):
            if f in pos:
                cols.append(j)
                src.append(pos[f])
        sub = self.matrix[:, src].tocoo()
        remapped = sp.csr_matrix(
            (sub.data, (sub.row, np.asarray(cols, dtype=int)[sub.col])),
            shape=(self.n_docs, len(features)),
        )
        return DocumentFeatureMatrix(remapped, list(features), self.docvars)

    def weight(self, scheme: str = "prop") -> "DocumentFeatureMatrix":
        """
        Reweight counts.

        scheme : 'count' (unchanged), 'prop' (row proportions; empty rows
                 stay zero), or 'boolean' (presence/absence).
        """
        if scheme == "count":
            return self
        if scheme == "boolean":
            m = (self.matrix > 0).astype(float)
        elif scheme == "prop":
            totals = self.ntoken().astype(float)
            inv = np.divide(1.0, totals, out=np.zeros_like(totals), where=totals > 0)
            m = sp.diags(inv) @ self.matrix.astype(float)
        else:
            raise ValueError(f"Unknown weighting scheme '{scheme}'")
        return DocumentFeatureMatrix(m, self.features, self.docvars)

    def lookup(self, dictionary) -> "DocumentFeatureMatrix":
        """
        Count dictionary category matches per document.

        Each feature is counted at most once per category even if it
        matches several patterns of that category. The result has one
        column per dictionary key.
        """
        keys = list(dictionary.keys())
        cols = []
        for key in keys:
            mask = pattern_mask(self.features, dictionary[key], "glob")
            counts = np.asarray(self.matrix[:, np.flatnonzero(mask)].sum(axis=1))
            cols.append(counts.ravel())
        if cols:
            m = sp.csr_matrix(np.column_stack(cols))
        else:
            m = sp.csr_matrix((self.n_docs, 0))
        return DocumentFeatureMatrix(m, keys, self.docvars)


# ============================================================================
# BUILDERS
# ============================================================================

def dfm_from_tokens(
    token_lists: List[List[str]],
    docvars: Optional[pd.DataFrame] = None,
) -> DocumentFeatureMatrix:
    """Build a count matrix from pre-tokenized documents."""
    if not any(token_lists):
        raise ValueError(
            "Empty vocabulary: no tokens left after tokenization and "
            "stop word removal."
        )
    vectorizer = CountVectorizer(analyzer=lambda toks: toks, lowercase=False)
    X = vectorizer.fit_transform(token_lists)
    return DocumentFeatureMatrix(X, vectorizer.get_feature_names_out(), docvars)


@timeit
def build_dfm(
    corpus: Corpus,
    remove_punct: bool = True,
    remove_stopwords: bool = True,
    remove_numbers: bool = False,
    stopwords: Optional[Iterable[str]] = None,
) -> DocumentFeatureMatrix:
    """
    Tokenize a corpus and build its document-feature matrix.

    Returns
    -------
    DocumentFeatureMatrix whose docvars are the corpus docvars.
    """
    toks = tokens(corpus.texts, remove_punct=remove_punct,
                  remove_numbers=remove_numbers,
                  remove_stopwords=remove_stopwords, stopwords=stopwords)
    dfmat = dfm_from_tokens(toks, corpus.docvars)
    log.info("Built %r", dfmat)
    return dfmat


def feature_summary(dfmat: DocumentFeatureMatrix, n: int = 20) -> Dict[str, int]:
    """Top-n features with their corpus frequencies, for logging."""
    return {k: int(v) for k, v in dfmat.topfeatures(n).items()}
