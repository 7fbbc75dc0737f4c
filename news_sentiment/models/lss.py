"""
================================================================================
LATENT SEMANTIC SCALING (LSS)
================================================================================
Semi-supervised document scaling with seed words.

1. Embed terms. A truncated SVD of the sentence-level document-feature
   matrix X (sentences x terms) gives X ~ U S V^T. Each term j is
   represented by its column of V^T, a k-dimensional vector e_j.

2. Weight seed words. Each seed pattern carries a sign (+1/-1). Patterns
   are expanded against the vocabulary, and a pattern's weight is shared
   equally by the terms it matches. Positive weights are normalized to sum
   to +1 and negative weights to sum to -1:

       w_s = sign(s) / (n_patterns_of_sign * n_terms_matched_by_pattern)

3. Polarity coefficients. For every candidate term j,

       beta_j = sum_s  w_s * cos(e_j, e_s)

4. Document scores. For a document d with term counts x_dj restricted to
   the candidate terms,

       fit_d = sum_j (x_dj / n_d) * beta_j,   n_d = sum_j x_dj

   Documents with n_d = 0 are undefined (NaN). Scores are optionally
   standardized across documents (rescale=True).

Reference:
    Watanabe, K. (2021). Latent Semantic Scaling: A Semisupervised
    Text Analysis Technique for New Domains and Languages. Communication
    Methods and Measures, 15(2), 81-102.

Author: Jose Orlando Bobadilla Fuentes, CQF | MSc AI
================================================================================
"""

from typing import Dict, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd
from sklearn.decomposition import TruncatedSVD

from news_sentiment.config import DEFAULT_SEEDS
from news_sentiment.features import DocumentFeatureMatrix, pattern_mask
from news_sentiment.utils import get_logger, standardize, timeit

log = get_logger(__name__)


def weight_seeds(
    seeds: Mapping[str, float],
    features: Sequence[str],
) -> pd.Series:
    """
    Expand seed patterns against a vocabulary and weight the matches.

    Returns
    -------
    pd.Series indexed by matched feature with signed weights. Positive
    weights sum to +1 and negative weights to -1 (when present).

    Raises
    ------
    ValueError : if no seed pattern matches the vocabulary.
    """
    features = np.asarray(features, dtype=object)
    matched: Dict[str, np.ndarray] = {}
    for pattern, value in seeds.items():
        if value == 0:
            continue
        hits = features[pattern_mask(features, pattern, "glob")]
        if len(hits) == 0:
            log.warning("Seed word '%s' not found in the vocabulary; dropped.",
                        pattern)
            continue
        matched[pattern] = hits

    if not matched:
        raise ValueError("None of the seed words occur in the vocabulary.")

    n_pos = sum(1 for p in matched if seeds[p] > 0)
    n_neg = sum(1 for p in matched if seeds[p] < 0)
    weights: Dict[str, float] = {}
    for pattern, hits in matched.items():
        n_sign = n_pos if seeds[pattern] > 0 else n_neg
        w = np.sign(seeds[pattern]) / (n_sign * len(hits))
        for term in hits:
            weights[term] = weights.get(term, 0.0) + w
    return pd.Series(weights, name="seed_weight", dtype=float)


def _unit_rows(m: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(m, axis=1, keepdims=True)
    return np.divide(m, norms, out=np.zeros_like(m), where=norms > 0)


class LatentSemanticScaling:
    """
    Latent Semantic Scaling model.

    Parameters
    ----------
    seeds : mapping {pattern: +1/-1}, optional
        Polarity seed words (glob patterns allowed). Defaults to the
        standard sentiment seed set.
    k : int
        Number of SVD dimensions (default 300). Clipped to
        min(n_docs, n_features) - 1 when the matrix is smaller.
    rescale : bool
        Standardize predictions across documents by default.
    random_state : int
        Seed for the randomized SVD.
    """

    def __init__(
        self,
        seeds: Optional[Mapping[str, float]] = None,
        k: int = 300,
        rescale: bool = True,
        random_state: int = 42,
    ):
        if k < 1:
            raise ValueError(f"k must be a positive integer, got {k}")
        self.seeds = dict(seeds) if seeds is not None else dict(DEFAULT_SEEDS)
        self.k = k
        self.rescale = rescale
        self.random_state = random_state
        self.fitted_ = False

    # ------------------------------------------------------------------
    # Fit
    # ------------------------------------------------------------------
    @timeit
    def fit(
        self,
        dfmat: DocumentFeatureMatrix,
        terms: Optional[Sequence[str]] = None,
    ) -> "LatentSemanticScaling":
        """
        Fit the term embedding and polarity coefficients.

        Parameters
        ----------
        dfmat : DocumentFeatureMatrix
            Sentence-level count matrix used to learn the embedding.
        terms : sequence of str, optional
            Candidate vocabulary to receive coefficients. Terms absent
            from the matrix are ignored. Defaults to all features.

        Returns
        -------
        self (fitted)
        """
        n_docs, n_feats = dfmat.shape
        k_max = min(n_docs, n_feats) - 1
        if k_max < 1:
            raise ValueError(
                f"Matrix of shape {dfmat.shape} is too small for SVD."
            )
        k = min(self.k, k_max)
        if k < self.k:
            log.warning("k=%d exceeds the matrix rank bound; using k=%d.",
                        self.k, k)

        svd = TruncatedSVD(n_components=k, algorithm="randomized",
                           random_state=self.random_state)
        svd.fit(dfmat.matrix.astype(float))
        embedding = _unit_rows(svd.components_.T)      # features x k

        features = list(dfmat.features)
        index = {f: i for i, f in enumerate(features)}

        seed_weights = weight_seeds(self.seeds, features)

        if terms is None:
            terms = features
        candidates = [t for t in dict.fromkeys(terms) if t in index]
        n_missing = len(set(terms)) - len(candidates)
        if n_missing:
            log.info("%d candidate term(s) not in the matrix were ignored.",
                     n_missing)
        if not candidates:
            raise ValueError("None of the candidate terms occur in the matrix.")

        term_idx = [index[t] for t in candidates]
        seed_idx = [index[s] for s in seed_weights.index]
        simil = embedding[term_idx] @ embedding[seed_idx].T   # terms x seeds
        beta = simil @ seed_weights.to_numpy()

        freq = dfmat.featfreq()
        self.k_ = k
        self.singular_values_ = svd.singular_values_
        self.seeds_weighted_ = seed_weights
        self.similarity_ = pd.DataFrame(simil, index=candidates,
                                        columns=seed_weights.index)
        self.beta_ = pd.Series(beta, index=candidates, name="coef")
        self.frequency_ = freq.loc[candidates].rename("frequency")
        self.fitted_ = True

        log.info("LSS fitted: k=%d, %d seed terms, %d candidate terms",
                 k, len(seed_weights), len(candidates))
        return self

    def _check_fitted(self) -> None:
        if not self.fitted_:
            raise RuntimeError("LSS model not fitted. Call fit() first.")

    # ------------------------------------------------------------------
    # Coefficients
    # ------------------------------------------------------------------
    @property
    def coef(self) -> pd.Series:
        """Polarity coefficient per term, most positive first."""
        self._check_fitted()
        return self.beta_.sort_values(ascending=False)

    def most_positive(self, n: int = 20) -> pd.Series:
        return self.coef.head(n)

    def most_negative(self, n: int = 20) -> pd.Series:
        return self.coef.tail(n).iloc[::-1]

    def terms_frame(self) -> pd.DataFrame:
        """Coefficient, frequency and seed flag per term (for plotting)."""
        self._check_fitted()
        df = pd.DataFrame({
            "term": self.beta_.index,
            "coef": self.beta_.values,
            "frequency": self.frequency_.values,
        })
        df["is_seed"] = df["term"].isin(self.seeds_weighted_.index)
        return df.sort_values("coef", ascending=False).reset_index(drop=True)

    # ------------------------------------------------------------------
    # Predict
    # ------------------------------------------------------------------
    def predict(
        self,
        dfmat: DocumentFeatureMatrix,
        rescale: Optional[bool] = None,
        se_fit: bool = False,
    ) -> Union[pd.Series, pd.DataFrame]:
        """
        Project documents onto the polarity scale.

        Parameters
        ----------
        dfmat : DocumentFeatureMatrix
            Any count matrix; only the model's terms are used.
        rescale : bool, optional
            Standardize scores across documents (default: self.rescale).
        se_fit : bool
            Also return standard errors and matched term counts.

        Returns
        -------
        pd.Series of scores indexed by doc_id, or a DataFrame with
        columns [fit, se_fit, n] when se_fit=True. Documents without any
        model term score NaN.
        """
        self._check_fitted()
        rescale = self.rescale if rescale is None else rescale
        beta = self.beta_.to_numpy()

        x = dfmat.match_features(list(self.beta_.index))
        n = x.ntoken().astype(float)
        prop = x.weight("prop").matrix
        fit = np.asarray(prop @ beta).ravel()
        fit[n == 0] = np.nan

        if se_fit:
            # proportion-weighted variance of the coefficients per document
            sq = np.asarray(prop @ (beta ** 2)).ravel() - fit ** 2
            var = np.clip(sq, 0.0, None)
            se = np.sqrt(var) / np.sqrt(np.where(n > 0, n, np.nan))

        if rescale:
            valid = ~np.isnan(fit)
            sd = np.std(fit[valid], ddof=1) if valid.sum() > 1 else 0.0
            fit = standardize(fit)
            if se_fit:
                se = se / sd if sd > 0 else se * 0.0

        index = pd.Index(x.doc_ids, name="doc_id")
        if se_fit:
            return pd.DataFrame({"fit": fit, "se_fit": se, "n": n.astype(int)},
                                index=index)
        return pd.Series(fit, index=index, name="fit")

    def __repr__(self) -> str:
        state = (f"k={self.k_}, terms={len(self.beta_)}" if self.fitted_
                 else f"k={self.k}, unfitted")
        return f"LatentSemanticScaling({state}, seeds={len(self.seeds)})"
