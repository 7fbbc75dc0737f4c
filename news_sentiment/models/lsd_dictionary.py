"""
================================================================================
LEXICODER SENTIMENT DICTIONARY SCORING
================================================================================
Dictionary-based sentiment in the style of the Lexicoder Sentiment
Dictionary (LSD2015), which was developed for political and economic
news coverage.

Entries are glob patterns ("recession*", "improv*") matched against the
features of a document-feature matrix. The sentiment score for
document d is

    S(d) = (N_pos - N_neg) / (N_tokens + 1)

where N_pos / N_neg are counts of tokens matching the positive /
negative categories and N_tokens is the document's total token count
after punctuation and stop word removal. The +1 keeps empty documents
at S = 0. Scores are then standardized across the corpus
(zero mean, unit sample variance) so they can be compared with LSS
predictions on the same axis.

Reference:
    Young, L. & Soroka, S. (2012). Affective News: The Automated Coding
    of Sentiment in Political Texts. Political Communication, 29(2).

Author: Jose Orlando Bobadilla Fuentes, CQF | MSc AI
================================================================================
"""

from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd

from news_sentiment.features import DocumentFeatureMatrix
from news_sentiment.utils import get_logger, standardize

log = get_logger(__name__)


class SentimentDictionary(Mapping):
    """
    Named categories of glob word patterns.

    Behaves like a read-only mapping {category: [patterns]}.
    Patterns are stored lowercased.
    """

    def __init__(self, entries: Mapping[str, Sequence[str]]):
        self._entries: Dict[str, List[str]] = {
            str(k): sorted({str(p).strip().lower() for p in v if str(p).strip()})
            for k, v in entries.items()
        }

    def __getitem__(self, key: str) -> List[str]:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        sizes = ", ".join(f"{k}={len(v)}" for k, v in self._entries.items())
        return f"SentimentDictionary({sizes})"

    def subset(self, keys: Sequence[str]) -> "SentimentDictionary":
        return SentimentDictionary({k: self._entries[k] for k in keys})

    @classmethod
    def read_lexicoder(cls, path: Union[str, Path]) -> "SentimentDictionary":
        """
        Read a Lexicoder-format dictionary file.

        Lines starting with '+' open a category; every following
        non-empty line is a pattern in that category. Lines starting
        with '#' are comments.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Dictionary file not found: {path}")
        entries: Dict[str, List[str]] = {}
        key = None
        with open(path, encoding="utf-8") as fh:
            for lineno, raw in enumerate(fh, start=1):
                line = raw.strip()
                if not line or line.startswith("#"):
                    continue
                if line.startswith("+"):
                    key = line[1:].strip().lower()
                    entries.setdefault(key, [])
                elif key is None:
                    raise ValueError(
                        f"{path}:{lineno}: pattern '{line}' appears before "
                        "any '+category' header"
                    )
                else:
                    entries[key].append(line)
        if not entries:
            raise ValueError(f"No categories found in dictionary file {path}")
        for key, patterns in entries.items():
            if not patterns:
                log.warning("Dictionary category '%s' in %s has no patterns; "
                            "it matches nothing.", key, path)
        log.info("Loaded dictionary %s: %s", path,
                 ", ".join(f"{k}={len(v)}" for k, v in entries.items()))
        return cls(entries)


# -------------------------------------------------------------------------
# Curated subset of LSD2015 entries. The full dictionary has ~2,900
# negative and ~1,700 positive patterns; multi-word negation entries
# ("not good") are not representable in a unigram matrix and are omitted.
# -------------------------------------------------------------------------
LSD_NEGATIVE = [
    "abandon*", "abominabl*", "abus*", "accus*", "adverse*", "afraid*",
    "aggress*", "alarm*", "anger*", "angry", "anxi*", "apprehens*",
    "arrest*", "attack*", "awful*", "bad", "badly", "bankrupt*", "blam*",
    "bleak*", "burden*", "catastroph*", "chao*", "clash*", "collaps*",
    "complain*", "concern*", "condemn*", "conflict*", "confus*", "corrupt*",
    "costly", "crash*", "crime*", "crisis", "crises", "critic*", "cut",
    "cuts", "damag*", "danger*", "deadlock*", "debt*", "decline*",
    "defeat*", "deficit*", "deplor*", "depress*", "destroy*", "deteriorat*",
    "difficult*", "disappoint*", "disast*", "dismal*", "disput*",
    "disrupt*", "distress*", "doubt*", "downturn*", "dread*", "fail*",
    "fear*", "fiasco*", "flaw*", "fraud*", "gloom*", "grim*", "harm*",
    "hostil*", "hurt*", "inferior*", "inflat*", "instabil*", "jeopard*",
    "lose", "loses", "losing", "loss*", "lost", "mess*", "miser*",
    "miss", "missed", "misses", "nasty", "negativ*", "panic*", "peril*",
    "pessimis*", "plummet*", "plung*", "poor*", "problem*", "protest*",
    "recession*", "risk*", "ruin*", "sad*", "scandal*", "scare*",
    "setback*", "severe*", "shock*", "shortfall*", "shrink*", "slowdown*",
    "slump*", "stagnat*", "struggl*", "suffer*", "terribl*", "threat*",
    "trouble*", "turmoil*", "uncertain*", "unemploy*", "unfortunat*",
    "unstabl*", "upset*", "victim*", "violat*", "volatil*", "vulnerab*",
    "warn*", "weak*", "woe*", "worr*", "worse*", "worst", "wrong*",
]

LSD_POSITIVE = [
    "abundan*", "accomplish*", "achiev*", "admir*", "advantag*", "affluen*",
    "agree*", "ambitio*", "applau*", "approv*", "assur*", "attractiv*",
    "benefic*", "benefit*", "best", "better", "bold*", "boom*", "boost*",
    "bright*", "brilliant*", "calm*", "celebrat*", "champion*", "cheer*",
    "comfort*", "confiden*", "congratulat*", "correct*", "creativ*",
    "delight*", "deserv*", "effectiv*", "efficien*", "encourag*",
    "enjoy*", "enthusias*", "excel*", "exceptional*", "excit*", "fair",
    "favorabl*", "favourabl*", "flourish*", "fortunat*", "gain*",
    "generous*", "glad*", "good", "great*", "grow", "growing", "growth",
    "happ*", "healthy", "helpful*", "hope*", "ideal*", "impressiv*",
    "improv*", "innovat*", "nice*", "optimis*", "outstanding*", "perfect*",
    "pleas*", "popular*", "positiv*", "praise*", "proper*", "prosper*",
    "protect*", "proud*", "rebound*", "record", "recover*", "reliab*",
    "relief", "resilien*", "robust*", "safe*", "satisf*", "secur*",
    "solid*", "stabl*", "steady", "strength*", "strong*", "succe*",
    "superior*", "support*", "surg*", "thriv*", "triumph*", "welcom*",
    "win", "winning", "wins",
]

LSD2015 = SentimentDictionary({"negative": LSD_NEGATIVE,
                               "positive": LSD_POSITIVE})


class DictionarySentiment:
    """
    Polarity-dictionary sentiment scorer over a document-feature matrix.

    Parameters
    ----------
    dictionary : SentimentDictionary, optional
        Must contain the positive and negative keys (default LSD2015).
    positive_key, negative_key : str
        Category names used for the two polarities.
    """

    def __init__(
        self,
        dictionary: Optional[SentimentDictionary] = None,
        positive_key: str = "positive",
        negative_key: str = "negative",
    ):
        self.dictionary = dictionary if dictionary is not None else LSD2015
        for key in (positive_key, negative_key):
            if key not in self.dictionary:
                raise ValueError(
                    f"Dictionary has no '{key}' category; "
                    f"available: {list(self.dictionary)}"
                )
        self.positive_key = positive_key
        self.negative_key = negative_key

    def lookup(self, dfmat: DocumentFeatureMatrix) -> DocumentFeatureMatrix:
        """Per-document category counts as a (docs x 2) matrix."""
        return dfmat.lookup(
            self.dictionary.subset([self.negative_key, self.positive_key])
        )

    @staticmethod
    def raw_score(
        n_positive: np.ndarray,
        n_negative: np.ndarray,
        n_tokens: np.ndarray,
    ) -> np.ndarray:
        """(pos - neg) / (ntoken + 1)."""
        n_positive = np.asarray(n_positive, dtype=float)
        n_negative = np.asarray(n_negative, dtype=float)
        n_tokens = np.asarray(n_tokens, dtype=float)
        return (n_positive - n_negative) / (n_tokens + 1.0)

    def score(self, dfmat: DocumentFeatureMatrix) -> pd.DataFrame:
        """
        Score every document of the matrix.

        Returns
        -------
        pd.DataFrame (one row per document, same order) with columns:
            'doc_id'     : document identifier
            'n_positive' : matched positive tokens
            'n_negative' : matched negative tokens
            'n_tokens'   : total tokens
            'raw'        : (pos - neg) / (ntoken + 1)
            'score'      : raw standardized across the corpus
        """
        counts = self.lookup(dfmat).to_frame()
        n_pos = counts[self.positive_key].to_numpy()
        n_neg = counts[self.negative_key].to_numpy()
        n_tok = dfmat.ntoken()
        raw = self.raw_score(n_pos, n_neg, n_tok)

        if len(raw) < 2 or np.std(raw, ddof=1) == 0:
            log.warning("Dictionary scores have zero variance across %d "
                        "document(s); standardized scores set to 0.", len(raw))
        result = pd.DataFrame({
            "doc_id": dfmat.doc_ids,
            "n_positive": n_pos.astype(int),
            "n_negative": n_neg.astype(int),
            "n_tokens": n_tok.astype(int),
            "raw": raw,
            "score": standardize(raw),
        })
        log.info("Dictionary scores: %d docs, raw mean %.4f, %d with no tokens",
                 len(result), float(np.mean(raw)) if len(raw) else 0.0,
                 int((n_tok == 0).sum()))
        return result

    def __repr__(self) -> str:
        return (f"DictionarySentiment(positive={len(self.dictionary[self.positive_key])}, "
                f"negative={len(self.dictionary[self.negative_key])})")
