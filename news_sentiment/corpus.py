"""
================================================================================
NEWS CORPUS: LOADING, SENTENCE RESHAPING, AND SYNTHETIC GENERATION
================================================================================
A corpus is an ordered collection of documents, each with an identifier,
raw text, a publication date, and optional metadata (docvars).

Sources:
    1. Serialized file -- pickle, parquet, CSV or JSON(L) on local disk
    2. Synthetic       -- dated economic news with a controllable tone
                          regime, for testing and demonstration

All sources produce a Corpus with the canonical columns:
    [doc_id, text, date, <docvars...>]

Sentence reshaping splits every document into sentences with nltk's Punkt
tokenizer (untrained parameters, so no model download is needed) and
copies the parent's metadata onto each sentence. LSS is fitted on the
sentence-level corpus because sentences give denser co-occurrence
information than whole articles.

Author: Jose Orlando Bobadilla Fuentes, CQF | MSc AI
================================================================================
"""

from pathlib import Path
from typing import List, Optional, Union

import numpy as np
import pandas as pd
from nltk.tokenize.punkt import PunktSentenceTokenizer
from tqdm import tqdm

from news_sentiment.utils import get_logger

log = get_logger(__name__)

_SENTENCE_TOKENIZER = PunktSentenceTokenizer()


def split_sentences(text: str) -> List[str]:
    """Split raw text into stripped, non-empty sentences."""
    if not isinstance(text, str) or not text.strip():
        return []
    return [s.strip() for s in _SENTENCE_TOKENIZER.tokenize(text) if s.strip()]


class Corpus:
    """
    Ordered collection of dated documents backed by a DataFrame.

    Parameters
    ----------
    data : pd.DataFrame
        One row per document. Must contain the text and date columns.
    text_column : str
        Column holding raw document text.
    date_column : str
        Column holding the publication date (parsed with pd.to_datetime).
    docid_column : str, optional
        Column holding document identifiers. If absent, identifiers
        "text1", "text2", ... are assigned in row order.
    """

    def __init__(
        self,
        data: pd.DataFrame,
        text_column: str = "text",
        date_column: str = "date",
        docid_column: Optional[str] = "doc_id",
    ):
        missing = [c for c in (text_column, date_column) if c not in data.columns]
        if missing:
            raise ValueError(
                f"Corpus data is missing required column(s): {missing}. "
                f"Available: {list(data.columns)}"
            )

        df = data.copy()
        df = df.rename(columns={text_column: "text", date_column: "date"})
        if docid_column and docid_column in df.columns:
            df = df.rename(columns={docid_column: "doc_id"})
            df["doc_id"] = df["doc_id"].astype(str)
        else:
            df["doc_id"] = [f"text{i + 1}" for i in range(len(df))]

        if df["doc_id"].duplicated().any():
            raise ValueError("Document identifiers must be unique.")

        df["text"] = df["text"].fillna("").astype(str)
        dates = pd.to_datetime(df["date"], errors="coerce")
        n_bad = int(dates.isna().sum())
        if n_bad:
            log.warning("Dropping %d document(s) with unparseable dates.", n_bad)
        df["date"] = dates
        df = df[dates.notna()]

        cols = ["doc_id", "text", "date"] + [
            c for c in df.columns if c not in ("doc_id", "text", "date")
        ]
        self._data = df[cols].reset_index(drop=True)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Corpus(n_docs={len(self)}, docvars={list(self.docvars.columns)})"

    @property
    def data(self) -> pd.DataFrame:
        return self._data

    @property
    def texts(self) -> List[str]:
        return self._data["text"].tolist()

    @property
    def doc_ids(self) -> List[str]:
        return self._data["doc_id"].tolist()

    @property
    def dates(self) -> pd.Series:
        return self._data["date"]

    @property
    def docvars(self) -> pd.DataFrame:
        """Document metadata (everything except the text)."""
        return self._data.drop(columns=["text"])

    def subset(self, mask: Union[pd.Series, np.ndarray]) -> "Corpus":
        """Return a new corpus with the rows where mask is True."""
        return Corpus(self._data[np.asarray(mask, dtype=bool)])

    # ------------------------------------------------------------------
    # Reshaping
    # ------------------------------------------------------------------
    def reshape_sentences(self, verbose: bool = False) -> "Corpus":
        """
        Split every document into sentences.

        Each sentence inherits its parent's date and docvars. Sentence
        identifiers are "<parent doc_id>.<n>" (1-based) and the parent
        identifier is kept in a 'parent_id' column.

        Returns
        -------
        Corpus with one row per sentence.
        """
        records = []
        rows = self._data.to_dict("records")
        for row in tqdm(rows, desc="Sentences", disable=not verbose):
            for i, sent in enumerate(split_sentences(row["text"]), start=1):
                rec = dict(row)
                rec["parent_id"] = row["doc_id"]
                rec["doc_id"] = f"{row['doc_id']}.{i}"
                rec["text"] = sent
                records.append(rec)

        if records:
            df = pd.DataFrame(records)
        else:
            df = pd.DataFrame(columns=list(self._data.columns) + ["parent_id"])
        log.info("Reshaped %d documents into %d sentences.", len(self), len(df))
        return Corpus(df)


# ============================================================================
# LOADING
# ============================================================================

_READERS = {
    ".pkl": "pickle", ".pickle": "pickle",
    ".parquet": "parquet",
    ".csv": "csv",
    ".json": "json", ".jsonl": "jsonl",
}


def load_corpus(
    path: Union[str, Path],
    text_column: str = "text",
    date_column: str = "date",
    docid_column: Optional[str] = "doc_id",
) -> Corpus:
    """
    Load a serialized corpus from local disk.

    The format is chosen by file suffix. A pickle may hold either a
    DataFrame or a Corpus.

    Raises
    ------
    FileNotFoundError : if the file does not exist.
    ValueError        : unsupported suffix or missing text/date column.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Corpus file not found: {path}")

    kind = _READERS.get(path.suffix.lower())
    if kind is None:
        raise ValueError(
            f"Unsupported corpus format '{path.suffix}'. "
            f"Expected one of: {sorted(_READERS)}"
        )

    if kind == "pickle":
        obj = pd.read_pickle(path)
        if isinstance(obj, Corpus):
            log.info("Loaded corpus %s (%d docs)", path, len(obj))
            return obj
        df = obj
    elif kind == "parquet":
        df = pd.read_parquet(path)
    elif kind == "csv":
        df = pd.read_csv(path, low_memory=False)
    elif kind == "json":
        df = pd.read_json(path)
    else:
        df = pd.read_json(path, lines=True)

    if not isinstance(df, pd.DataFrame):
        raise ValueError(f"Corpus file {path} does not contain a table.")

    corpus = Corpus(df, text_column=text_column, date_column=date_column,
                    docid_column=docid_column)
    log.info("Loaded corpus %s (%d docs)", path, len(corpus))
    return corpus


# ============================================================================
# SYNTHETIC NEWS
# ============================================================================

class SyntheticNewsGenerator:
    """
    Generates dated multi-sentence economic news articles for testing and
    demonstration purposes. No data files required.

    The share of positive articles drifts slowly over time and drops
    after a shock date, so both sentiment methods should recover a
    visible fall in tone around that date.

    Parameters
    ----------
    seed : int
        Random seed for reproducibility.
    shock_date : str
        Date after which the tone turns negative.
    """

    POSITIVE_SEEDS = ["good", "nice", "excellent", "positive",
                      "fortunate", "correct", "superior"]
    NEGATIVE_SEEDS = ["bad", "nasty", "poor", "negative",
                      "unfortunate", "wrong", "inferior"]

    POSITIVE_TEMPLATES = [
        "The economy showed {pos} signs as growth accelerated in the {sector} sector.",
        "Economists said the outlook was {pos} after exports rose {pct} percent.",
        "Investors welcomed {pos} news on jobs and rising wages.",
        "Analysts described the economic recovery as {pos} and steady.",
        "Consumer confidence improved on {pos} economic data.",
        "{Sector} firms reported strong profits and record investment.",
        "The central bank said the economic expansion remained {pos}.",
        "Business leaders praised the {pos} performance of the economy.",
        "Hiring surged and unemployment fell to its lowest level in years.",
        "Retail sales beat forecasts in a {pos} month for the economy.",
    ]

    NEGATIVE_TEMPLATES = [
        "The economy suffered a {neg} quarter as output fell {pct} percent.",
        "Economists warned of recession after {neg} figures on unemployment.",
        "Investors feared more {neg} news from the {sector} sector.",
        "Analysts called the economic slowdown {neg} and worrying.",
        "Weak demand and falling prices hit {sector} companies hard.",
        "The central bank said the economic downturn was {neg} for households.",
        "Business leaders blamed {neg} policy for the crisis in the economy.",
        "Factories cut jobs as orders collapsed and debt mounted.",
        "Retail sales missed forecasts in a {neg} month for the economy.",
        "The pound slumped amid {neg} uncertainty over the economy.",
    ]

    NEUTRAL_TEMPLATES = [
        "The minister will speak about the economy on {day}.",
        "Parliament debated the budget for the {sector} sector.",
        "The report covers trade figures for the last quarter.",
        "Officials met in London to discuss economic policy.",
        "The statistics office publishes new data every month.",
        "A spokesperson declined to comment on the {sector} figures.",
    ]

    SECTORS = ["manufacturing", "housing", "energy", "banking",
               "retail", "construction", "technology", "farming"]
    DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]

    def __init__(self, seed: int = 42, shock_date: str = "2016-06-23"):
        self.rng = np.random.RandomState(seed)
        self.shock_date = pd.Timestamp(shock_date)

    def _fill(self, template: str) -> str:
        sector = self.rng.choice(self.SECTORS)
        return template.format(
            pos=self.rng.choice(self.POSITIVE_SEEDS),
            neg=self.rng.choice(self.NEGATIVE_SEEDS),
            sector=sector,
            Sector=sector.capitalize(),
            pct=round(self.rng.uniform(0.5, 6.0), 1),
            day=self.rng.choice(self.DAYS),
        )

    def _p_positive(self, date: pd.Timestamp, start: pd.Timestamp,
                    end: pd.Timestamp) -> float:
        span = max((end - start).days, 1)
        t = (date - start).days / span
        p = 0.55 + 0.10 * np.sin(2 * np.pi * t)
        if date >= self.shock_date:
            p -= 0.35
        return float(np.clip(p, 0.05, 0.95))

    def _article(self, p_pos: float) -> str:
        n_sent = self.rng.randint(3, 7)
        sentences = []
        for _ in range(n_sent):
            roll = self.rng.random_sample()
            if roll < 0.25:
                pool = self.NEUTRAL_TEMPLATES
            elif self.rng.random_sample() < p_pos:
                pool = self.POSITIVE_TEMPLATES
            else:
                pool = self.NEGATIVE_TEMPLATES
            sentences.append(self._fill(pool[self.rng.randint(len(pool))]))
        return " ".join(sentences)

    def generate(
        self,
        start_date: str = "2012-01-01",
        end_date: str = "2016-12-31",
        articles_per_day: float = 1.5,
    ) -> Corpus:
        """
        Generate a synthetic news corpus.

        Parameters
        ----------
        start_date, end_date : str
            Date range (business days).
        articles_per_day : float
            Average number of articles per business day (Poisson).

        Returns
        -------
        Corpus with docvars [date, p_positive].
        """
        start, end = pd.Timestamp(start_date), pd.Timestamp(end_date)
        records = []
        for date in pd.bdate_range(start, end):
            p_pos = self._p_positive(date, start, end)
            for _ in range(self.rng.poisson(articles_per_day)):
                records.append({
                    "text": self._article(p_pos),
                    "date": date,
                    "p_positive": p_pos,
                })

        df = pd.DataFrame(records, columns=["text", "date", "p_positive"])
        log.info("Generated %d synthetic articles (%s to %s)",
                 len(df), start.date(), end.date())
        return Corpus(df)
