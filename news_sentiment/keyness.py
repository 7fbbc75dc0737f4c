"""
================================================================================
CONTEXT-WINDOW KEYNESS
================================================================================
Selects the vocabulary that is characteristic of a topic, for use as the
candidate terms of the LSS model.

Every token within +/- `window` positions of a token matching the target
pattern (e.g. "econom*") is assigned to the target group, and all other
tokens to the reference group. The matched tokens themselves are removed.
For each term a 2x2 table is formed:

                    term      other terms
    target           a            c
    reference        b            d

and Pearson's chi-squared with Yates' continuity correction is computed:

    chi2 = N * max(|ad - bc| - N/2, 0)^2 / ((a+b)(c+d)(a+c)(b+d))

The statistic is signed: positive when the term is over-represented in the
target group (a > E[a]), negative otherwise. p-values come from the
chi-squared distribution with one degree of freedom.

Author: Jose Orlando Bobadilla Fuentes, CQF | MSc AI
================================================================================
"""

from collections import Counter
from typing import List, Sequence, Union

import numpy as np
import pandas as pd
from scipy import stats

from news_sentiment.features import compile_patterns
from news_sentiment.utils import get_logger, timeit

log = get_logger(__name__)


def split_context(
    token_lists: Sequence[Sequence[str]],
    pattern: Union[str, Sequence[str]],
    window: int = 10,
    valuetype: str = "glob",
):
    """
    Count tokens inside and outside the windows around pattern matches.

    Returns
    -------
    (Counter target, Counter reference, int n_matches)
    """
    rx = compile_patterns(pattern, valuetype)
    matcher = rx.match if valuetype == "glob" else rx.search
    inside, outside = Counter(), Counter()
    n_matches = 0

    for toks in token_lists:
        hits = [i for i, t in enumerate(toks) if matcher(t)]
        n_matches += len(hits)
        if not hits:
            outside.update(toks)
            continue
        is_hit = np.zeros(len(toks), dtype=bool)
        is_hit[hits] = True
        in_window = np.zeros(len(toks), dtype=bool)
        for i in hits:
            in_window[max(0, i - window): i + window + 1] = True
        for i, t in enumerate(toks):
            if is_hit[i]:
                continue
            if in_window[i]:
                inside[t] += 1
            else:
                outside[t] += 1

    return inside, outside, n_matches


def keyness_chi2(target: Counter, reference: Counter) -> pd.DataFrame:
    """
    Signed chi-squared keyness of every term, target vs reference.

    Returns
    -------
    pd.DataFrame with columns [feature, chi2, p, n_target, n_reference],
    sorted by chi2 descending.
    """
    features = sorted(set(target) | set(reference))
    cols = ["feature", "chi2", "p", "n_target", "n_reference"]
    if not features:
        return pd.DataFrame(columns=cols)

    a = np.array([target.get(f, 0) for f in features], dtype=float)
    b = np.array([reference.get(f, 0) for f in features], dtype=float)
    n_target, n_reference = a.sum(), b.sum()
    c = n_target - a
    d = n_reference - b
    n = n_target + n_reference

    denom = (a + b) * (c + d) * (a + c) * (b + d)
    diff = np.maximum(np.abs(a * d - b * c) - n / 2.0, 0.0)
    chi2 = np.divide(n * diff ** 2, denom, out=np.zeros_like(a), where=denom > 0)
    expected = (a + b) * (a + c) / n
    chi2 = np.where(a > expected, chi2, -chi2)
    p = stats.chi2.sf(np.abs(chi2), df=1)

    out = pd.DataFrame({
        "feature": features,
        "chi2": chi2,
        "p": p,
        "n_target": a.astype(int),
        "n_reference": b.astype(int),
    })
    return out.sort_values(["chi2", "feature"], ascending=[False, True]) \
              .reset_index(drop=True)


@timeit
def context_keyness(
    token_lists: Sequence[Sequence[str]],
    pattern: Union[str, Sequence[str]],
    window: int = 10,
    valuetype: str = "glob",
) -> pd.DataFrame:
    """Keyness table of the tokens surrounding a pattern."""
    inside, outside, n_matches = split_context(token_lists, pattern, window,
                                               valuetype)
    log.info("Keyness: %d matches of %r, %d target / %d reference tokens",
             n_matches, pattern, sum(inside.values()), sum(outside.values()))
    return keyness_chi2(inside, outside)


def char_context(
    token_lists: Sequence[Sequence[str]],
    pattern: Union[str, Sequence[str]],
    window: int = 10,
    p: float = 0.001,
    min_count: int = 10,
    top_n: int = 500,
    valuetype: str = "glob",
) -> List[str]:
    """
    Terms significantly associated with a pattern, strongest first.

    A term qualifies when it occurs at least `min_count` times inside the
    windows, is over-represented there (chi2 > 0), and has p <= `p`.
    At most `top_n` terms are returned.

    Raises
    ------
    ValueError : if no term qualifies.
    """
    key = context_keyness(token_lists, pattern, window, valuetype)
    sel = key[(key["chi2"] > 0) & (key["p"] <= p) & (key["n_target"] >= min_count)]
    terms = sel["feature"].head(top_n).tolist()
    if not terms:
        raise ValueError(
            f"No candidate terms for pattern {pattern!r} "
            f"(window={window}, p<={p}, min_count={min_count})."
        )
    log.info("Selected %d candidate terms for %r (top: %s)",
             len(terms), pattern, ", ".join(terms[:10]))
    return terms
