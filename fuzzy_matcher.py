import math
from dataclasses import dataclass
from typing import Optional

from cell_coercion import cell_text, fold_case
from similarity import similarity


@dataclass(frozen=True)
class MatchResult:
    matched: bool
    score: float
    match_index: int
    matched_text: str
    exact: bool


def _normalize(text: str, case_sensitive: bool) -> str:
    return text if case_sensitive else fold_case(text)


def exact_match(cell_text_value: str, query: str, case_sensitive: bool = False):
    if not cell_text_value or not query:
        return None
    haystack = _normalize(cell_text_value, case_sensitive)
    needle = _normalize(query, case_sensitive)
    idx = haystack.find(needle)
    if idx < 0:
        return None
    return MatchResult(
        matched=True,
        score=1.0,
        match_index=idx,
        matched_text=cell_text_value[idx : idx + len(query)],
        exact=True,
    )


def window_lengths(query_len: int, text_len: int) -> range:
    shortest = max(1, math.floor(0.6 * query_len))
    longest = min(text_len, math.ceil(1.5 * query_len))
    return range(shortest, longest + 1)


def best_window(text: str, query: str):
    """Return (score, start, length) of the window most similar to query.

    Windows are visited shortest first, left to right; ties keep the first
    window seen. Length is 0 when the text is too short for any window.
    """
    best = (-1.0, 0, 0)
    for length in window_lengths(len(query), len(text)):
        for start in range(len(text) - length + 1):
            score = similarity(query, text[start : start + length])
            if score > best[0]:
                best = (score, start, length)
    return best


def match(
    cell_text_value: str,
    query: str,
    threshold: float = 0.6,
    case_sensitive: bool = False,
) -> Optional[MatchResult]:
    if not cell_text_value or not query:
        return None

    hit = exact_match(cell_text_value, query, case_sensitive)
    if hit is not None:
        return hit

    text = _normalize(cell_text_value, case_sensitive)
    needle = _normalize(query, case_sensitive)
    score, start, length = best_window(text, needle)
    if length == 0 or score < threshold:
        return None
    return MatchResult(
        matched=True,
        score=score,
        match_index=start,
        matched_text=cell_text_value[start : start + length],
        exact=False,
    )


def cell_match(value, query, *, fuzzy=False, threshold=0.6, case_sensitive=False):
    """The per-cell decision shared by find and replace."""
    text = cell_text(value)
    if fuzzy:
        return match(text, query, threshold, case_sensitive)
    return exact_match(text, query, case_sensitive)
