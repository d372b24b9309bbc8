from __future__ import annotations
import re
from typing import Iterable, List, Optional, Tuple

from .config import BLANK_CHARS, WORD_BOUNDARY_CHARS
from .models import RankedMatch


class InvalidFragment(ValueError):
    """The typed fragment cannot be turned into a fuzzy pattern."""


def is_blank(fragment: str) -> bool:
    # /* ~~~ empty, or only opening brackets / spaces: a bare trigger ~~~ */
    return all(ch in BLANK_CHARS for ch in fragment)


def fuzzy_pattern(fragment: str) -> re.Pattern:
    """Every character escaped, each followed by ``.*``; case-insensitive."""
    if "\x00" in fragment:
        raise InvalidFragment("fragment contains a NUL byte")
    return re.compile("".join(re.escape(ch) + ".*" for ch in fragment), re.IGNORECASE)


def _tightest_span(q: str, t: str) -> Optional[Tuple[int, int]]:
    """
    Shortest window of t containing q as a subsequence, as (start, end).
    Both strings are already casefolded.
    """
    best: Optional[Tuple[int, int]] = None
    for start, ch in enumerate(t):
        if ch != q[0]:
            continue
        i, j = 0, start
        while i < len(q) and j < len(t):
            if t[j] == q[i]:
                i += 1
            j += 1
        if i < len(q):
            break  # no later start can complete either
        if best is None or (j - start) < (best[1] - best[0]):
            best = (start, j)
    return best


def _quality(q: str, t: str) -> int:
    """
    2 points per fragment character; +1 when a contiguous hit starts a word;
    scattered hits lose one point per skipped character.
    """
    base = 2 * len(q)
    pos = t.find(q)
    if pos != -1:
        at_word = pos == 0 or t[pos - 1] in WORD_BOUNDARY_CHARS
        return base + (1 if at_word else 0)
    span = _tightest_span(q, t)
    if span is None:
        return base  # pattern matched but casefold differs; treat as plain hit
    start, end = span
    return base - ((end - start) - len(q))


def score(fragment: str, candidate: str) -> float:
    # length term stays below 1 so it only orders equal-quality matches
    return float(_quality(fragment.casefold(), candidate.casefold())) + 1.0 / (1 + len(candidate))


def rank(fragment: str, candidates: Iterable[str]) -> List[RankedMatch]:
    """
    Fuzzy-filter and order ``candidates`` by how well they match ``fragment``.

    A blank fragment returns every candidate, in the given order, unscored.
    Otherwise non-matching candidates are dropped and the rest are sorted by
    score (high first), then alphabetically, so equal inputs always give the
    same order.
    """
    if is_blank(fragment):
        return [RankedMatch(text=c, score=0.0) for c in candidates]

    pat = fuzzy_pattern(fragment)
    rows = [RankedMatch(text=c, score=score(fragment, c)) for c in candidates if pat.search(c)]
    rows.sort(key=lambda r: (-r.score, r.text))
    return rows
