"""Pure string-matching helpers behind the page index search strategies.

None of these functions know about pages or the index; thresholds are passed
in by the caller so each strategy can be tested in isolation.
"""

from __future__ import annotations

import re
from typing import Iterable

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

# Zero-width space, non-joiner, joiner and the BOM
_INVISIBLE_CHARS = re.compile("[\u200b-\u200d\ufeff]")
_LINE_SPLIT = re.compile(r"\r?\n")


def split_words(text: str) -> list[str]:
    """Lower-case *text* and split it on whitespace runs."""
    return text.lower().split()


def whole_word_pattern(word: str) -> re.Pattern[str]:
    """Case-insensitive pattern matching *word* between word boundaries."""
    return re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)


def count_word_matches(words: Iterable[str], title: str) -> int:
    """Number of *words* that occur as whole words somewhere in *title*."""
    lower_title = title.lower()
    return sum(1 for word in words if whole_word_pattern(word).search(lower_title))


def leading_run_length(query: str, title: str) -> int:
    """Length of the run of equal words at the start of *query* and *title*.

    Both strings are lower-cased and split on single spaces, so
    ``"alpha beta"`` against ``"Alpha Beta Gamma"`` scores 2 and
    ``"beta"`` against the same title scores 0.
    """
    query_words = query.lower().split(" ")
    title_words = title.lower().split(" ")
    run = 0
    for query_word, title_word in zip(query_words, title_words):
        if query_word != title_word:
            break
        run += 1
    return run


def clean_lines(text: str, min_length: int) -> list[str]:
    """Split free-form page text into trimmed lines of at least *min_length*."""
    lines = (_INVISIBLE_CHARS.sub("", line).strip() for line in _LINE_SPLIT.split(text))
    return [line for line in lines if len(line) >= min_length]


def approximate_score(needle: str, line: str) -> float:
    """Similarity in ``[0, 1]`` of the best alignment of *needle* inside *line*.

    Both sides are lower-cased and stripped of punctuation first.  An empty
    needle never matches.
    """
    if not needle.strip():
        return 0.0
    return fuzz.partial_ratio(needle, line, processor=default_process) / 100.0


def best_line_score(needle: str, lines: Iterable[str], threshold: float) -> float:
    """Highest :func:`approximate_score` over *lines* that exceeds *threshold*.

    Returns ``0.0`` when no line clears the threshold.
    """
    best = 0.0
    for line in lines:
        score = approximate_score(needle, line)
        if score > threshold and score > best:
            best = score
    return best
