"""Frequency-based keyword extraction over answer text."""

from __future__ import annotations

from collections import Counter
import re

from razdel import tokenize


_WORD_RE = re.compile(r"[^\W_]+", re.UNICODE)
MIN_KEYWORD_LENGTH = 4
STOPWORDS = frozenset(
    {
        "the",
        "is",
        "and",
        "of",
        "to",
        "a",
        "in",
        "for",
        "that",
        "with",
        "by",
        "this",
        "be",
        "or",
        "are",
        "from",
        "an",
        "as",
        "at",
        "your",
        "all",
        "have",
        "new",
        "more",
        "has",
        "some",
        "them",
        "other",
        "not",
        "can",
        "would",
        "should",
        "could",
        "may",
        "might",
        "will",
        "than",
    }
)


def _words(text: str) -> list[str]:
    words: list[str] = []
    for token in tokenize(text.lower()):
        value = "".join(_WORD_RE.findall(token.text))
        if value:
            words.append(value)
    return words


def extract_keywords(text: object, *, limit: int = 5) -> list[str]:
    """Most frequent content words of ``text``; ties keep first-occurrence order."""
    if not isinstance(text, str) or not text.strip() or limit <= 0:
        return []

    counts: Counter[str] = Counter()
    for word in _words(text):
        if len(word) < MIN_KEYWORD_LENGTH or word in STOPWORDS:
            continue
        counts[word] += 1
    return [word for word, _ in counts.most_common(limit)]
