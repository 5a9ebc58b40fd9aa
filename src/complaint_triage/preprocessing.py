"""Text normalization for complaint descriptions.

Turns raw complaint text into an ordered list of normalized tokens:

- lowercasing and coercion of non-string input
- extraction of ASCII letter runs (digits and punctuation are dropped)
- stopword removal
- light suffix stripping

The stemmer is deliberately crude. It applies the first matching suffix
rule only, and each rule carries a minimum word length so short words
are never stemmed to nothing.
"""

from __future__ import annotations

import re
from typing import Any

from .lexicon import STOP_WORDS

_WORD_RE = re.compile(r"[a-z]+")

# (suffix, minimum length exclusive, characters to drop, replacement)
_SUFFIX_RULES: tuple[tuple[str, int, int, str], ...] = (
    ("ing", 5, 3, ""),
    ("ed", 4, 2, ""),
    ("ly", 4, 2, ""),
    ("ies", 5, 3, "y"),
    ("es", 4, 2, ""),
    ("s", 3, 1, ""),
)


def _coerce(text: Any) -> str:
    if not text:
        return ""
    return text if isinstance(text, str) else str(text)


def tokenize(text: Any) -> list[str]:
    """Lowercase text and extract maximal runs of ASCII letters."""
    return _WORD_RE.findall(_coerce(text).lower())


def stem(word: str) -> str:
    """Strip one suffix from a lowercase word.

    Rules are checked in priority order and only the first match applies.

    Args:
        word: Lowercase word.

    Returns:
        The stemmed word, or the word unchanged if no rule matches.
    """
    for suffix, min_len, drop, replacement in _SUFFIX_RULES:
        if word.endswith(suffix) and len(word) > min_len:
            return word[:-drop] + replacement
    return word


def preprocess(text: Any) -> list[str]:
    """Normalize text into tokens.

    Order and duplicates are preserved. ``None``, empty and non-string
    input never raise; they yield an empty list or the tokens of
    ``str(text)``.

    Example::

        >>> preprocess("My phone was stolen from the bus")
        ['phone', 'stolen', 'bus']
    """
    return [stem(word) for word in tokenize(text) if word not in STOP_WORDS]
