"""Shared text-processing utilities.

Pure functions with no domain dependencies — safe to import from any
layer (CLI, store, ranking, export).
"""

from __future__ import annotations

import re

# Symbols that carry meaning in language names ("C++", "F#") are spelled
# out rather than dropped, so "C", "C++" and "C#" stay distinct.
_SPELLED_SYMBOLS = (
    ("+", "p"),
    ("#", "sharp"),
    ("*", "star"),
    ("$", "dollar"),
)


def title_to_permalink(title: str) -> str:
    """Convert an entity title to the id-style permalink used by the dataset.

    >>> title_to_permalink("C++")
    'cpp'
    >>> title_to_permalink("Standard ML")
    'standard-ml'
    """
    slug = title.strip().lower()
    for symbol, spelled in _SPELLED_SYMBOLS:
        slug = slug.replace(symbol, spelled)
    slug = re.sub(r"[\s_/:\\\[\]]+", "-", slug)
    slug = re.sub(r"[^\w-]", "", slug)
    return re.sub(r"-{2,}", "-", slug).strip("-")
