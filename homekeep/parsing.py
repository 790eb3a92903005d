"""
Item name parsing and autogrouping

Turns free text (a paste, a dictated sentence, an imported file) into
item names, and clusters a room's items by shared keywords.
"""

import re
from collections import Counter
from typing import Iterable, Optional

from homekeep.models.home import DeclutterItem


SEPARATORS = re.compile(r"[,;\n]")
WORD = re.compile(r"[a-z0-9]+")

MIN_KEYWORD_LENGTH = 3
MIN_GROUP_SIZE = 2


def _clean(pieces: Iterable[str]) -> list[str]:
    return [p.strip() for p in pieces if p.strip()]


def parse_item_names(text: str) -> list[str]:
    """
    Split text into item names.

    Commas, semicolons and newlines separate names. Only when that yields
    a single name is the raw text split on `` and `` instead, so
    ``"lamp and chair"`` gives two names but ``"A, B and C"`` gives
    ``["A", "B and C"]``.
    """
    names = _clean(SEPARATORS.split(text))
    if len(names) == 1:
        names = _clean(text.split(" and "))
    return names


def keywords(name: str) -> set[str]:
    """Lowercased alphanumeric words of at least three characters."""
    return {w for w in WORD.findall(name.lower()) if len(w) >= MIN_KEYWORD_LENGTH}


def autogroup(items: Iterable[DeclutterItem]) -> dict[int, Optional[str]]:
    """
    Assign each item an auto-group label.

    A keyword qualifies when it occurs in at least two items. Qualifying
    keywords are tried from most to least shared (ties alphabetical) and
    an item takes the first one it contains. Items matching none get
    ``None``.

    Returns:
        Mapping of item id to capitalized keyword label (or None)
    """
    items = list(items)
    item_keywords = {item.id: keywords(item.name) for item in items}

    frequency = Counter()
    for words in item_keywords.values():
        frequency.update(words)

    ranked = sorted(
        (word for word, count in frequency.items() if count >= MIN_GROUP_SIZE),
        key=lambda word: (-frequency[word], word),
    )

    groups: dict[int, Optional[str]] = {}
    for item in items:
        words = item_keywords[item.id]
        match = next((word for word in ranked if word in words), None)
        groups[item.id] = match.capitalize() if match else None
    return groups
