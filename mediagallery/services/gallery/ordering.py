"""Natural, case-insensitive ordering of media names."""

import re
from collections.abc import Iterable

from mediagallery.services.gallery.models import CacheEntry

_CHUNK = re.compile(r"\d+|\D")

# Rank of each character class: separators and punctuation, then digits, then letters
_PUNCT, _DIGIT, _ALPHA = 0, 1, 2

NameKey = tuple[tuple[tuple[int, int, str], ...], str]


def natural_key(name: str) -> NameKey:
    """Sort key comparing ``name`` the way a numeric, case-insensitive collator does.

    Digit runs compare by value ("img2" < "img10"), letters compare without
    case, and punctuation sorts before digits and letters, so "Apple.jpg"
    precedes "apple2.jpg". The raw name breaks ties to keep the order total.
    """
    parts: list[tuple[int, int, str]] = []
    for chunk in _CHUNK.findall(name):
        if chunk.isdecimal():
            parts.append((_DIGIT, int(chunk), ""))
        elif chunk.isalpha():
            parts.append((_ALPHA, 0, chunk.casefold()))
        else:
            parts.append((_PUNCT, 0, chunk))
    return tuple(parts), name


def sort_entries(entries: Iterable[CacheEntry]) -> tuple[CacheEntry, ...]:
    return tuple(sorted(entries, key=lambda e: natural_key(e.name)))


def sort_names(names: Iterable[str]) -> list[str]:
    return sorted(names, key=natural_key)
