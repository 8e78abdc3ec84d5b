"""Filename-derived tags and the optional precomputed tag file."""

import json
import re
from collections.abc import Iterable, Mapping
from pathlib import Path

from mediagallery.utils.logger import logger

_TOKEN_SPLIT = re.compile(r"[-_\s]+")
_YEAR_RUN = re.compile(r"\d{4}")

# Substrings that become tags of the same name
_MARKER_TAGS = ("screenshot", "edited")


def derive_tags(filename: str) -> frozenset[str]:
    """Derive the tag set of a file from its name.

    Pure: the result depends on ``filename`` alone.

    Args:
        filename: Base filename, extension included

    Returns:
        Frozen set of lowercase tags, possibly empty

    Examples:
        >>> sorted(derive_tags("IMG_2023-beach-sunset.jpg"))
        ['beach', 'camera', 'dated', 'img', 'sunset']
    """
    lowered = filename.lower()
    tags: set[str] = set()

    # Tokens come from the stem; the extension would glue onto the last token.
    stem = lowered.rsplit(".", 1)[0]
    for token in _TOKEN_SPLIT.split(stem):
        if len(token) > 2 and token.isalpha():
            tags.add(token)

    if _YEAR_RUN.search(filename):
        tags.add("dated")
    if lowered.startswith("img_"):
        tags.add("camera")
    if lowered.startswith("dsc"):
        tags.add("digital")
    for marker in _MARKER_TAGS:
        if marker in lowered:
            tags.add(marker)

    return frozenset(tags)


def normalize_tag(tag: str) -> str:
    return tag.strip().lower()


def merge_tags(derived: Iterable[str], seeded: Iterable[str] | None) -> frozenset[str]:
    """Union derived tags with seed tags for the same file."""
    if not seeded:
        return frozenset(derived)
    return frozenset(derived) | {normalize_tag(t) for t in seeded if normalize_tag(t)}


def load_tag_file(path: Path | None) -> Mapping[str, tuple[str, ...]]:
    """Load a ``{filename: [tag, ...]}`` JSON file.

    A missing or malformed file yields an empty mapping; the problem is logged.

    Args:
        path: Location of the tag file, or None when not configured

    Returns:
        Mapping of filename to its seed tags
    """
    if path is None:
        return {}
    if not path.is_file():
        logger.warning(f"Tag file {path} not found, using filename tags only")
        return {}

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load tag file {path}: {e}")
        return {}

    if not isinstance(raw, dict):
        logger.error(f"Tag file {path} must contain a JSON object, got {type(raw).__name__}")
        return {}

    seeds: dict[str, tuple[str, ...]] = {}
    for filename, tags in raw.items():
        if not isinstance(tags, list):
            logger.warning(f"Ignoring tag file entry for {filename!r}: tags must be a list")
            continue
        seeds[str(filename)] = tuple(str(t) for t in tags)

    logger.info(f"Loaded seed tags for {len(seeds)} files from {path}")
    return seeds
