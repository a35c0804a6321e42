"""
Mapping of raw provider records onto the canonical Article.

Each provider describes a headline with its own field names. The tables
below say where every Article field lives in each provider's record; the
lookup never raises, so malformed records degrade to empty fields.
"""

from __future__ import annotations

from typing import Any

from .types import Article

# Article field -> candidate paths in the raw record, first non-empty wins.
_FIELD_PATHS: dict[str, dict[str, tuple[tuple[str, ...], ...]]] = {
    "newsdata": {
        "title": (("title",),),
        "description": (("description",),),
        "url": (("link",),),
        "image": (("image_url",),),
        "source": (("source_name",), ("source_id",)),
        "published_at": (("pubDate",),),
    },
    "newsapi": {
        "title": (("title",),),
        "description": (("description",),),
        "url": (("url",),),
        "image": (("urlToImage",),),
        "source": (("source", "name"), ("source", "id")),
        "published_at": (("publishedAt",),),
    },
}


def normalize_article(record: Any, provider: str) -> Article:
    """Convert one raw provider record into an Article.

    Args:
        record: Decoded JSON object for a single headline
        provider: Provider name selecting the field mapping ("newsdata", "newsapi")

    Returns:
        Article with every field populated or defaulted to an empty string.
        Unknown providers and non-dict records yield an empty Article.
    """
    paths = _FIELD_PATHS.get(provider)
    if paths is None or not isinstance(record, dict):
        return Article()

    values = {name: _first_text(record, candidates) for name, candidates in paths.items()}
    return Article(**values)


def normalize_batch(records: Any, provider: str) -> list[Article]:
    """Normalize a list of raw records, ignoring a non-list payload."""
    if not isinstance(records, list):
        return []
    return [normalize_article(record, provider) for record in records]


def _first_text(record: dict[str, Any], candidates: tuple[tuple[str, ...], ...]) -> str:
    for path in candidates:
        text = _as_text(_dig(record, path))
        if text:
            return text
    return ""


def _dig(record: dict[str, Any], path: tuple[str, ...]) -> Any:
    current: Any = record
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _as_text(value: Any) -> str:
    # bool is an int subclass; neither belongs in a text field
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""
