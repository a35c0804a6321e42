"""
Article deduplication by identity key, with optional fuzzy title matching.

An article's identity is its URL, or its title when the URL is missing.
Batches are merged into the accumulated list in arrival order:
1. Articles without any identity are dropped
2. Articles whose identity is already present are skipped
3. Optionally, articles whose title is near-identical to a kept title are skipped
"""

from __future__ import annotations

from rapidfuzz import fuzz

from .types import Article


def identity_key(article: Article) -> str:
    """Return the stable identity of an article ("" if it has none)."""
    return article.url or article.title


def merge_articles(
    existing: list[Article],
    incoming: list[Article],
    title_threshold: int | None = None,
) -> list[Article]:
    """Merge a new batch into an accumulated list without duplicates.

    The result is `existing` followed by the unique entries of `incoming`,
    in their original relative order. Neither input list is mutated, and
    merging the same batch a second time adds nothing.

    Args:
        existing: Already accumulated articles
        incoming: Newly fetched batch
        title_threshold: If set, also skip incoming articles whose title is at
                         least this similar (0-100) to a title already kept

    Returns:
        A new list holding the merged articles
    """
    merged = list(existing)
    seen_keys = {identity_key(article) for article in existing}
    titles = [article.title for article in existing if article.title]

    for article in incoming:
        key = identity_key(article)
        if not key or key in seen_keys:
            continue
        if title_threshold is not None and _is_similar_title(article.title, titles, title_threshold):
            continue
        seen_keys.add(key)
        if article.title:
            titles.append(article.title)
        merged.append(article)

    return merged


def _is_similar_title(title: str, titles: list[str], threshold: int) -> bool:
    """Check if a title is similar to any title in the given list.

    Uses rapidfuzz's ratio, the normalized Levenshtein similarity (0-100).
    """
    if not title:
        return False
    for existing in titles:
        if fuzz.ratio(title, existing) >= threshold:
            return True
    return False
