"""First-page preference for headlines published today."""

from __future__ import annotations

from datetime import date

from .types import Article


def published_on(article: Article) -> str:
    """Return the calendar-date part (YYYY-MM-DD) of the publication timestamp."""
    return article.published_at.strip()[:10]


def prefer_today(articles: list[Article], today: date) -> list[Article]:
    """Narrow a batch to today's articles when there are any.

    Both providers send timestamps that start with an ISO date
    ("2026-10-19 08:15:00", "2026-10-19T08:15:00Z"), so the first ten
    characters are compared with `today`. If nothing matches, the batch is
    returned unchanged rather than emptied.
    """
    stamp = today.isoformat()
    fresh = [article for article in articles if published_on(article) == stamp]
    return fresh or list(articles)
