"""
NewsAPI.org provider (secondary).

Endpoint: GET /v2/everything
Success:  {"status": "ok", "totalResults": n, "articles": [...]}
Error:    {"status": "error", "code": "rateLimited", "message": "..."}

Pages are numbered from 1. There is no reliable end-of-results marker, so
a page shorter than `pageSize` is treated as the last one.
"""

from __future__ import annotations

from typing import Any

from ..pagination import PageNumberCursor
from .base import NewsProvider


class NewsApiProvider(NewsProvider):
    name = "newsapi"
    endpoint = "/v2/everything"
    # Error codes: rateLimited, apiKeyExhausted
    quota_vocabulary = ("rate", "limit", "exhausted", "quota", "usage")

    def new_cursor(self) -> PageNumberCursor:
        return PageNumberCursor(self.cfg.page_size)

    def build_params(self, query: str, credential: str, page: str | int | None) -> dict[str, Any]:
        return {
            "q": query,
            "sortBy": "publishedAt",
            "pageSize": self.cfg.page_size,
            "page": page if page is not None else 1,
            "language": self.cfg.language,
            "apiKey": credential,
        }

    def parse_page(self, payload: dict[str, Any]) -> tuple[list[Any], str | None]:
        articles = payload.get("articles")
        return (articles if isinstance(articles, list) else []), None
