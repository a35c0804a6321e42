"""
NewsData.io provider (primary).

Endpoint: GET /api/1/news
Success:  {"status": "success", "results": [...], "nextPage": "<token>"}
Error:    {"status": "error", "results": {"message": "...", "code": "..."}}

Pagination is by opaque token: the first request carries no `page`
parameter, later ones send back the previous response's `nextPage`.
"""

from __future__ import annotations

from typing import Any

from ..pagination import TokenCursor
from .base import NewsProvider


class NewsDataProvider(NewsProvider):
    name = "newsdata"
    endpoint = "/api/1/news"
    # Error codes seen in practice: RateLimitExceeded, "API credits exhausted",
    # "usage limit reached"
    quota_vocabulary = ("quota", "limit", "usage", "rate", "credit")

    def new_cursor(self) -> TokenCursor:
        return TokenCursor()

    def build_params(self, query: str, credential: str, page: str | int | None) -> dict[str, Any]:
        return {
            "apikey": credential,
            "q": query,
            "language": self.cfg.language,
            "country": self.cfg.country,
            "page": page,
        }

    def parse_page(self, payload: dict[str, Any]) -> tuple[list[Any], str | None]:
        results = payload.get("results")
        records = results if isinstance(results, list) else []
        token = payload.get("nextPage")
        if token is None or token == "":
            return records, None
        return records, str(token)
