"""
Abstract base class for news providers.

New providers should inherit from NewsProvider and implement
build_params, parse_page and new_cursor, and add a field mapping for their
record shape in core/normalize.py.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import Any

import httpx

from ..config import ProviderConfig
from ..core.normalize import normalize_batch
from ..core.types import Article
from ..fetcher import FetchResult, fetch_json
from ..pagination import PaginationCursor
from ..rotation import Classified, classify_response


class NewsProvider(ABC):
    """Abstract base class for news providers.

    A provider knows how to ask one HTTP API for a page of headlines and
    how to read the answer. It holds no session state: credentials and
    cursors are owned by the controller and passed in per request.
    """

    name: str = ""
    endpoint: str = ""
    quota_vocabulary: tuple[str, ...] = ("quota", "limit", "usage", "rate")

    def __init__(self, cfg: ProviderConfig, client: httpx.AsyncClient | None = None):
        self.cfg = cfg
        self._client = client
        self._owns_client = client is None
        self.logger = logging.getLogger(f"city_news.providers.{self.name}")

    @property
    def url(self) -> str:
        return f"{self.cfg.base_url.rstrip('/')}{self.endpoint}"

    @abstractmethod
    def new_cursor(self) -> PaginationCursor:
        """Return a fresh cursor positioned at the first page."""
        raise NotImplementedError

    @abstractmethod
    def build_params(self, query: str, credential: str, page: str | int | None) -> dict[str, Any]:
        """Return the query parameters for one page request."""
        raise NotImplementedError

    @abstractmethod
    def parse_page(self, payload: dict[str, Any]) -> tuple[list[Any], str | None]:
        """Split a successful body into (raw records, continuation token)."""
        raise NotImplementedError

    async def fetch_page(self, query: str, credential: str, page: str | int | None) -> FetchResult:
        """Request one page of headlines."""
        client = await self._get_client()
        result = await fetch_json(client, self.url, self.build_params(query, credential, page))
        if result.error:
            self.logger.debug(f"[{self.name}] Request failed: {result.error}")
        return result

    def classify(self, result: FetchResult) -> Classified:
        return classify_response(result, self.quota_vocabulary)

    def normalize(self, records: list[Any]) -> list[Article]:
        return normalize_batch(records, self.name)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.cfg.timeout_seconds,
                headers={"User-Agent": self.cfg.user_agent},
                trust_env=self.cfg.trust_env,
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
