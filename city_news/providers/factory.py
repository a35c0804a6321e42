"""Provider factory and registry for swappable news backends."""

from __future__ import annotations

import httpx

from ..config import ProviderConfig
from .base import NewsProvider
from .newsapi import NewsApiProvider
from .newsdata import NewsDataProvider


ProviderBuilder = type[NewsProvider]

_PROVIDER_REGISTRY: dict[str, ProviderBuilder] = {
    "newsdata": NewsDataProvider,
    "newsdata.io": NewsDataProvider,
    "newsapi": NewsApiProvider,
    "newsapi.org": NewsApiProvider,
}


def available_providers() -> list[str]:
    """Return the set of registered provider names."""
    return sorted(_PROVIDER_REGISTRY.keys())


def create_provider(cfg: ProviderConfig, client: httpx.AsyncClient | None = None) -> NewsProvider:
    """Build a provider instance from runtime config."""
    name = cfg.name.lower().strip()
    builder = _PROVIDER_REGISTRY.get(name)
    if builder is None:
        supported = ", ".join(available_providers())
        raise ValueError(f"Unsupported provider: {cfg.name}. Supported: {supported}")
    return builder(cfg, client)
