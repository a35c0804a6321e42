"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ProviderConfig: One news provider (used for both `primary` and `secondary`)
- NewsConfig: Query defaults and first-page policy
- DedupConfig: Deduplication settings
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

import yaml


DEFAULT_USER_AGENT = "city-news/0.1"


@dataclass
class ProviderConfig:
    """Configuration for one news provider.

    Attributes:
        name: Provider name ("newsdata" or "newsapi")
        base_url: Base URL for the provider API
        credentials: Inline API keys, tried in order (override the env var)
        credentials_env: Environment variable holding comma-separated API keys
        language: Language code sent with every request (None to omit)
        country: Country code for providers that support it (None to omit)
        page_size: Records requested per page, for providers that take one
        timeout_seconds: HTTP request timeout
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    name: str = "newsdata"
    base_url: str = "https://newsdata.io"
    credentials: list[str] = field(default_factory=list)
    credentials_env: str = "NEWSDATA_API_KEYS"
    language: str | None = "en"
    country: str | None = None
    page_size: int = 6
    timeout_seconds: float = 15.0
    trust_env: bool = True
    user_agent: str = DEFAULT_USER_AGENT


def _default_secondary() -> ProviderConfig:
    return ProviderConfig(
        name="newsapi",
        base_url="https://newsapi.org",
        credentials_env="NEWSAPI_API_KEYS",
        language=None,
    )


@dataclass
class NewsConfig:
    """Query defaults and presentation policy.

    Attributes:
        default_query: Query used when none is given
        prefer_today: Narrow a provider's first page to today's headlines when possible
        page_step: Cards revealed per "load more" in the interactive view
    """

    default_query: str = "India"
    prefer_today: bool = True
    page_step: int = 4


@dataclass
class DedupConfig:
    """Configuration for article deduplication.

    Attributes:
        fuzzy_titles: Also drop articles whose title nearly matches a kept one
        title_similarity_threshold: Fuzzy match threshold (0-100) for title similarity
    """

    fuzzy_titles: bool = False
    title_similarity_threshold: int = 92


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "WARNING"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "city_news.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    primary: ProviderConfig = field(default_factory=ProviderConfig)
    secondary: ProviderConfig = field(default_factory=_default_secondary)
    news: NewsConfig = field(default_factory=NewsConfig)
    dedup: DedupConfig = field(default_factory=DedupConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _provider_dict(cfg: ProviderConfig) -> dict[str, Any]:
    return {
        "name": cfg.name,
        "base_url": cfg.base_url,
        "credentials": list(cfg.credentials),
        "credentials_env": cfg.credentials_env,
        "language": cfg.language,
        "country": cfg.country,
        "page_size": cfg.page_size,
        "timeout_seconds": cfg.timeout_seconds,
        "trust_env": cfg.trust_env,
        "user_agent": cfg.user_agent,
    }


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "primary": _provider_dict(cfg.primary),
        "secondary": _provider_dict(cfg.secondary),
        "news": {
            "default_query": cfg.news.default_query,
            "prefer_today": cfg.news.prefer_today,
            "page_step": cfg.news.page_step,
        },
        "dedup": {
            "fuzzy_titles": cfg.dedup.fuzzy_titles,
            "title_similarity_threshold": cfg.dedup.title_similarity_threshold,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        primary=ProviderConfig(**data["primary"]),
        secondary=ProviderConfig(**data["secondary"]),
        news=NewsConfig(**data["news"]),
        dedup=DedupConfig(**data["dedup"]),
        logging=LoggingConfig(**data["logging"]),
    )


def get_credentials(cfg: ProviderConfig) -> list[str]:
    """Get API keys from inline config or the comma-separated environment variable."""
    if cfg.credentials:
        return [str(key).strip() for key in cfg.credentials if key and str(key).strip()]
    raw = os.getenv(cfg.credentials_env, "")
    return [key.strip() for key in raw.split(",") if key.strip()]
