"""Tests for YAML configuration loading and credential lookup."""

from __future__ import annotations

from datetime import date

from city_news.config import AppConfig, ProviderConfig, get_credentials, load_config
from city_news.controller import AggregationController
from city_news.core.types import ProviderRole
from city_news.providers.newsapi import NewsApiProvider
from city_news.providers.newsdata import NewsDataProvider


def test_defaults_without_file():
    cfg = load_config(None)

    assert cfg.primary.name == "newsdata"
    assert cfg.secondary.name == "newsapi"
    assert cfg.secondary.page_size == 6
    assert cfg.news.default_query == "India"
    assert cfg.news.prefer_today is True


def test_yaml_overrides_merge_with_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "primary:\n"
        "  credentials: [a, b]\n"
        "  country: in\n"
        "secondary:\n"
        "  page_size: 10\n"
        "news:\n"
        "  default_query: Pune\n"
        "unknown_section: 1\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.primary.credentials == ["a", "b"]
    assert cfg.primary.country == "in"
    assert cfg.primary.base_url == "https://newsdata.io"
    assert cfg.secondary.page_size == 10
    assert cfg.secondary.name == "newsapi"
    assert cfg.news.default_query == "Pune"
    assert cfg.dedup.title_similarity_threshold == 92


def test_loading_does_not_mutate_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("news:\n  page_step: 8\n", encoding="utf-8")

    load_config(str(path))

    assert AppConfig().news.page_step == 4


def test_inline_credentials_win_over_env(monkeypatch):
    monkeypatch.setenv("NEWSDATA_API_KEYS", "env-1,env-2")

    assert get_credentials(ProviderConfig(credentials=["inline"])) == ["inline"]
    assert get_credentials(ProviderConfig()) == ["env-1", "env-2"]


def test_env_credentials_are_split_and_trimmed(monkeypatch):
    monkeypatch.setenv("NEWSAPI_API_KEYS", " k1 , ,k2 ")

    assert get_credentials(ProviderConfig(credentials_env="NEWSAPI_API_KEYS")) == ["k1", "k2"]


def test_controller_from_config(monkeypatch):
    monkeypatch.delenv("NEWSDATA_API_KEYS", raising=False)
    monkeypatch.setenv("NEWSAPI_API_KEYS", "na-1")
    cfg = AppConfig()
    cfg.primary.credentials = ["nd-1", "nd-2"]

    controller = AggregationController.from_config(cfg, clock=lambda: date(2026, 10, 19))

    assert isinstance(controller._providers[ProviderRole.PRIMARY], NewsDataProvider)  # noqa: SLF001
    assert isinstance(controller._providers[ProviderRole.SECONDARY], NewsApiProvider)  # noqa: SLF001
    assert controller._credentials[ProviderRole.PRIMARY] == ["nd-1", "nd-2"]  # noqa: SLF001
    assert controller._credentials[ProviderRole.SECONDARY] == ["na-1"]  # noqa: SLF001
    assert controller._default_query == "India"  # noqa: SLF001
