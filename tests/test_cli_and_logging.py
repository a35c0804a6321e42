"""Tests for the CLI entry point and logging helpers."""

from __future__ import annotations

import json
import logging
from datetime import date

import httpx
import typer
from typer.testing import CliRunner

from city_news import cli
from city_news.config import LoggingConfig
from city_news.controller import AggregationController
from city_news.core.types import ProviderRole
from city_news.logging_utils import JsonlFormatter, log_event, redact_credential, setup_logging

runner = CliRunner()


def _newsdata_handler(request: httpx.Request) -> httpx.Response:
    if request.url.params.get("page") == "tok-2":
        return httpx.Response(
            200,
            json={"status": "success", "results": [{"title": "Second page", "link": "https://p/2"}]},
        )
    return httpx.Response(
        200,
        json={
            "status": "success",
            "results": [{"title": "First page", "link": "https://p/1", "source_id": "mirror"}],
            "nextPage": "tok-2",
        },
    )


def _newsapi_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(429, json={"status": "error", "code": "rateLimited", "message": "Too many requests"})


def _patch_controller(monkeypatch, newsdata=_newsdata_handler, newsapi=_newsapi_handler):
    original = AggregationController.from_config

    def fake_from_config(cfg, **kwargs):  # noqa: ANN001
        cfg.primary.credentials = ["nd-key"]
        cfg.secondary.credentials = ["na-key"]
        clients = {
            ProviderRole.PRIMARY: httpx.AsyncClient(transport=httpx.MockTransport(newsdata)),
            ProviderRole.SECONDARY: httpx.AsyncClient(transport=httpx.MockTransport(newsapi)),
        }
        return original(cfg, clients=clients, clock=lambda: date(2026, 10, 19))

    monkeypatch.setattr(cli.AggregationController, "from_config", staticmethod(fake_from_config))


def test_headlines_writes_markdown(monkeypatch, tmp_path):
    _patch_controller(monkeypatch)
    output = tmp_path / "out.md"

    result = runner.invoke(
        cli.app,
        ["headlines", "-q", "Pune", "-p", "1", "-f", "markdown", "-o", str(output)],
    )

    assert result.exit_code == 0, result.output
    text = output.read_text(encoding="utf-8")
    assert "# Top Headlines in Pune" in text
    assert "First page" in text
    assert "Second page" in text


def test_headlines_rejects_unknown_format(monkeypatch):
    _patch_controller(monkeypatch)

    result = runner.invoke(cli.app, ["headlines", "-q", "Pune", "-f", "pdf"])

    assert result.exit_code == 1


def test_browse_reveals_loaded_cards_before_fetching_more(monkeypatch, tmp_path):
    requests = []

    def newsdata(request: httpx.Request) -> httpx.Response:
        page = request.url.params.get("page")
        requests.append(page)
        if page == "tok-2":
            return httpx.Response(
                200,
                json={"status": "success", "results": [{"title": "Third page", "link": "https://p/3"}]},
            )
        return httpx.Response(
            200,
            json={
                "status": "success",
                "results": [
                    {"title": "First page", "link": "https://p/1"},
                    {"title": "Second page", "link": "https://p/2"},
                ],
                "nextPage": "tok-2",
            },
        )

    def newsapi(request: httpx.Request) -> httpx.Response:
        requests.append("newsapi")
        return _newsapi_handler(request)

    _patch_controller(monkeypatch, newsdata=newsdata, newsapi=newsapi)
    requests_at_prompt = []
    original_confirm = typer.confirm

    def counting_confirm(*args, **kwargs):
        requests_at_prompt.append(len(requests))
        return original_confirm(*args, **kwargs)

    monkeypatch.setattr(typer, "confirm", counting_confirm)
    path = tmp_path / "config.yaml"
    path.write_text("news:\n  page_step: 1\n", encoding="utf-8")

    result = runner.invoke(cli.app, ["browse", "-q", "Pune", "-c", str(path)], input="y\ny\ny\nn\n")

    assert result.exit_code == 0, result.output
    # Second prompt follows a reveal of an already loaded card, not a request.
    assert requests_at_prompt == [1, 1, 2]
    assert requests == [None, "tok-2", "newsapi"]
    assert result.output.count("Load more?") == 3
    assert "Showing 1 of 2 loaded" in result.output
    assert "Third page" in result.output


def test_unknown_provider_exits_with_error(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("primary:\n  name: gnews\n", encoding="utf-8")

    result = runner.invoke(cli.app, ["headlines", "-c", str(path)])

    assert result.exit_code == 1
    assert "Unsupported provider" in result.output


def test_redact_credential_keeps_last_four():
    assert redact_credential("pub_1234567890abcd") == "****abcd"
    assert redact_credential("abc") == "****"
    assert redact_credential(None) == ""


def test_jsonl_formatter_includes_extra_fields():
    logger = logging.getLogger("city_news.test_jsonl")
    record = logger.makeRecord(
        logger.name,
        logging.INFO,
        __file__,
        1,
        "Quota exceeded",
        (),
        None,
        extra={"event": "quota_rotate", "provider": "newsdata"},
    )

    payload = json.loads(JsonlFormatter().format(record))

    assert payload["message"] == "Quota exceeded"
    assert payload["event"] == "quota_rotate"
    assert payload["provider"] == "newsdata"


def test_setup_logging_writes_jsonl_file(tmp_path):
    cfg = LoggingConfig(level="INFO", console=False, file=True, filename="run.jsonl")
    logger = setup_logging(cfg, tmp_path)

    log_event(logger, "Session start", event="session_start", query="Pune")
    for handler in logger.handlers:
        handler.flush()

    line = (tmp_path / "run.jsonl").read_text(encoding="utf-8").strip().splitlines()[-1]
    assert json.loads(line)["query"] == "Pune"


def test_jsonl_formatter_orders_event_and_skips_formatter_attributes():
    logger = logging.getLogger("city_news.test_jsonl")
    record = logger.makeRecord(
        logger.name,
        logging.INFO,
        __file__,
        1,
        "Falling back to secondary provider",
        (),
        None,
        extra={"event": "provider_switch", "query": "Pune", "reason": None},
    )
    logging.Formatter("%(asctime)s %(message)s").format(record)

    payload = json.loads(JsonlFormatter().format(record))

    assert list(payload)[:5] == ["timestamp", "level", "logger", "event", "message"]
    assert payload["event"] == "provider_switch"
    assert payload["query"] == "Pune"
    assert "asctime" not in payload
    assert "reason" not in payload
