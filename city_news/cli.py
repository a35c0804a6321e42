"""
Command-line interface for City News.

Uses Typer to provide commands for fetching headlines for a city or search
term. Loads .env files so provider API keys can live next to the config.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console

from .config import AppConfig, load_config
from .controller import AggregationController
from .core.types import NewsFeedView
from .logging_utils import setup_logging
from .renderer import render_console, render_html, render_markdown

app = typer.Typer(add_completion=False)
console = Console()


def _prepare(config: Path | None, log_level: str | None, log_dir: Path | None) -> AppConfig:
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    if log_dir is not None:
        cfg.logging.file = True
    setup_logging(cfg.logging, log_dir)
    return cfg


def _build_controller(cfg: AppConfig) -> AggregationController:
    try:
        return AggregationController.from_config(cfg)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc


async def _collect(controller: AggregationController, query: str, pages: int) -> NewsFeedView:
    try:
        await controller.set_query(query)
        for _ in range(pages):
            if not controller.view.has_more:
                break
            await controller.load_more()
        return controller.view
    finally:
        await controller.aclose()


async def _browse(controller: AggregationController, query: str, step: int) -> None:
    try:
        await controller.set_query(query)
        shown = step
        while True:
            view = controller.view
            render_console(view, console, limit=shown)
            if view.error_message:
                return
            if shown >= len(view.articles) and not view.has_more:
                return
            if not typer.confirm("Load more?", default=True):
                return
            if shown + step > len(view.articles) and view.has_more:
                await controller.load_more()
            shown += step
    finally:
        await controller.aclose()


@app.command()
def headlines(
    query: str | None = typer.Option(None, "--query", "-q", help="City or search term."),
    pages: int = typer.Option(0, "--pages", "-p", min=0, help="Extra pages to load after the first."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    fmt: str = typer.Option("table", "--format", "-f", help="Output format: table, markdown or html."),
    output: Path | None = typer.Option(None, "--output", "-o", help="File for markdown/html output."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_dir: Path | None = typer.Option(None, "--log-dir", help="Write a log file into this directory."),
):
    """Fetch headlines for a query and print or save them."""
    cfg = _prepare(config, log_level, log_dir)
    controller = _build_controller(cfg)
    view = asyncio.run(_collect(controller, query or cfg.news.default_query, pages))

    if fmt == "table":
        render_console(view, console)
        return
    if fmt not in ("markdown", "html"):
        console.print(f"[red]Unsupported format: {fmt}[/red]")
        raise typer.Exit(code=1)

    target = output or Path(f"headlines.{'md' if fmt == 'markdown' else 'html'}")
    if fmt == "markdown":
        render_markdown(view, target)
    else:
        render_html(view, target)
    console.print(f"Headlines written: {target}")


@app.command()
def browse(
    query: str | None = typer.Option(None, "--query", "-q", help="City or search term."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Page through headlines interactively."""
    cfg = _prepare(config, log_level, None)
    controller = _build_controller(cfg)
    asyncio.run(_browse(controller, query or cfg.news.default_query, max(1, cfg.news.page_step)))


if __name__ == "__main__":
    app()
