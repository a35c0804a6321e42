from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.types import Article, NewsFeedView

PLACEHOLDER_IMAGE = "https://via.placeholder.com/100"
NO_DESCRIPTION = "No description available."
UNKNOWN_SOURCE = "Unknown"
NO_DATE = "—"


def heading(query: str) -> str:
    return f"Top Headlines in {query or 'India'}"


def format_published(value: str) -> str:
    """Format a provider timestamp as "Oct 19, 2026", or "—" if unusable."""
    parsed = _parse_date(value)
    if parsed is None:
        return NO_DATE
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def card(article: Article) -> dict[str, str]:
    """Display fields for one article with the dashboard's fallbacks applied."""
    return {
        "title": article.title,
        "description": article.description or NO_DESCRIPTION,
        "url": article.url,
        "image": article.image or PLACEHOLDER_IMAGE,
        "source": article.source or UNKNOWN_SOURCE,
        "date": format_published(article.published_at),
    }


def render_console(view: NewsFeedView, console: Console, limit: int | None = None) -> None:
    if view.error_message:
        console.print(f"[red]{view.error_message}[/red]")
        return

    articles = view.articles if limit is None else view.articles[:limit]
    table = Table(title=heading(view.query), show_lines=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Headline", style="bold")
    table.add_column("Source")
    table.add_column("Date", no_wrap=True)
    for idx, article in enumerate(articles, start=1):
        fields = card(article)
        headline = escape(fields["title"])
        if fields["url"]:
            headline = f"[link={fields['url']}]{headline}[/link]"
        table.add_row(
            str(idx),
            f"{headline}\n[dim]{escape(fields['description'])}[/dim]",
            escape(fields["source"]),
            fields["date"],
        )
    console.print(table)

    shown = len(articles)
    if shown < len(view.articles) or view.has_more:
        console.print(f"[dim]Showing {shown} of {len(view.articles)} loaded; more available.[/dim]")


def render_markdown(view: NewsFeedView, output_path: Path) -> None:
    lines = [f"# {heading(view.query)}", ""]
    if view.error_message:
        lines.append(view.error_message)
    for article in view.articles:
        fields = card(article)
        title = f"[{fields['title']}]({fields['url']})" if fields["url"] else fields["title"]
        lines.append(f"### {title}")
        lines.append(f"- Source: {fields['source']} • {fields['date']}")
        lines.append(f"- {fields['description']}")
        lines.append("")

    output_path.write_text("\n".join(lines), encoding="utf-8")


def render_html(view: NewsFeedView, output_path: Path) -> None:
    env = Environment(
        loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
        autoescape=select_autoescape(["html"]),
    )
    template = env.get_template("headlines.html")
    html = template.render(
        title=heading(view.query),
        generated_at=datetime.now().strftime("%Y-%m-%d %H:%M"),
        cards=[card(article) for article in view.articles],
        error_message=view.error_message,
        has_more=view.has_more,
    )
    output_path.write_text(html, encoding="utf-8")


def _parse_date(value: str) -> date | None:
    text = value.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None
