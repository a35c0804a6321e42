from pathlib import Path

from rich.console import Console

from city_news.core.types import Article, NewsFeedView
from city_news.renderer import format_published, render_console, render_html, render_markdown


def _view() -> NewsFeedView:
    return NewsFeedView(
        query="Pune",
        articles=[
            Article(
                title="Metro <b>extends</b> hours",
                url="https://example.com/metro",
                source="Pune Mirror",
                published_at="2026-10-19T06:12:00Z",
            ),
            Article(title="Untitled source", url="https://example.com/2"),
        ],
        has_more=True,
    )


def test_format_published():
    assert format_published("2026-10-19T06:12:00Z") == "Oct 19, 2026"
    assert format_published("2026-03-05 10:00:00") == "Mar 5, 2026"
    assert format_published("") == "—"
    assert format_published("yesterday") == "—"


def test_render_markdown_applies_fallbacks(tmp_path: Path) -> None:
    output_path = tmp_path / "headlines.md"

    render_markdown(_view(), output_path)
    text = output_path.read_text(encoding="utf-8")

    assert "# Top Headlines in Pune" in text
    assert "### [Untitled source](https://example.com/2)" in text
    assert "- Source: Unknown • —" in text
    assert "No description available." in text
    assert "- Source: Pune Mirror • Oct 19, 2026" in text


def test_render_html_escapes_and_uses_placeholder(tmp_path: Path) -> None:
    output_path = tmp_path / "headlines.html"

    render_html(_view(), output_path)
    html = output_path.read_text(encoding="utf-8")

    assert "Metro &lt;b&gt;extends&lt;/b&gt; hours" in html
    assert "https://via.placeholder.com/100" in html
    assert "More headlines available." in html


def test_render_console_shows_error_message():
    console = Console(record=True, width=120)

    render_console(NewsFeedView(query="Nowhere", error_message="No news available right now."), console)

    assert "No news available right now." in console.export_text()


def test_render_console_limits_rows():
    console = Console(record=True, width=160)

    render_console(_view(), console, limit=1)
    text = console.export_text()

    assert "Top Headlines in Pune" in text
    assert "Untitled source" not in text
    assert "Showing 1 of 2 loaded" in text
