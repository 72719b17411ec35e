"""CATWiki CLI: entry-point for index lookups, page scans and cache upkeep.

Usage:
    catwiki --help

Command groups:
    search / text / scan → page index and scanner pipeline
    cache                → refresh controller
    prefs                → auto-update preferences
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import httpx
import typer

from catwiki.config import settings
from catwiki.errors import UnsupportedSearchParameter
from catwiki.pages.index import SearchResultSet
from catwiki.scanners.base import ScanParameters
from catwiki.scraper.document import HtmlDocument
from catwiki.scraper.fetcher import fetch_url
from cli.commands.cache import cache_app
from cli.commands.prefs import prefs_app
from cli.context import open_context
from cli.rendering import render_pages

app = typer.Typer(
    name="catwiki",
    help="CATWiki page matcher CLI.",
    no_args_is_help=True,
)
app.add_typer(cache_app, name="cache")
app.add_typer(prefs_app, name="prefs")

_MODES = ("simple", "category", "prefix", "fuzzy", "all-words")


# ---------------------------------------------------------------------------
# Index lookups
# ---------------------------------------------------------------------------
@app.command("search")
def search(
    query: str = typer.Argument(..., help="Search query."),
    mode: str = typer.Option("fuzzy", help="simple | category | prefix | fuzzy | all-words."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Search the catalog with one strategy."""
    if mode not in _MODES:
        typer.echo(f"[search] Unknown mode {mode!r}. Use: {' | '.join(_MODES)}")
        raise typer.Exit(1)

    pages_db = open_context(verbose).pages_db
    try:
        if mode == "simple":
            results = pages_db.simple_search(query)
        elif mode == "category":
            results = pages_db.get_pages_for_category(query)
        elif mode == "prefix":
            results = pages_db.find_consecutive_words(query)
        elif mode == "all-words":
            results = pages_db.fuzzy_search(query, match_all_words=True)
        else:
            results = pages_db.fuzzy_search(query)
    except UnsupportedSearchParameter as exc:
        typer.echo(f"[search] {exc}")
        raise typer.Exit(1)

    if not results:
        typer.echo(f"[search] No results for {query!r}.")
        return
    for line in render_pages(results):
        typer.echo(line)


@app.command("text")
def text(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Text or HTML file."),
    threshold: float = typer.Option(settings.inner_text_threshold, help="Score threshold (0-1)."),
    min_length: int = typer.Option(settings.inner_text_min_length, help="Shortest line considered."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Find catalog pages mentioned in a text (or HTML) file."""
    content = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".html", ".htm"}:
        content = HtmlDocument(content).inner_text()

    results = open_context(verbose).pages_db.fuzzy_search_inner_text(content, threshold, min_length)
    if not results:
        typer.echo("[text] No catalog pages mentioned.")
        return
    for line in render_pages(results):
        typer.echo(line)


# ---------------------------------------------------------------------------
# Scanner pipeline
# ---------------------------------------------------------------------------
@app.command("scan")
def scan(
    url: str = typer.Argument(..., help="URL of the visited page."),
    html: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Saved page HTML."),
    fetch: bool = typer.Option(False, "--fetch", help="Download the page for content scanning."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Run the scanner pipeline for a URL and print the pages it surfaces."""
    ctx = open_context(verbose)

    document = None
    if html is not None:
        document = HtmlDocument(html.read_text(encoding="utf-8"), url=url)
    elif fetch:
        typer.echo(f"[scan] Fetching {url!r} …")
        try:
            document = HtmlDocument(fetch_url(url).html, url=url)
        except httpx.HTTPError as exc:
            typer.echo(f"[scan] Fetch failed: {exc}")
            raise typer.Exit(1)

    notified: list[SearchResultSet] = []
    params = ScanParameters(url=url, pages_db=ctx.pages_db, notify=notified.append, document=document)
    found = ctx.pipeline.scan(params)

    typer.echo(f"[scan] Domain: {params.main_domain or '(none)'}  matched: {found}")
    if not notified:
        typer.echo("[scan] No relevant pages found.")
        return
    for results in notified:
        for line in render_pages(results):
            typer.echo(line)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
