"""Cache commands for refreshing and inspecting the persisted catalog."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import typer

from catwiki.context import AppContext, refresh_once, start_background_refresh
from catwiki.errors import StorageError
from catwiki.logging_setup import setup_logging
from catwiki.storage.cache import RefreshOutcome
from cli.context import open_context

cache_app = typer.Typer(help="Refresh and inspect the cached catalog.", no_args_is_help=True)


def _format_ts(epoch_ms: int | None) -> str:
    if not epoch_ms:
        return "never"
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).isoformat(timespec="seconds")


@cache_app.command("update")
def cache_update(
    force: bool = typer.Option(False, "--force", help="Fetch even if the cache is fresh."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Run one refresh cycle."""
    ctx = open_context(verbose)
    outcome = asyncio.run(refresh_once(ctx, force=force))
    counts = ctx.pages_db.counts()
    typer.echo(f"[cache update] {outcome.value}  pages={sum(counts.values())}  {counts}")
    if outcome in (RefreshOutcome.FAILED, RefreshOutcome.DISCARDED):
        raise typer.Exit(1)


@cache_app.command("status")
def cache_status() -> None:
    """Show when the cache was last refreshed and whether it is stale."""
    ctx = open_context()
    status = asyncio.run(ctx.cache.status())
    typer.echo(f"Last updated : {_format_ts(status['last_updated'])}")
    typer.echo(f"Stale        : {status['stale']}")
    typer.echo(f"Source       : {status['cargo_url']}")
    for kind, count in status["pages"].items():
        typer.echo(f"  {kind:<12} {count}")


@cache_app.command("clear")
def cache_clear() -> None:
    """Delete the persisted catalog; the embedded defaults are used until the next refresh."""
    ctx = open_context()
    try:
        asyncio.run(ctx.cache.clear_cache())
    except StorageError as exc:
        typer.echo(f"[cache clear] {exc}")
        raise typer.Exit(1)
    typer.echo("[cache clear] Cache removed.")


async def _watch(ctx: AppContext) -> None:
    await start_background_refresh(ctx)
    task = ctx.cache.start()
    try:
        await task
    finally:
        await ctx.cache.stop()


@cache_app.command("watch")
def cache_watch() -> None:
    """Refresh now and then on the configured period until interrupted."""
    ctx = open_context()
    setup_logging()
    typer.echo(f"[cache watch] Refreshing every {ctx.cache.period_minutes:g} minute(s). Ctrl-C to stop.")
    try:
        asyncio.run(_watch(ctx))
    except KeyboardInterrupt:
        typer.echo("[cache watch] Stopped.")
