"""Preference commands controlling automatic catalog updates."""

from __future__ import annotations

import asyncio

import typer

from catwiki.storage.preferences import Preferences
from cli.context import open_context

prefs_app = typer.Typer(help="Show and change auto-update preferences.", no_args_is_help=True)


@prefs_app.command("show")
def prefs_show() -> None:
    """Print every preference with its effective value."""
    ctx = open_context()
    for key, value in asyncio.run(ctx.preferences.as_dict()).items():
        typer.echo(f"{key} = {value!r}")


@prefs_app.command("set-auto-update")
def prefs_set_auto_update(
    enabled: bool = typer.Argument(..., help="true / false"),
) -> None:
    """Turn periodic refresh from the remote export on or off."""
    ctx = open_context()
    asyncio.run(ctx.preferences.set_preference(Preferences.AUTO_UPDATE_PAGESDB_KEY, enabled))
    typer.echo(f"{Preferences.AUTO_UPDATE_PAGESDB_KEY} = {enabled!r}")


@prefs_app.command("set-interval")
def prefs_set_interval(
    days: int = typer.Argument(..., min=1, help="Days between refreshes."),
) -> None:
    """Set how old the cache may get before a refresh fetches a new export."""
    ctx = open_context()
    asyncio.run(ctx.preferences.set_preference(Preferences.AUTO_UPDATE_PAGESDB_INTERVAL_KEY, days))
    typer.echo(f"{Preferences.AUTO_UPDATE_PAGESDB_INTERVAL_KEY} = {days!r}")
