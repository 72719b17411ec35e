"""Builds the application context for one CLI invocation.

The index starts from the embedded default export and is then replaced by
the persisted cache when a valid one exists; CLI commands never hit the
network unless they are asked to refresh.
"""

from __future__ import annotations

import asyncio

from catwiki.config import settings
from catwiki.context import AppContext, build_context, load_cached_pages
from catwiki.logging_setup import setup_logging


def open_context(verbose: bool = False) -> AppContext:
    setup_logging("DEBUG" if verbose else "WARNING")
    settings.ensure_workspace()
    ctx = build_context()
    asyncio.run(load_cached_pages(ctx))
    return ctx
