"""Root logger configuration for the CLI and the API process."""

from __future__ import annotations

import logging
import sys

from catwiki.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Attach a stdout handler to the root logger (idempotent)."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # httpx logs every request at INFO; keep it out of the timer output
    logging.getLogger("httpx").setLevel(logging.WARNING)
