"""Centralised settings for the CATWiki page matcher.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_CARGO_URL = (
    "https://raw.githubusercontent.com/WKDLabs/CATWikiCargoPrototype/"
    "refs/heads/export/data/all_cargo_combined.json"
)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("CATWIKI_WORKSPACE", Path.home() / ".catwiki_data")
        )
    )

    @property
    def storage_dir(self) -> Path:
        """Directory holding the persisted cache and preference records."""
        return self.workspace_dir / "storage"

    @property
    def default_pages_path(self) -> Path:
        """Absolute path to the cargo export bundled with the package."""
        return Path(__file__).resolve().parent / "data" / "pages_db.json"

    # ------------------------------------------------------------------
    # Remote catalog
    # ------------------------------------------------------------------
    cargo_url: str = field(
        default_factory=lambda: os.environ.get("CATWIKI_CARGO_URL", _DEFAULT_CARGO_URL)
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Cache refresh
    # ------------------------------------------------------------------
    refresh_period_minutes: float = field(
        default_factory=lambda: float(os.environ.get("REFRESH_PERIOD_MINUTES", "30"))
    )
    auto_update_default: bool = field(
        default_factory=lambda: _env_bool("AUTO_UPDATE_DEFAULT", "true")
    )
    auto_update_interval_days: int = field(
        default_factory=lambda: int(os.environ.get("AUTO_UPDATE_INTERVAL_DAYS", "1"))
    )

    # ------------------------------------------------------------------
    # Inner-text matching
    # ------------------------------------------------------------------
    inner_text_threshold: float = field(
        default_factory=lambda: float(os.environ.get("INNER_TEXT_THRESHOLD", "0.85"))
    )
    inner_text_min_length: int = field(
        default_factory=lambda: int(os.environ.get("INNER_TEXT_MIN_LENGTH", "10"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )

    def ensure_workspace(self) -> None:
        """Create the workspace and storage directories if they do not exist."""
        self.storage_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton, import this everywhere:
#   from catwiki.config import settings
settings = Settings()
