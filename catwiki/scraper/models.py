"""Data models for fetched pages and selected elements."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int


@dataclass
class ElementData:
    """Text and attributes of one element matched by a CSS selector."""

    inner_text: str
    tag: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
