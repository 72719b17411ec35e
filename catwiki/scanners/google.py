"""Scanner for Google search result pages."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import parse_qs, urlsplit

from catwiki.scanners.base import BaseDomainScanner, ScanParameters

logger = logging.getLogger(__name__)

# Product title element on the shopping tab (udm=3)
SHOPPING_TITLE_SELECTOR = ".gkQHve"
SHOPPING_UDM = "3"


def _query_param(url: str, name: str) -> Optional[str]:
    values = parse_qs(urlsplit(url).query).get(name)
    return values[0] if values else None


class GoogleScanner(BaseDomainScanner):
    def meta_info(self) -> str:
        return "google"

    def can_scan_content(self, params: ScanParameters) -> bool:
        return params.main_domain == "google"

    def get_domain_key_for_search(self, params: ScanParameters) -> str:
        return params.main_domain

    def extract_entity(self, url: str) -> Optional[str]:
        return _query_param(url, "q")

    def search_content(self, params: ScanParameters) -> list[str]:
        if _query_param(params.url, "udm") != SHOPPING_UDM:
            return []
        if params.document is None:
            logger.debug("[google] Shopping results page without a document; skipping titles.")
            return []

        titles = [el.inner_text for el in params.document.query_selector_all(SHOPPING_TITLE_SELECTOR)]
        return self.process_strings(titles)

    @staticmethod
    def process_strings(source: list[str]) -> list[str]:
        """Lower-case, drop strings of 3 characters or fewer, dedup in order."""
        lowered = [line.lower() for line in source if len(line) > 3]
        return list(dict.fromkeys(lowered))
