"""The one search cascade every scanner feeds.

For a page handled by a scanner:

1. Fuzzy-search the scanner's domain key (low-precision baseline).
2. Collect entity keys from the URL and from the page document.
3. For each key run category → consecutive words → substring → fuzzy word.
4. Union everything, drop repeated page ids, notify once if anything is left.

Every strategy runs in its own guard.  An
:class:`~catwiki.errors.UnsupportedSearchParameter` is expected and only
logged at debug level; anything else is logged with its traceback and counts
as "no match".  Neither aborts the cascade.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from catwiki.config import settings
from catwiki.errors import UnsupportedSearchParameter
from catwiki.pages.index import SearchResultSet
from catwiki.scanners.base import BaseDomainScanner, ScanParameters

logger = logging.getLogger(__name__)


def perform_search(
    search_fn: Callable[[], SearchResultSet],
    description: str,
    combined_results: SearchResultSet,
    scanner_id: str,
) -> bool:
    """Run one strategy, add its hits to *combined_results*.

    Returns ``True`` if the strategy matched at least one page.
    """
    logger.debug("[%s] Attempting search: %s", scanner_id, description)
    try:
        results = search_fn()
    except UnsupportedSearchParameter as exc:
        logger.debug("[%s] Skipped unsupported search: %s (%s)", scanner_id, description, exc)
        return False
    except Exception:
        logger.exception("[%s] Error during search (%s)", scanner_id, description)
        return False

    if not results:
        logger.debug("[%s] No pages found via %s.", scanner_id, description)
        return False

    logger.info("[%s] Found %d page(s) via %s.", scanner_id, results.total_pages_found, description)
    combined_results.add_page_entries(results.page_entries)
    return True


def _notify(params: ScanParameters, results: SearchResultSet, scanner_id: str) -> None:
    try:
        params.notify(results)
    except Exception:
        logger.exception("[%s] Notifier failed for %s", scanner_id, params.url)


class ScannerPipeline:
    """Picks the scanner for a page and runs the shared cascade."""

    def __init__(self, scanners: Optional[Sequence[BaseDomainScanner]] = None) -> None:
        if scanners is None:
            from catwiki.scanners import default_scanners  # noqa: PLC0415

            scanners = default_scanners()
        self._scanners = list(scanners)

    @property
    def scanners(self) -> list[BaseDomainScanner]:
        return list(self._scanners)

    def select_scanner(self, params: ScanParameters) -> Optional[BaseDomainScanner]:
        for scanner in self._scanners:
            if scanner.can_scan_content(params):
                return scanner
        return None

    def scan(self, params: ScanParameters) -> bool:
        """Scan one page.

        Uses the first scanner that claims the page.  Pages no scanner claims
        fall back to approximate matching over the document's text, when a
        document is available.
        """
        scanner = self.select_scanner(params)
        if scanner is not None:
            return self.run_cascade(scanner, params)

        if params.document is None:
            logger.debug("No scanner for %s and no document text; nothing to do.", params.url)
            return False
        return self.scan_inner_text(params)

    def scan_inner_text(self, params: ScanParameters) -> bool:
        pages_db = params.pages_db
        results = SearchResultSet()
        found = perform_search(
            lambda: pages_db.fuzzy_search_inner_text(
                params.document.inner_text(),
                settings.inner_text_threshold,
                settings.inner_text_min_length,
            ),
            "Inner Text Match",
            results,
            "inner-text",
        )
        if found:
            _notify(params, results.deduplicated(), "inner-text")
        return found

    def run_cascade(self, scanner: BaseDomainScanner, params: ScanParameters) -> bool:
        """Run every strategy for *scanner* on *params*.

        Returns ``True`` iff any strategy produced a raw match, regardless of
        how many unique pages were finally emitted.
        """
        pages_db = params.pages_db
        scanner_id = scanner.scanner_id
        combined_results = SearchResultSet()
        found_any_pages = False

        logger.info("[%s] Starting scan for URL: %s", scanner_id, params.url)

        domain_key = scanner.get_domain_key_for_search(params)
        found_any_pages |= perform_search(
            lambda: pages_db.fuzzy_search(domain_key),
            f"Domain Key Fuzzy Search ({domain_key!r})",
            combined_results,
            scanner_id,
        )

        entries = self._collect_entries(scanner, params)
        if not entries:
            logger.info("[%s] No entity extracted, skipping entity-based searches.", scanner_id)

        for entry in entries:
            logger.info("[%s] Extracted entity: %r", scanner_id, entry)
            strategies = [
                (lambda e=entry: pages_db.get_pages_for_category(e), "Category Match"),
                (lambda e=entry: pages_db.find_consecutive_words(e, 1, True), "Consecutive Words Match"),
                (lambda e=entry: pages_db.simple_search(e), "Simple Substring Match"),
                (lambda e=entry: pages_db.fuzzy_search(e), "Fuzzy Word Match"),
            ]
            for search_fn, label in strategies:
                found_any_pages |= perform_search(
                    search_fn,
                    f"{label} ({entry!r})",
                    combined_results,
                    scanner_id,
                )

        final_results = combined_results.deduplicated()
        if final_results:
            logger.info(
                "[%s] Notifying with %d unique page(s).", scanner_id, final_results.total_pages_found
            )
            _notify(params, final_results, scanner_id)
        else:
            logger.info("[%s] No relevant pages found.", scanner_id)

        return found_any_pages

    @staticmethod
    def _collect_entries(scanner: BaseDomainScanner, params: ScanParameters) -> list[str]:
        entries: list[str] = []
        scanner_id = scanner.scanner_id

        try:
            extracted = scanner.extract_entity(params.url)
        except Exception:
            logger.exception("[%s] Entity extraction from URL failed", scanner_id)
            extracted = None
        if extracted:
            entries.append(extracted)

        try:
            entries.extend(scanner.search_content(params))
        except Exception:
            logger.exception("[%s] Reading page content failed", scanner_id)

        return entries
