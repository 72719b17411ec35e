"""In-memory page index with five search strategies.

Search strategies
-----------------
``get_pages_for_category``
    Exact, case-insensitive match on a company's industries or a product /
    product line's categories.

``simple_search``
    Case-insensitive substring match on the page name.

``find_consecutive_words``
    Best page whose name starts with the longest run of the query's words.

``fuzzy_search``
    Pages containing any (or all) query words as whole words, ordered by the
    number of words matched.

``fuzzy_search_inner_text``
    Approximate matching of page names and cross-reference fields against
    every line of free-form page text.

The catalog is small, so every strategy is a linear scan over one snapshot.
A snapshot is replaced wholesale by :meth:`PageIndex.set_pages`; a search
reads the snapshot reference once and never sees a half-built catalog.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Optional

from catwiki.config import settings
from catwiki.errors import UnsupportedSearchParameter
from catwiki.pages import matching
from catwiki.pages.models import (
    CompanyPage,
    IncidentPage,
    Page,
    ProductLinePage,
    ProductPage,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------

class SearchResultSet:
    """Insertion-ordered collection of matched pages.

    Duplicates are allowed; call :meth:`deduplicated` to collapse them.
    """

    def __init__(self, page_entries: Iterable[Page] = ()) -> None:
        self._page_entries: list[Page] = []
        self.add_page_entries(page_entries)

    def add_page_entry(self, page_entry: Page) -> None:
        self._page_entries.append(page_entry)

    def add_page_entries(self, page_entries: Iterable[Page]) -> None:
        for page_entry in page_entries:
            self.add_page_entry(page_entry)

    @property
    def total_pages_found(self) -> int:
        return len(self._page_entries)

    @property
    def page_entries(self) -> tuple[Page, ...]:
        return tuple(self._page_entries)

    def page_ids(self) -> list[int]:
        return [page.page_id for page in self._page_entries]

    def deduplicated(self) -> SearchResultSet:
        """Return a new set keeping the first occurrence of each page id."""
        seen: set[int] = set()
        unique: list[Page] = []
        for page in self._page_entries:
            if page.page_id in seen:
                continue
            seen.add(page.page_id)
            unique.append(page)
        return SearchResultSet(unique)

    def __iter__(self) -> Iterator[Page]:
        return iter(self._page_entries)

    def __len__(self) -> int:
        return len(self._page_entries)

    def __bool__(self) -> bool:
        return bool(self._page_entries)

    def __repr__(self) -> str:
        return f"SearchResultSet(page_ids={self.page_ids()!r})"


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _Snapshot:
    company_pages: tuple[CompanyPage, ...] = ()
    incident_pages: tuple[IncidentPage, ...] = ()
    product_pages: tuple[ProductPage, ...] = ()
    product_line_pages: tuple[ProductLinePage, ...] = ()

    @property
    def all_pages(self) -> list[Page]:
        return [
            *self.company_pages,
            *self.incident_pages,
            *self.product_pages,
            *self.product_line_pages,
        ]


def load_default_cargo(path: Optional[Path] = None) -> dict[str, Any]:
    """Read the cargo export bundled with the package."""
    source = path or settings.default_pages_path
    return json.loads(source.read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------

class PageIndex:
    """Owner of the four typed page collections."""

    def __init__(self) -> None:
        self._snapshot = _Snapshot()
        self._swap_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------
    @property
    def company_pages(self) -> tuple[CompanyPage, ...]:
        return self._snapshot.company_pages

    @property
    def incident_pages(self) -> tuple[IncidentPage, ...]:
        return self._snapshot.incident_pages

    @property
    def product_pages(self) -> tuple[ProductPage, ...]:
        return self._snapshot.product_pages

    @property
    def product_line_pages(self) -> tuple[ProductLinePage, ...]:
        return self._snapshot.product_line_pages

    @property
    def all_pages(self) -> list[Page]:
        return self._snapshot.all_pages

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def init_default_pages(self) -> None:
        """Load the baked-in cargo export so the index is never empty."""
        self.set_pages(self.default_cargo())

    @staticmethod
    def default_cargo() -> dict[str, Any]:
        return load_default_cargo()

    def set_pages(self, cargo_export: Mapping[str, Any]) -> None:
        """Convert *cargo_export* and replace all four collections at once.

        No validation happens here; callers pass data that already passed
        :func:`catwiki.pages.cargo.validate_cargo_export`.
        """
        snapshot = _Snapshot(
            company_pages=tuple(CompanyPage.from_cargo(r) for r in cargo_export["Company"]),
            incident_pages=tuple(IncidentPage.from_cargo(r) for r in cargo_export["Incident"]),
            product_pages=tuple(ProductPage.from_cargo(r) for r in cargo_export["Product"]),
            product_line_pages=tuple(
                ProductLinePage.from_cargo(r) for r in cargo_export["ProductLine"]
            ),
        )
        with self._swap_lock:
            self._snapshot = snapshot
        logger.debug("[index] loaded %d pages", len(snapshot.all_pages))

    # ------------------------------------------------------------------
    # Search strategies
    # ------------------------------------------------------------------
    def get_pages_for_domain(self, domain: str) -> SearchResultSet:
        return self.fuzzy_search(domain)

    def get_pages_for_category(self, category_name: str) -> SearchResultSet:
        lower_category = category_name.lower()

        def _matches(page: Page) -> bool:
            if isinstance(page, CompanyPage):
                return any(i.lower() == lower_category for i in page.industries)
            if isinstance(page, (ProductPage, ProductLinePage)):
                return any(c.lower() == lower_category for c in page.categories)
            return False

        return SearchResultSet(p for p in self.all_pages if _matches(p))

    def simple_search(self, query: str) -> SearchResultSet:
        lower_query = query.lower()
        return SearchResultSet(
            p for p in self.all_pages if lower_query in p.page_name.lower()
        )

    def find_consecutive_words(
        self,
        query: str,
        max_results: int = 1,
        only_from_start: bool = True,
    ) -> SearchResultSet:
        """Return the page whose name shares the longest leading word run.

        Raises:
            UnsupportedSearchParameter: for ``max_results != 1`` or
                ``only_from_start=False``; only the single best prefix match
                is implemented.
        """
        if max_results != 1:
            raise UnsupportedSearchParameter(f"max_results={max_results} (only 1 is supported)")
        if not only_from_start:
            raise UnsupportedSearchParameter("only_from_start=False is not supported")

        best_run = 0
        found: Optional[Page] = None
        for page in self.all_pages:
            run = matching.leading_run_length(query, page.page_name)
            if run > best_run:
                best_run = run
                found = page

        results = SearchResultSet()
        if found is not None:
            results.add_page_entry(found)
        return results

    def fuzzy_search(self, query: str, match_all_words: bool = False) -> SearchResultSet:
        words = matching.split_words(query)
        if not words:
            return SearchResultSet()

        scored = []
        for page in self.all_pages:
            count = matching.count_word_matches(words, page.page_name)
            keep = count == len(words) if match_all_words else count > 0
            if keep:
                scored.append((count, page))

        # sorted() is stable, so equal counts keep catalog order
        scored = sorted(scored, key=lambda item: item[0], reverse=True)
        return SearchResultSet(page for _, page in scored)

    def fuzzy_search_inner_text(
        self,
        inner_text: str,
        score_threshold: float = 0.85,
        min_length: int = 10,
    ) -> SearchResultSet:
        lines = matching.clean_lines(inner_text, min_length)
        snapshot = self._snapshot
        if not lines:
            return SearchResultSet()

        best_scores: dict[int, float] = {}
        for page in snapshot.all_pages:
            for needle in page.search_fields():
                score = matching.best_line_score(needle, lines, score_threshold)
                if score > best_scores.get(page.page_id, 0.0):
                    best_scores[page.page_id] = score

        logger.debug("[index] inner-text scores: %s", best_scores)
        return SearchResultSet(p for p in snapshot.all_pages if p.page_id in best_scores)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def counts(self) -> dict[str, int]:
        snapshot = self._snapshot
        return {
            "Company": len(snapshot.company_pages),
            "Incident": len(snapshot.incident_pages),
            "Product": len(snapshot.product_pages),
            "ProductLine": len(snapshot.product_line_pages),
        }
