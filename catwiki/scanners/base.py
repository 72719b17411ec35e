"""Scanner capability interface and the parameters of one scan."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from catwiki.pages.index import PageIndex, SearchResultSet
from catwiki.scanners import domains
from catwiki.scraper.document import PageDocument

Notifier = Callable[[SearchResultSet], None]


@dataclass
class ScanParameters:
    """Everything a scanner may look at for the page being visited."""

    url: str
    pages_db: PageIndex
    notify: Notifier
    main_domain: str = ""
    document: Optional[PageDocument] = None

    def __post_init__(self) -> None:
        if not self.main_domain:
            self.main_domain = domains.main_domain(self.url)


class BaseDomainScanner(ABC):
    """Abstract base class for a site-family scanner.

    Subclasses decide whether they apply to a page and how to turn it into
    search keys.  They never search the index themselves; the
    :class:`~catwiki.scanners.pipeline.ScannerPipeline` does that.
    """

    @abstractmethod
    def meta_info(self) -> str:
        """Short label used in log lines."""

    @abstractmethod
    def can_scan_content(self, params: ScanParameters) -> bool:
        """Whether this scanner handles the page's registrable domain."""

    @abstractmethod
    def get_domain_key_for_search(self, params: ScanParameters) -> str:
        """Coarse search term derived from the site's domain."""

    def extract_entity(self, url: str) -> Optional[str]:
        """One entity key parsed straight from the URL, if the site has one."""
        return None

    def search_content(self, params: ScanParameters) -> list[str]:
        """Entity keys read from the page document."""
        return []

    @property
    def scanner_id(self) -> str:
        return self.meta_info() or type(self).__name__
