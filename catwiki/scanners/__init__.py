"""Scanner package: per-site scanners and the shared search cascade."""

from catwiki.scanners.base import BaseDomainScanner, Notifier, ScanParameters
from catwiki.scanners.generic_search_engine import GenericSearchEngineScanner
from catwiki.scanners.google import GoogleScanner
from catwiki.scanners.pipeline import ScannerPipeline, perform_search


def default_scanners() -> list[BaseDomainScanner]:
    """Every built-in scanner, in the order they are tried."""
    return [GoogleScanner(), GenericSearchEngineScanner()]


__all__ = [
    "BaseDomainScanner",
    "GenericSearchEngineScanner",
    "GoogleScanner",
    "Notifier",
    "ScanParameters",
    "ScannerPipeline",
    "default_scanners",
    "perform_search",
]
