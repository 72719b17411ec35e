"""Exception hierarchy shared by the index, scanners and cache layers.

Only ``CatWikiError`` subclasses cross module boundaries.  The scanner
cascade and the cache refresh controller catch these at their own edges, so
none of them ever reaches the host process.
"""

from __future__ import annotations


class CatWikiError(Exception):
    """Root of all errors raised by this package."""


class UnsupportedSearchParameter(CatWikiError, NotImplementedError):
    """A search was called with a parameter combination it does not support.

    Expected and non-fatal: the scanner cascade downgrades it to "no match".
    """


class CargoValidationError(CatWikiError, ValueError):
    """A cargo export did not satisfy the per-kind record schema."""


class StorageError(CatWikiError):
    """A storage backend read, write or removal failed."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{key}: {message}")
        self.key = key


class FetchError(CatWikiError):
    """The remote cargo export could not be retrieved or decoded."""
