"""CATWiki page matcher: finds catalog entities referenced by a web page."""

__version__ = "0.1.0"
