"""FastAPI application package for the CATWiki page matcher."""

from catwiki.api.app import create_app

__all__ = ["create_app"]
