"""Catalog pages package: typed models, cargo schema and the search index."""

from catwiki.pages.cargo import parse_cargo_export, validate_cargo_export
from catwiki.pages.index import PageIndex, SearchResultSet
from catwiki.pages.models import (
    CompanyPage,
    IncidentPage,
    Page,
    ProductLinePage,
    ProductPage,
)

__all__ = [
    "PageIndex",
    "SearchResultSet",
    "Page",
    "CompanyPage",
    "IncidentPage",
    "ProductPage",
    "ProductLinePage",
    "parse_cargo_export",
    "validate_cargo_export",
]
