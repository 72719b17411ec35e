"""Typed catalog pages built from cargo export records.

These are plain frozen dataclasses.  Each variant knows how to build itself
from one flat cargo record (string-typed fields, PascalCase keys); nothing
mutates a page after that.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping


def _text(record: Mapping[str, Any], key: str) -> str:
    value = record.get(key)
    return "" if value is None else str(value)


def split_list_field(value: str) -> tuple[str, ...]:
    """Split a comma-separated cargo list field, dropping empty items."""
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Page:
    page_id: int
    page_name: str

    kind = "Page"

    def search_fields(self) -> list[str]:
        """Fields scored by approximate inner-text matching."""
        return [self.page_name]

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, **asdict(self)}


@dataclass(frozen=True)
class CompanyPage(Page):
    industries: tuple[str, ...] = ()
    parent_company: str = ""
    company_type: str = ""
    website: str = ""

    kind = "Company"

    @classmethod
    def from_cargo(cls, record: Mapping[str, Any]) -> CompanyPage:
        return cls(
            page_id=int(_text(record, "PageID")),
            page_name=_text(record, "PageName"),
            industries=split_list_field(_text(record, "Industry")),
            parent_company=_text(record, "ParentCompany"),
            company_type=_text(record, "Type"),
            website=_text(record, "Website"),
        )

    def search_fields(self) -> list[str]:
        return [self.page_name, self.parent_company]


@dataclass(frozen=True)
class IncidentPage(Page):
    company: str = ""
    product: str = ""
    product_line: str = ""
    description: str = ""
    start_date: str = ""
    end_date: str = ""
    status: str = ""
    incident_type: str = ""

    kind = "Incident"

    @classmethod
    def from_cargo(cls, record: Mapping[str, Any]) -> IncidentPage:
        return cls(
            page_id=int(_text(record, "PageID")),
            page_name=_text(record, "PageName"),
            company=_text(record, "Company"),
            product=_text(record, "Product"),
            product_line=_text(record, "ProductLine"),
            description=_text(record, "Description"),
            start_date=_text(record, "StartDate"),
            end_date=_text(record, "EndDate"),
            status=_text(record, "Status"),
            incident_type=_text(record, "Type"),
        )

    def search_fields(self) -> list[str]:
        return [self.page_name, self.product_line, self.product]


@dataclass(frozen=True)
class ProductPage(Page):
    categories: tuple[str, ...] = ()
    company: str = ""
    product_line: str = ""
    description: str = ""
    website: str = ""

    kind = "Product"

    @classmethod
    def from_cargo(cls, record: Mapping[str, Any]) -> ProductPage:
        return cls(
            page_id=int(_text(record, "PageID")),
            page_name=_text(record, "PageName"),
            categories=split_list_field(_text(record, "Category")),
            company=_text(record, "Company"),
            product_line=_text(record, "ProductLine"),
            description=_text(record, "Description"),
            website=_text(record, "Website"),
        )

    def search_fields(self) -> list[str]:
        return [self.page_name, self.product_line, self.company]


@dataclass(frozen=True)
class ProductLinePage(Page):
    categories: tuple[str, ...] = ()
    company: str = ""
    description: str = ""
    website: str = ""

    kind = "ProductLine"

    @classmethod
    def from_cargo(cls, record: Mapping[str, Any]) -> ProductLinePage:
        return cls(
            page_id=int(_text(record, "PageID")),
            page_name=_text(record, "PageName"),
            categories=split_list_field(_text(record, "Category")),
            company=_text(record, "Company"),
            description=_text(record, "Description"),
            website=_text(record, "Website"),
        )

    def search_fields(self) -> list[str]:
        return [self.page_name, self.company]
