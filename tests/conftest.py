"""Shared fixtures: a small cargo export and an index loaded from it."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from catwiki.pages.index import PageIndex

_CARGO: dict[str, list[dict[str, Any]]] = {
    "Company": [
        {
            "PageID": "1",
            "PageName": "Alpha Beta Gamma",
            "Industry": "Widgets,Gadgets",
            "ParentCompany": "",
            "Type": "Public",
            "Website": "https://alpha.example",
        },
        {
            "PageID": "2",
            "PageName": "Wiki Media Group",
            "Industry": "Publishing",
            "ParentCompany": "Alpha Beta Gamma",
            "Type": "Subsidiary",
            "Website": "",
        },
    ],
    "Incident": [
        {
            "PageID": "3",
            "PageName": "Gadget Recall (2023)",
            "Company": "Alpha Beta Gamma",
            "Description": "Batteries overheating.",
            "EndDate": "",
            "Product": "Gizmo Pro",
            "ProductLine": "Gizmo",
            "StartDate": "2023-01-01",
            "Status": "Active",
            "Type": "Recall",
        },
    ],
    "Product": [
        {
            "PageID": "4",
            "PageName": "Gizmo Pro",
            "Category": "Gadgets",
            "Company": "Alpha Beta Gamma",
            "Description": "",
            "ProductLine": "Gizmo",
            "Website": "",
        },
    ],
    "ProductLine": [
        {
            "PageID": "5",
            "PageName": "Gizmo",
            "Category": "gadgets, Home",
            "Company": "Alpha Beta Gamma",
            "Description": "",
            "Website": "",
        },
    ],
}


def make_cargo() -> dict[str, list[dict[str, Any]]]:
    """A fresh deep copy of the five-page fixture export."""
    return copy.deepcopy(_CARGO)


def ids(results) -> list[int]:
    return [page.page_id for page in results]


@pytest.fixture()
def cargo() -> dict[str, list[dict[str, Any]]]:
    return make_cargo()


@pytest.fixture()
def pages_db(cargo) -> PageIndex:
    index = PageIndex()
    index.set_pages(cargo)
    return index
