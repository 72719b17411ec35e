"""Schema for the cargo export wire format.

The upstream export is untyped JSON: every field is a string, including dates
and enum-like values.  The models below only check presence and type; they do
not coerce.  ``validate_cargo_export`` is the gate the cache refresh
controller uses before anything is committed to the index.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from catwiki.errors import CargoValidationError

logger = logging.getLogger(__name__)

CARGO_KINDS = ("Company", "Incident", "Product", "ProductLine")

PageIdStr = Annotated[StrictStr, Field(pattern=r"^\d+$")]


class _CargoRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    PageID: PageIdStr
    PageName: StrictStr


class CompanyCargo(_CargoRecord):
    Industry: StrictStr
    ParentCompany: StrictStr
    Type: StrictStr
    Website: StrictStr


class IncidentCargo(_CargoRecord):
    Company: StrictStr
    Description: StrictStr
    EndDate: StrictStr
    Product: StrictStr
    ProductLine: StrictStr
    StartDate: StrictStr
    Status: StrictStr
    Type: StrictStr


class ProductCargo(_CargoRecord):
    Category: StrictStr
    Company: StrictStr
    Description: StrictStr
    ProductLine: StrictStr
    Website: StrictStr


class ProductLineCargo(_CargoRecord):
    Category: StrictStr
    Company: StrictStr
    Description: StrictStr
    Website: StrictStr


class CargoExport(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    Company: list[CompanyCargo]
    Incident: list[IncidentCargo]
    Product: list[ProductCargo]
    ProductLine: list[ProductLineCargo]


def parse_cargo_export(data: Any) -> CargoExport:
    """Validate *data* against the cargo schema.

    Raises:
        CargoValidationError: if any collection is missing, is not a list, or
            holds a record without one of its kind's required string fields.
    """
    try:
        return CargoExport.model_validate(data)
    except ValidationError as exc:
        raise CargoValidationError(
            f"cargo export rejected ({exc.error_count()} error(s)): "
            f"{exc.errors()[0]['loc']} {exc.errors()[0]['msg']}"
        ) from exc


def validate_cargo_export(data: Any) -> bool:
    """Return ``True`` if *data* is an acceptable cargo export.  Never raises."""
    try:
        parse_cargo_export(data)
    except CargoValidationError as exc:
        logger.warning("[cargo] %s", exc)
        return False
    return True
