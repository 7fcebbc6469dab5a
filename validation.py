"""
Boundary validation for line item data coming from the form and from
contract import.

The calculation engine clamps whatever it is given, so nothing here is
required for the math to be safe. This is where out-of-range input gets
reported back to the user instead of silently becoming 0.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from catalog_data import (
    MAX_PRICE,
    MAX_PRODUCT_NAME_LENGTH,
    MAX_QUANTITY,
    MAX_TERM,
    MIN_TERM,
    REVENUE_TYPES,
)

_MODEL_CONFIG = ConfigDict(str_strip_whitespace=True, allow_inf_nan=False, extra="ignore")


class LineItemUpdate(BaseModel):
    """Partial update to a line item. Unset fields are left alone."""

    model_config = _MODEL_CONFIG

    # Non-nullable fields default to None only so they can be omitted;
    # an explicit None is rejected.
    product_name: str = Field(None, max_length=MAX_PRODUCT_NAME_LENGTH)
    list_unit_price: float = Field(None, ge=0, le=MAX_PRICE)
    quantity: int = Field(None, ge=0, le=MAX_QUANTITY)
    term_months: int = Field(None, ge=MIN_TERM, le=MAX_TERM)
    discount_percent: Optional[float] = Field(None, ge=0, le=1)
    net_unit_price: Optional[float] = Field(None, ge=0, le=MAX_PRICE)
    revenue_type: Literal[REVENUE_TYPES] = None
    existing_volume: Optional[int] = Field(None, ge=0, le=MAX_QUANTITY)
    existing_net_price: Optional[float] = Field(None, ge=0, le=MAX_PRICE)
    existing_term_months: Optional[int] = Field(None, ge=MIN_TERM, le=MAX_TERM)
    display_override: Optional[Literal["monthly", "annual"]] = None


class ImportedLineItem(BaseModel):
    """A line item extracted from an uploaded contract."""

    model_config = _MODEL_CONFIG

    product_name: str = Field(..., min_length=1, max_length=MAX_PRODUCT_NAME_LENGTH)
    list_unit_price: float = Field(..., ge=0, le=MAX_PRICE)
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY)
    term_months: int = Field(..., ge=MIN_TERM, le=MAX_TERM)
    discount_percent: Optional[float] = Field(..., ge=0, le=1)
    net_unit_price: Optional[float] = Field(..., ge=0, le=MAX_PRICE)


def _error_messages(exc: ValidationError, with_path: bool = True) -> list[str]:
    messages = []
    for error in exc.errors():
        if with_path and error["loc"]:
            path = ".".join(str(part) for part in error["loc"])
            messages.append(f"{path}: {error['msg']}")
        else:
            messages.append(error["msg"])
    return messages


def validate_line_item_update(data: dict) -> dict:
    """
    Validate a partial line item update.

    Returns:
        success: True if every provided field is valid
        data: the cleaned fields that were provided (on success)
        errors: "field: message" strings (on failure)
    """
    try:
        item = LineItemUpdate.model_validate(data)
    except ValidationError as exc:
        return {"success": False, "errors": _error_messages(exc)}
    return {"success": True, "data": item.model_dump(exclude_unset=True)}


def validate_imported_line_items(items: list) -> dict:
    """
    Validate contract-import rows one by one. Bad rows are reported, not
    fatal: the good ones still come back in "valid".
    """
    valid = []
    errors = []
    for index, raw in enumerate(items, start=1):
        try:
            valid.append(ImportedLineItem.model_validate(raw).model_dump())
        except ValidationError as exc:
            errors.append(f"Item {index}: {', '.join(_error_messages(exc, with_path=False))}")
    return {"valid": valid, "errors": errors}
