"""Typed decode of the loosely-typed invoice metadata payload."""

from __future__ import annotations

import json
import math
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class InvoiceMetadata(BaseModel):
    """Fields of invoice metadata that reports read.

    Every field is optional; a missing or mistyped value decodes as None.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    total: Decimal | None = Field(default=None, alias="Total")

    @field_validator("total", mode="before")
    @classmethod
    def _numeric_total(cls, value: Any) -> Any:
        # Only real JSON numbers count; strings and booleans do not
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            return None
        if isinstance(value, float) and not math.isfinite(value):
            return None
        if isinstance(value, Decimal) and not value.is_finite():
            return None
        if isinstance(value, float):
            return Decimal(repr(value))
        return value


def decode_invoice_metadata(raw: Any) -> InvoiceMetadata:
    """Decode a raw metadata payload, never failing.

    Accepts a mapping or its JSON text. Anything else decodes as empty
    metadata.
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            return InvoiceMetadata()
    if not isinstance(raw, dict):
        return InvoiceMetadata()
    try:
        return InvoiceMetadata.model_validate(raw)
    except ValidationError:
        return InvoiceMetadata()


def invoice_total(raw: Any) -> Decimal:
    """Numeric Total of a metadata payload, 0 when absent or non-numeric."""
    total = decode_invoice_metadata(raw).total
    return total if total is not None else Decimal("0")
