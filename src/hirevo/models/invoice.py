"""Invoice model."""

from __future__ import annotations

from enum import Enum
from typing import Any

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from hirevo.models.base import Base, JSONType, TimestampMixin, new_record_id


class InvoiceStatus(str, Enum):
    """Known invoice statuses."""

    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class Invoice(Base, TimestampMixin):
    """Invoice issued by a company to a user."""

    __tablename__ = "invoices"

    invoice_id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=new_record_id,
    )
    company_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("companies.company_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(
        String,
        nullable=False,
        default=InvoiceStatus.PENDING.value,
    )
    # "metadata" is reserved on declarative classes, hence the attribute name
    invoice_metadata: Mapped[Any | None] = mapped_column(
        "metadata",
        JSONType,
        nullable=True,
    )
