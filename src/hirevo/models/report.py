"""Derived report models.

Reports are recomputed from their sources on every relevant mutation and
are never edited by users. Each report is unique on its natural key,
named by ``__natural_key__`` for the store's upsert.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hirevo.models.base import Base, TimestampMixin, new_record_id


class CompanyReport(Base, TimestampMixin):
    """Aggregate metrics for one company."""

    __tablename__ = "company_reports"
    __natural_key__ = "company_id"

    company_report_id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=new_record_id,
    )
    company_id: Mapped[str] = mapped_column(String(32), nullable=False)
    total_jobs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    active_jobs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completed_jobs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_workers: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_invoices: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    paid_invoices: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_revenue: Mapped[Decimal] = mapped_column(
        Numeric(14, 2),
        nullable=False,
        default=Decimal("0"),
    )

    __table_args__ = (
        UniqueConstraint("company_id", name="company_reports_company_unique"),
    )


class UserReport(Base, TimestampMixin):
    """Aggregate metrics for one user."""

    __tablename__ = "user_reports"
    __natural_key__ = "user_id"

    user_report_id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=new_record_id,
    )
    user_id: Mapped[str] = mapped_column(String(32), nullable=False)
    total_jobs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hired_jobs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_hours: Mapped[Decimal] = mapped_column(
        Numeric(14, 4),
        nullable=False,
        default=Decimal("0"),
    )
    total_earnings: Mapped[Decimal] = mapped_column(
        Numeric(14, 2),
        nullable=False,
        default=Decimal("0"),
    )
    active_companies: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("user_id", name="user_reports_user_unique"),
    )
