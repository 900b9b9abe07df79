"""Company and company membership models."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from hirevo.models.base import Base, TimestampMixin, new_record_id


class CompanyMemberStatus(str, Enum):
    """Known company membership statuses."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class CompanyMemberRole(str, Enum):
    """Known company membership roles."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    WORKER = "WORKER"


class Company(Base, TimestampMixin):
    """Hiring company."""

    __tablename__ = "companies"

    company_id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=new_record_id,
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    created_by: Mapped[str | None] = mapped_column(String(32), nullable=True)


class CompanyMember(Base, TimestampMixin):
    """Link between a user and a company."""

    __tablename__ = "company_members"

    company_member_id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=new_record_id,
    )
    company_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("companies.company_id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(String(32), nullable=False)
    role: Mapped[str] = mapped_column(
        String,
        nullable=False,
        default=CompanyMemberRole.WORKER.value,
    )
    status: Mapped[str] = mapped_column(
        String,
        nullable=False,
        default=CompanyMemberStatus.ACTIVE.value,
    )

    __table_args__ = (
        Index("company_members_company_status_idx", "company_id", "status"),
        Index("company_members_user_status_idx", "user_id", "status"),
    )
