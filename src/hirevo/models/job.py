"""Job, job rate and job membership models."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from sqlalchemy import ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from hirevo.models.base import Base, JSONType, TimestampMixin, new_record_id


class JobStatus(str, Enum):
    """Known job statuses."""

    DRAFT = "DRAFT"
    HIRING = "HIRING"
    READY = "READY"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class JobMemberStatus(str, Enum):
    """Known job membership statuses."""

    APPLIED = "APPLIED"
    HIRED = "HIRED"
    REJECTED = "REJECTED"


class Job(Base, TimestampMixin):
    """Job posted by a company."""

    __tablename__ = "jobs"

    job_id: Mapped[str] = mapped_column(
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
    title: Mapped[str] = mapped_column(String, nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String,
        nullable=False,
        default=JobStatus.HIRING.value,
    )
    # Ids of the JobRate rows that apply to this job, in no particular order
    rate_ids: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)


class JobRate(Base, TimestampMixin):
    """Hourly rate applied to a job over a time interval.

    Instants are kept in their stored textual form (RFC 3339 with offset)
    and parsed when earnings are computed.
    """

    __tablename__ = "job_rates"

    job_rate_id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=new_record_id,
    )
    job_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("jobs.job_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_time: Mapped[str] = mapped_column(String, nullable=False)
    end_time: Mapped[str] = mapped_column(String, nullable=False)
    rate_value: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
    )


class JobMember(Base, TimestampMixin):
    """Link between a user and a job."""

    __tablename__ = "job_members"

    job_member_id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=new_record_id,
    )
    # Not a foreign key: jobs may disappear while memberships remain
    job_id: Mapped[str] = mapped_column(String(32), nullable=False)
    user_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String,
        nullable=False,
        default=JobMemberStatus.APPLIED.value,
    )

    __table_args__ = (Index("job_members_job_idx", "job_id"),)
