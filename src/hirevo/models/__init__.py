"""ORM models."""

from hirevo.models.base import Base, TimestampMixin, new_record_id
from hirevo.models.company import Company, CompanyMember, CompanyMemberRole, CompanyMemberStatus
from hirevo.models.invoice import Invoice, InvoiceStatus
from hirevo.models.job import Job, JobMember, JobMemberStatus, JobRate, JobStatus
from hirevo.models.report import CompanyReport, UserReport

__all__ = [
    "Base",
    "TimestampMixin",
    "new_record_id",
    "Company",
    "CompanyMember",
    "CompanyMemberRole",
    "CompanyMemberStatus",
    "Invoice",
    "InvoiceStatus",
    "Job",
    "JobMember",
    "JobMemberStatus",
    "JobRate",
    "JobStatus",
    "CompanyReport",
    "UserReport",
]
