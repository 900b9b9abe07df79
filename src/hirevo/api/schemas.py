"""Pydantic schemas for API responses."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class CompanyReportResponse(BaseModel):
    """Schema for a company report."""

    model_config = ConfigDict(from_attributes=True)

    company_report_id: str
    company_id: str
    total_jobs: int
    active_jobs: int
    completed_jobs: int
    total_workers: int
    total_invoices: int
    paid_invoices: int
    total_revenue: Decimal
    created_at: datetime | None = None


class UserReportResponse(BaseModel):
    """Schema for a user report."""

    model_config = ConfigDict(from_attributes=True)

    user_report_id: str
    user_id: str
    total_jobs: int
    hired_jobs: int
    total_hours: Decimal
    total_earnings: Decimal
    active_companies: int
    created_at: datetime | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: str
