"""Company report recomputation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from hirevo.models import (
    CompanyMember,
    CompanyMemberStatus,
    CompanyReport,
    Invoice,
    InvoiceStatus,
    Job,
    JobStatus,
)
from hirevo.reports.base import ReportAggregator, quantize
from hirevo.reports.invoice_metadata import invoice_total

ACTIVE_JOB_STATUSES = frozenset({JobStatus.HIRING.value, JobStatus.READY.value})


@dataclass(frozen=True)
class CompanyMetrics:
    """Values written to a company report."""

    total_jobs: int = 0
    active_jobs: int = 0
    completed_jobs: int = 0
    total_workers: int = 0
    total_invoices: int = 0
    paid_invoices: int = 0
    total_revenue: Decimal = Decimal("0.00")

    def apply_to(self, report: CompanyReport) -> None:
        report.total_jobs = self.total_jobs
        report.active_jobs = self.active_jobs
        report.completed_jobs = self.completed_jobs
        report.total_workers = self.total_workers
        report.total_invoices = self.total_invoices
        report.paid_invoices = self.paid_invoices
        report.total_revenue = self.total_revenue


def compute_company_metrics(
    jobs: Iterable[Job],
    active_members: Iterable[CompanyMember],
    invoices: Iterable[Invoice],
) -> CompanyMetrics:
    """Aggregate a company's jobs, active members and invoices.

    Job statuses outside HIRING/READY/COMPLETED count only toward the total.
    Paid invoices add their metadata Total when it is a number.
    """
    total_jobs = active_jobs = completed_jobs = 0
    for job in jobs:
        total_jobs += 1
        if job.status in ACTIVE_JOB_STATUSES:
            active_jobs += 1
        elif job.status == JobStatus.COMPLETED.value:
            completed_jobs += 1

    total_invoices = paid_invoices = 0
    revenue = Decimal("0")
    for invoice in invoices:
        total_invoices += 1
        if invoice.status == InvoiceStatus.PAID.value:
            paid_invoices += 1
            revenue += invoice_total(invoice.invoice_metadata)

    return CompanyMetrics(
        total_jobs=total_jobs,
        active_jobs=active_jobs,
        completed_jobs=completed_jobs,
        total_workers=sum(1 for _ in active_members),
        total_invoices=total_invoices,
        paid_invoices=paid_invoices,
        total_revenue=quantize(revenue),
    )


class CompanyReportAggregator(ReportAggregator[CompanyReport]):
    """Rebuilds the report row of one company from its sources."""

    report_model = CompanyReport

    async def recompute(self, company_id: str) -> CompanyReport:
        """Recompute and persist the report for ``company_id``.

        Raises:
            QueryError: If jobs, members or invoices cannot be loaded
            StorageError: If the report cannot be written
        """
        self.require_key("company_id", company_id)

        async with self.store.lock(self.lock_key(company_id)):
            report = await self.find_or_create(company_id)

            jobs = await self.store.find_by_filter(
                Job,
                Job.company_id == company_id,
                order_by=[Job.created_at.desc(), Job.job_id],
            )
            members = await self.store.find_by_filter(
                CompanyMember,
                CompanyMember.company_id == company_id,
                CompanyMember.status == CompanyMemberStatus.ACTIVE.value,
                order_by=[CompanyMember.created_at.desc(), CompanyMember.company_member_id],
            )
            invoices = await self.store.find_by_filter(
                Invoice,
                Invoice.company_id == company_id,
                order_by=[Invoice.created_at.desc(), Invoice.invoice_id],
            )

            metrics = compute_company_metrics(jobs, members, invoices)
            metrics.apply_to(report)
            saved = await self.persist(report)

        self.log.info(
            "Company report updated",
            extra={"company_id": company_id, "total_jobs": metrics.total_jobs},
        )
        return saved
