"""User report recomputation.

Besides counting memberships, the user report walks every HIRED job
membership down to the job's rate intervals to accumulate worked hours and
earnings. Only the two top-level queries (job memberships and company
memberships of the user) are fatal; a missing job, a failed rate lookup or
an unparseable rate interval is logged and degrades the totals instead.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from hirevo.errors import HirevoError, NotFoundError, RateParseError
from hirevo.models import (
    CompanyMember,
    CompanyMemberStatus,
    Job,
    JobMember,
    JobMemberStatus,
    JobRate,
    UserReport,
)
from hirevo.reports.base import ReportAggregator, quantize
from hirevo.reports.earnings import RateEarnings, calculate_rate_earnings

HOURS_PRECISION = Decimal("0.0001")


@dataclass(frozen=True)
class UserMetrics:
    """Values written to a user report."""

    total_jobs: int = 0
    hired_jobs: int = 0
    total_hours: Decimal = Decimal("0.0000")
    total_earnings: Decimal = Decimal("0.00")
    active_companies: int = 0

    def apply_to(self, report: UserReport) -> None:
        report.total_jobs = self.total_jobs
        report.hired_jobs = self.hired_jobs
        report.total_hours = self.total_hours
        report.total_earnings = self.total_earnings
        report.active_companies = self.active_companies


def rate_ids_of(job: Job) -> list[str]:
    """String rate ids referenced by a job, ignoring anything else."""
    raw = job.rate_ids
    if not isinstance(raw, list):
        return []
    return [rate_id for rate_id in raw if isinstance(rate_id, str) and rate_id]


class UserReportAggregator(ReportAggregator[UserReport]):
    """Rebuilds the report row of one user from their memberships."""

    report_model = UserReport

    async def recompute(self, user_id: str) -> UserReport:
        """Recompute and persist the report for ``user_id``.

        Raises:
            QueryError: If the user's job or company memberships cannot be loaded
            StorageError: If the report cannot be written
        """
        self.require_key("user_id", user_id)

        async with self.store.lock(self.lock_key(user_id)):
            report = await self.find_or_create(user_id)

            job_members = await self.store.find_by_filter(
                JobMember,
                JobMember.user_id == user_id,
                order_by=[JobMember.created_at.desc(), JobMember.job_member_id],
            )

            hired_jobs = 0
            worked = RateEarnings()
            for member in job_members:
                if member.status != JobMemberStatus.HIRED.value:
                    continue
                hired_jobs += 1
                worked += await self._member_earnings(member)

            companies = await self.store.find_by_filter(
                CompanyMember,
                CompanyMember.user_id == user_id,
                CompanyMember.status == CompanyMemberStatus.ACTIVE.value,
                order_by=[CompanyMember.created_at.desc(), CompanyMember.company_member_id],
            )

            metrics = UserMetrics(
                total_jobs=len(job_members),
                hired_jobs=hired_jobs,
                total_hours=quantize(worked.hours, HOURS_PRECISION),
                total_earnings=quantize(worked.earnings),
                active_companies=len(companies),
            )
            metrics.apply_to(report)
            saved = await self.persist(report)

        self.log.info(
            "User report updated",
            extra={"user_id": user_id, "hired_jobs": metrics.hired_jobs},
        )
        return saved

    async def _member_earnings(self, member: JobMember) -> RateEarnings:
        """Earnings of one hired membership; never raises on missing data."""
        try:
            async with self.store.isolated():
                job = await self.store.find_by_id(Job, member.job_id)
        except NotFoundError:
            self.log.warning(
                "Hired job member references a missing job",
                extra={"job_member_id": member.job_member_id, "job_id": member.job_id},
            )
            return RateEarnings()
        except HirevoError as exc:
            self.log.warning(
                "Failed to load job %s for job member %s: %s",
                member.job_id,
                member.job_member_id,
                exc,
            )
            return RateEarnings()

        rate_ids = rate_ids_of(job)
        if not rate_ids:
            return RateEarnings()

        try:
            async with self.store.isolated():
                rates = await self.store.find_by_filter(
                    JobRate,
                    JobRate.job_rate_id.in_(rate_ids),
                    order_by=[JobRate.created_at.desc(), JobRate.job_rate_id],
                )
        except HirevoError as exc:
            self.log.warning("Failed to load rates for job %s: %s", job.job_id, exc)
            return RateEarnings()

        return sum_rate_earnings(rates, self.log)


def sum_rate_earnings(rates: Iterable[JobRate], log: logging.Logger) -> RateEarnings:
    """Accumulate earnings over rates, skipping unparseable intervals."""
    total = RateEarnings()
    for rate in rates:
        try:
            total += calculate_rate_earnings(rate)
        except RateParseError as exc:
            log.warning(
                "Skipping job rate %s with invalid interval: %s",
                rate.job_rate_id,
                exc,
            )
    return total
