"""Tests for user report recomputation."""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from hirevo.errors import QueryError
from hirevo.models import CompanyMember, Job, JobMember, JobRate, UserReport
from hirevo.reports.user_report import UserReportAggregator, rate_ids_of
from hirevo.store import SqlAlchemyEntityStore
from tests.conftest import OTHER_WORKER_ID, WORKER_ID


async def count_reports(session, user_id: str) -> int:
    return await session.scalar(
        select(func.count()).select_from(UserReport).where(UserReport.user_id == user_id)
    )


class TestUserReportAggregator:
    """Test user report recomputation against the database."""

    @pytest.mark.asyncio
    async def test_hired_job_earnings(self, session, store, test_job_members, test_members):
        """Test hours and earnings of the hired job's two rate intervals."""
        report = await UserReportAggregator(store).recompute(WORKER_ID)

        assert report.user_id == WORKER_ID
        assert report.total_jobs == 3
        assert report.hired_jobs == 1
        assert report.total_hours == Decimal("3.5")
        assert report.total_earnings == Decimal("95.00")
        assert report.active_companies == 1

    @pytest.mark.asyncio
    async def test_user_without_activity(self, session, store):
        """Test that an unknown user gets a zeroed report."""
        report = await UserReportAggregator(store).recompute("user_nobody")

        assert report.total_jobs == 0
        assert report.hired_jobs == 0
        assert report.total_hours == 0
        assert report.total_earnings == 0
        assert report.active_companies == 0
        assert await count_reports(session, "user_nobody") == 1

    @pytest.mark.asyncio
    async def test_dangling_job_reference(self, session, store, test_job_members):
        """Test that a hired member of a deleted job still counts as hired."""
        session.add(JobMember(job_id="job_deleted", user_id=WORKER_ID, status="HIRED"))
        await session.flush()

        report = await UserReportAggregator(store).recompute(WORKER_ID)

        assert report.hired_jobs == 2
        assert report.total_hours == Decimal("3.5")
        assert report.total_earnings == Decimal("95.00")

    @pytest.mark.asyncio
    async def test_job_without_rates(self, session, store, test_jobs):
        """Test that a hired job with no rates adds nothing."""
        session.add(JobMember(job_id=test_jobs[1].job_id, user_id=OTHER_WORKER_ID, status="HIRED"))
        await session.flush()

        report = await UserReportAggregator(store).recompute(OTHER_WORKER_ID)

        assert report.hired_jobs == 1
        assert report.total_hours == 0

    @pytest.mark.asyncio
    async def test_unparseable_rate_skipped(self, session, store, test_jobs, test_job_members):
        """Test that a rate with a broken interval is skipped, not fatal."""
        job = test_jobs[0]
        session.add(
            JobRate(
                job_rate_id="rate_broken",
                job_id=job.job_id,
                start_time="sometime",
                end_time="2024-03-01T10:00:00Z",
                rate_value=Decimal("1000.00"),
            )
        )
        job.rate_ids = [*job.rate_ids, "rate_broken"]
        await session.flush()

        report = await UserReportAggregator(store).recompute(WORKER_ID)

        assert report.total_hours == Decimal("3.5")
        assert report.total_earnings == Decimal("95.00")

    @pytest.mark.asyncio
    async def test_inverted_interval_contributes_zero(self, session, store, test_jobs, test_job_members):
        """Test that end < start never reduces the totals."""
        job = test_jobs[0]
        session.add(
            JobRate(
                job_rate_id="rate_inverted",
                job_id=job.job_id,
                start_time="2024-03-02T10:00:00Z",
                end_time="2024-03-02T08:00:00Z",
                rate_value=Decimal("25.00"),
            )
        )
        job.rate_ids = [*job.rate_ids, "rate_inverted"]
        await session.flush()

        report = await UserReportAggregator(store).recompute(WORKER_ID)

        assert report.total_hours == Decimal("3.5")

    @pytest.mark.asyncio
    async def test_rate_lookup_failure_degrades(self, session, test_job_members):
        """Test that a failing rate query degrades instead of aborting."""

        class RateQueryFails(SqlAlchemyEntityStore):
            async def find_by_filter(self, model, *criteria, **kwargs):
                if model is JobRate:
                    raise QueryError("job_rates", "timeout")
                return await super().find_by_filter(model, *criteria, **kwargs)

        report = await UserReportAggregator(RateQueryFails(session)).recompute(WORKER_ID)

        assert report.hired_jobs == 1
        assert report.total_hours == 0

    @pytest.mark.asyncio
    async def test_job_member_query_failure_is_fatal(self, session):
        """Test that the top-level job membership query propagates."""

        class MemberQueryFails(SqlAlchemyEntityStore):
            async def find_by_filter(self, model, *criteria, **kwargs):
                if model is JobMember:
                    raise QueryError("job_members", "timeout")
                return await super().find_by_filter(model, *criteria, **kwargs)

        with pytest.raises(QueryError):
            await UserReportAggregator(MemberQueryFails(session)).recompute(WORKER_ID)

    @pytest.mark.asyncio
    async def test_company_member_query_failure_is_fatal(self, session, test_job_members):
        """Test that the top-level company membership query propagates."""

        class CompanyQueryFails(SqlAlchemyEntityStore):
            async def find_by_filter(self, model, *criteria, **kwargs):
                if model is CompanyMember:
                    raise QueryError("company_members", "timeout")
                return await super().find_by_filter(model, *criteria, **kwargs)

        with pytest.raises(QueryError):
            await UserReportAggregator(CompanyQueryFails(session)).recompute(WORKER_ID)

    @pytest.mark.asyncio
    async def test_idempotent(self, session, store, test_job_members, test_members):
        """Test that recomputing twice yields the same row and values."""
        aggregator = UserReportAggregator(store)

        first = (await aggregator.recompute(WORKER_ID)).to_dict()
        second = (await aggregator.recompute(WORKER_ID)).to_dict()

        assert first == second
        assert await count_reports(session, WORKER_ID) == 1

    @pytest.mark.asyncio
    async def test_inactive_companies_not_counted(self, session, store, test_members):
        """Test that only active company memberships count."""
        report = await UserReportAggregator(store).recompute(OTHER_WORKER_ID)

        assert report.active_companies == 0


class TestRateIds:
    """Test reading a job's rate id list."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (None, []),
            ([], []),
            (["a", "b"], ["a", "b"]),
            (["a", 3, None, "", "b"], ["a", "b"]),
            ("a,b", []),
        ],
    )
    def test_rate_ids_of(self, raw, expected):
        assert rate_ids_of(Job(company_id="c", rate_ids=raw)) == expected
