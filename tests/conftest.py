"""Pytest fixtures for hirevo tests."""

from __future__ import annotations

from decimal import Decimal
from typing import AsyncGenerator

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hirevo.models import (
    Base,
    Company,
    CompanyMember,
    Invoice,
    Job,
    JobMember,
    JobRate,
)
from hirevo.store import KeyedLock, SqlAlchemyEntityStore

# In-memory SQLite shared by every connection of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

OWNER_ID = "user_owner"
WORKER_ID = "user_worker"
OTHER_WORKER_ID = "user_other"


@pytest_asyncio.fixture
async def engine():
    """Create test database engine with a fresh schema."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def store(session: AsyncSession) -> SqlAlchemyEntityStore:
    """Entity store over the test session."""
    return SqlAlchemyEntityStore(session, KeyedLock())


@pytest_asyncio.fixture
async def test_company(session: AsyncSession) -> Company:
    """Create a test company."""
    company = Company(company_id="company_c", name="Acme Staffing", created_by=OWNER_ID)
    session.add(company)
    await session.flush()
    return company


@pytest_asyncio.fixture
async def test_jobs(session: AsyncSession, test_company: Company) -> list[Job]:
    """Three jobs: one hiring, two completed."""
    jobs = [
        Job(job_id="job_hiring", company_id=test_company.company_id, title="Barista", status="HIRING"),
        Job(job_id="job_done_1", company_id=test_company.company_id, title="Waiter", status="COMPLETED"),
        Job(job_id="job_done_2", company_id=test_company.company_id, title="Chef", status="COMPLETED"),
    ]
    session.add_all(jobs)
    await session.flush()
    return jobs


@pytest_asyncio.fixture
async def test_members(session: AsyncSession, test_company: Company) -> list[CompanyMember]:
    """Two active members and one inactive member."""
    members = [
        CompanyMember(company_id=test_company.company_id, user_id=OWNER_ID, role="OWNER", status="ACTIVE"),
        CompanyMember(company_id=test_company.company_id, user_id=WORKER_ID, role="WORKER", status="ACTIVE"),
        CompanyMember(
            company_id=test_company.company_id, user_id=OTHER_WORKER_ID, role="WORKER", status="INACTIVE"
        ),
    ]
    session.add_all(members)
    await session.flush()
    return members


@pytest_asyncio.fixture
async def test_invoices(session: AsyncSession, test_company: Company) -> list[Invoice]:
    """One paid invoice with Total=100 and one pending invoice."""
    invoices = [
        Invoice(
            company_id=test_company.company_id,
            user_id=WORKER_ID,
            status="PAID",
            invoice_metadata={"Title": "Invoice 1", "Total": 100},
        ),
        Invoice(
            company_id=test_company.company_id,
            user_id=WORKER_ID,
            status="PENDING",
            invoice_metadata={"Title": "Invoice 2", "Total": 40.5},
        ),
    ]
    session.add_all(invoices)
    await session.flush()
    return invoices


@pytest_asyncio.fixture
async def test_rates(session: AsyncSession, test_jobs: list[Job]) -> list[JobRate]:
    """Two rate intervals on the hiring job: 2h at 25.00 and 1.5h at 30.00."""
    job = test_jobs[0]
    rates = [
        JobRate(
            job_rate_id="rate_morning",
            job_id=job.job_id,
            start_time="2024-03-01T08:00:00Z",
            end_time="2024-03-01T10:00:00Z",
            rate_value=Decimal("25.00"),
        ),
        JobRate(
            job_rate_id="rate_evening",
            job_id=job.job_id,
            start_time="2024-03-01T18:00:00+02:00",
            end_time="2024-03-01T19:30:00+02:00",
            rate_value=Decimal("30.00"),
        ),
    ]
    session.add_all(rates)
    job.rate_ids = [rate.job_rate_id for rate in rates]
    await session.flush()
    return rates


@pytest_asyncio.fixture
async def test_job_members(
    session: AsyncSession, test_jobs: list[Job], test_rates: list[JobRate]
) -> list[JobMember]:
    """Worker hired on the rated job, applied to another, rejected from a third."""
    members = [
        JobMember(job_id=test_jobs[0].job_id, user_id=WORKER_ID, status="HIRED"),
        JobMember(job_id=test_jobs[1].job_id, user_id=WORKER_ID, status="APPLIED"),
        JobMember(job_id=test_jobs[2].job_id, user_id=WORKER_ID, status="REJECTED"),
    ]
    session.add_all(members)
    await session.flush()
    return members
