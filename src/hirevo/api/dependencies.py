"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hirevo.database import get_session
from hirevo.store import KeyedLock, SqlAlchemyEntityStore


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency (committed when the request succeeds)."""
    async with get_session() as session:
        yield session


def get_report_locks(request: Request) -> KeyedLock:
    """Per-key report locks shared by every request of the app."""
    return request.app.state.report_locks


DbSession = Annotated[AsyncSession, Depends(get_db_session)]
ReportLocks = Annotated[KeyedLock, Depends(get_report_locks)]


def get_store(db: DbSession, locks: ReportLocks) -> SqlAlchemyEntityStore:
    """Entity store bound to the request session."""
    return SqlAlchemyEntityStore(db, locks)


Store = Annotated[SqlAlchemyEntityStore, Depends(get_store)]
