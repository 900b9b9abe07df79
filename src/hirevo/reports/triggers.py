"""Dispatch record mutations to the report aggregators.

| collection      | recomputed report(s)      |
|-----------------|---------------------------|
| jobs            | company (company_id)      |
| invoices        | company (company_id)      |
| job_members     | user (user_id)            |
| company_members | company and user          |
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Union

from hirevo.events import RecordEvent
from hirevo.models import CompanyReport, UserReport
from hirevo.reports.company_report import CompanyReportAggregator
from hirevo.reports.user_report import UserReportAggregator

if TYPE_CHECKING:
    from hirevo.services.hooks import HookRegistry

logger = logging.getLogger(__name__)

Report = Union[CompanyReport, UserReport]

COMPANY_REPORT_SOURCES = frozenset({"jobs", "invoices", "company_members"})
USER_REPORT_SOURCES = frozenset({"job_members", "company_members"})
WATCHED_COLLECTIONS = tuple(sorted(COMPANY_REPORT_SOURCES | USER_REPORT_SOURCES))


class ReportTriggers:
    """Recomputes the reports affected by a record mutation.

    Aggregators run synchronously in the caller's task and their errors
    propagate unchanged.
    """

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def register(self, hooks: HookRegistry) -> None:
        """Bind dispatch to create and update hooks of every source collection."""
        for collection in WATCHED_COLLECTIONS:
            hooks.on_after_create_success(collection, self.dispatch)
            hooks.on_after_update_success(collection, self.dispatch)

    async def dispatch(self, event: RecordEvent) -> list[Report]:
        """Recompute every report the mutated record feeds."""
        reports: list[Report] = []

        if event.collection in COMPANY_REPORT_SOURCES:
            company_id = self._foreign_key(event, "company_id")
            if company_id:
                aggregator = CompanyReportAggregator(event.store, self.log)
                reports.append(await aggregator.recompute(company_id))

        if event.collection in USER_REPORT_SOURCES:
            user_id = self._foreign_key(event, "user_id")
            if user_id:
                aggregator = UserReportAggregator(event.store, self.log)
                reports.append(await aggregator.recompute(user_id))

        return reports

    def _foreign_key(self, event: RecordEvent, field: str) -> str | None:
        value = event.get(field)
        if isinstance(value, str) and value:
            return value
        self.log.warning(
            "Skipping report recomputation: %s record has no %s",
            event.collection,
            field,
        )
        return None
