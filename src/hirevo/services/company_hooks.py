"""Hooks on the companies collection."""

from __future__ import annotations

import logging

from hirevo.events import RecordEvent
from hirevo.models import CompanyMember, CompanyMemberRole, CompanyMemberStatus
from hirevo.services.hooks import HookRegistry
from hirevo.services.record_service import RecordService

logger = logging.getLogger(__name__)


def register_company_hooks(hooks: HookRegistry, log: logging.Logger | None = None) -> None:
    """Make the creator of a new company its active owner."""
    log = log or logger

    async def create_owner_membership(event: RecordEvent) -> None:
        user_id = event.get("created_by")
        company_id = event.get("company_id")
        if not user_id or not company_id:
            log.warning(
                "Missing user or company id after company creation",
                extra={"user_id": user_id, "company_id": company_id},
            )
            return

        member = CompanyMember(
            company_id=company_id,
            user_id=user_id,
            role=CompanyMemberRole.OWNER.value,
            status=CompanyMemberStatus.ACTIVE.value,
        )
        # Goes through the record service so company_members hooks fire too
        await RecordService(event.store, hooks).create(member)
        log.info(
            "Company member created as owner",
            extra={"user_id": user_id, "company_id": company_id},
        )

    hooks.on_after_create_success("companies", create_owner_membership)
