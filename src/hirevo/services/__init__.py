"""Record services and mutation hooks."""

from __future__ import annotations

import logging

from hirevo.reports.triggers import ReportTriggers
from hirevo.services.company_hooks import register_company_hooks
from hirevo.services.hooks import HookRegistry
from hirevo.services.record_service import RecordService


def build_hooks(log: logging.Logger | None = None) -> HookRegistry:
    """Hook registry with company and report hooks wired in."""
    hooks = HookRegistry()
    register_company_hooks(hooks, log)
    ReportTriggers(log).register(hooks)
    return hooks


__all__ = [
    "HookRegistry",
    "RecordService",
    "ReportTriggers",
    "build_hooks",
    "register_company_hooks",
]
