"""Shared find-or-create and persistence steps for report aggregators."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Generic, TypeVar

from hirevo.errors import NotFoundError, QueryError
from hirevo.models import CompanyReport, UserReport
from hirevo.store import EntityStore, collection_name

logger = logging.getLogger(__name__)

R = TypeVar("R", CompanyReport, UserReport)

CENTS = Decimal("0.01")


def quantize(value: Decimal, precision: Decimal = CENTS) -> Decimal:
    """Round a decimal aggregate for storage.

    The working precision grows with the magnitude of ``value``, so very large
    aggregates round instead of raising ``InvalidOperation``. Whether the result
    fits its column is checked when the report is written.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - precision.as_tuple().exponent + 2)
        return value.quantize(precision, rounding=ROUND_HALF_UP)


class ReportAggregator(Generic[R]):
    """Base class for aggregators that rebuild one report row per key.

    Subclasses set ``report_model`` and implement ``recompute``.
    """

    report_model: type[R]

    def __init__(self, store: EntityStore, log: logging.Logger | None = None):
        self.store = store
        self.log = log or logger

    @property
    def natural_key(self) -> str:
        return self.report_model.__natural_key__

    def lock_key(self, key: str) -> str:
        return f"{collection_name(self.report_model)}:{key}"

    async def find_or_create(self, key: str) -> R:
        """Load the report for ``key`` or build a zero-valued one.

        Lookup failures on the report itself are never fatal; the lookup runs
        isolated so a failed statement leaves the transaction usable.
        """
        column = getattr(self.report_model, self.natural_key)
        try:
            async with self.store.isolated():
                return await self.store.find_first_by_filter(self.report_model, column == key)
        except NotFoundError:
            self.log.debug(
                "Creating %s for %s=%s",
                collection_name(self.report_model),
                self.natural_key,
                key,
            )
        except QueryError as exc:
            self.log.warning(
                "Lookup of %s for %s=%s failed, creating a new one: %s",
                collection_name(self.report_model),
                self.natural_key,
                key,
                exc,
            )
        return self.store.create(self.report_model, **{self.natural_key: key})

    async def persist(self, report: R) -> R:
        """Write the computed report, bypassing input validation."""
        return await self.store.upsert_no_validate(report)

    @staticmethod
    def require_key(name: str, key: str) -> None:
        if not key:
            raise ValueError(f"{name} must be a non-empty string")
