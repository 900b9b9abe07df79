"""Hours and earnings for a job rate interval."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from hirevo.errors import RateParseError

if TYPE_CHECKING:
    from hirevo.models import JobRate

SECONDS_PER_HOUR = Decimal("3600")
ZERO = Decimal("0")


@dataclass(frozen=True)
class RateEarnings:
    """Worked hours and earnings contributed by one rate interval."""

    hours: Decimal = ZERO
    earnings: Decimal = ZERO

    def __add__(self, other: RateEarnings) -> RateEarnings:
        return RateEarnings(
            hours=self.hours + other.hours,
            earnings=self.earnings + other.earnings,
        )


def parse_instant(value: str | datetime | None, field: str) -> datetime:
    """Parse a stored instant.

    Accepts timezone-aware datetimes and RFC 3339 / ISO 8601 text, with
    either a ``Z`` suffix or a numeric UTC offset.

    Raises:
        RateParseError: If the value is missing, malformed, or has no offset
    """
    if isinstance(value, datetime):
        instant = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text[-1] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        try:
            instant = datetime.fromisoformat(text)
        except ValueError as exc:
            raise RateParseError(field, value, str(exc)) from exc
    else:
        raise RateParseError(field, value, "missing instant")

    if instant.tzinfo is None or instant.utcoffset() is None:
        raise RateParseError(field, value, "instant has no UTC offset")
    return instant


def calculate_earnings(
    start: str | datetime | None,
    end: str | datetime | None,
    rate_value: Decimal | int | float | None,
) -> RateEarnings:
    """Compute worked hours and earnings for one rate interval.

    hours = (end - start) in fractional hours, earnings = hours * rate.
    An interval that ends before it starts contributes nothing. A missing
    rate value counts as zero.

    Raises:
        RateParseError: If either instant cannot be parsed
    """
    start_at = parse_instant(start, "start_time")
    end_at = parse_instant(end, "end_time")

    if end_at <= start_at:
        return RateEarnings()

    delta = end_at - start_at
    seconds = Decimal(delta.days * 86400 + delta.seconds) + Decimal(delta.microseconds) / Decimal(
        1_000_000
    )
    hours = seconds / SECONDS_PER_HOUR
    rate = Decimal(str(rate_value)) if rate_value is not None else ZERO
    return RateEarnings(hours=hours, earnings=hours * rate)


def calculate_rate_earnings(rate: JobRate) -> RateEarnings:
    """Compute earnings for a stored job rate row."""
    return calculate_earnings(rate.start_time, rate.end_time, rate.rate_value)
