"""Time utilities for the domain layer."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

# The bank books transactions and closes days in Czech local time.
BANK_TIMEZONE = ZoneInfo("Europe/Prague")


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def today_at_bank(now: datetime | None = None) -> date:
    """Return the calendar date in the bank's timezone.

    Between midnight in Prague and midnight UTC the two dates differ by one
    day. Naive ``now`` values are taken as UTC.
    """
    moment = now or utc_now()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(BANK_TIMEZONE).date()


def parse_bank_date(raw: str) -> date:
    """Parse the bank's ``YYYY-MM-DD+ZZZZ`` date string.

    Only the calendar date is kept; the offset suffix is discarded.
    Raises ValueError for anything that does not start with an ISO date.
    """
    if len(raw) < 10:
        msg = f"date value {raw!r} is too short"
        raise ValueError(msg)
    return date.fromisoformat(raw[:10])
