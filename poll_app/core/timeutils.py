from datetime import datetime, timedelta, timezone
from typing import Optional

# Smallest step the stored timestamps can resolve
TIMESTAMP_RESOLUTION = timedelta(microseconds=1)


def utc_now() -> datetime:
    """Current UTC wall-clock time as a naive datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def next_edit_timestamp(previous: Optional[datetime]) -> datetime:
    """
    Timestamp for a poll edit.

    Always strictly later than ``previous`` so that an edit is never hidden
    from the edit-after-vote check by clock resolution or a clock step back.
    """
    now = utc_now()
    if previous is not None and now <= previous:
        return previous + TIMESTAMP_RESOLUTION
    return now


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to a naive datetime loaded from the database."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
