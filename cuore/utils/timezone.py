from datetime import datetime, timezone as dt_timezone


def utcnow_naive() -> datetime:
    """Current UTC time without tzinfo, the form stored in timestamp columns."""
    return datetime.now(dt_timezone.utc).replace(tzinfo=None)

