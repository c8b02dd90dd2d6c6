from datetime import datetime, timezone


def utcnow_naive():
    """Return current UTC timestamp as naive datetime for DB timestamp columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
