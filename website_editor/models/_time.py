from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timestamp default for model columns. Python-side so ordering keeps sub-second precision."""
    return datetime.now(timezone.utc)
