from datetime import datetime, timezone


def as_utc(value: datetime) -> datetime:
    # Mongo hands datetimes back naive; they are always UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
