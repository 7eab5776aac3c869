"""날짜/시간 헬퍼.

Date and time helpers. Every timestamp is handled as timezone-aware UTC;
values read back from databases that drop the offset (SQLite) are treated
as UTC.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """현재 UTC 시각 — Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """naive datetime을 UTC로 간주하여 aware 값으로 변환합니다.

    Return ``value`` as an aware UTC datetime; naive values are assumed UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
