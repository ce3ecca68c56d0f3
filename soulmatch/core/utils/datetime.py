"""날짜/시간 유틸리티"""

from datetime import datetime, timezone
from typing import Optional

UTC = timezone.utc


def now_utc() -> datetime:
    """현재 UTC 시간 반환"""
    return datetime.now(UTC)


def format_iso(dt: datetime) -> str:
    """ISO 8601 형식으로 포맷 (naive datetime은 UTC로 간주)"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.isoformat()


def parse_iso(date_str: Optional[str]) -> Optional[datetime]:
    """ISO 8601 형식 문자열 파싱 (실패 시 None)"""
    if not date_str:
        return None
    try:
        parsed = datetime.fromisoformat(date_str)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
