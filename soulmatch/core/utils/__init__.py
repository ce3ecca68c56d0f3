"""유틸리티 모듈"""

from soulmatch.core.utils.datetime import UTC, format_iso, now_utc, parse_iso
from soulmatch.core.utils.time import measure_time

__all__ = [
    # datetime
    "UTC",
    "now_utc",
    "format_iso",
    "parse_iso",
    # time measurement
    "measure_time",
]
