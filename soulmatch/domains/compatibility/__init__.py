"""Compatibility 도메인 모듈

성격 시그니처 호환도, 필수 조건(veto), 가중 사실 점수를 결합한
하이브리드 호환도를 계산합니다.
"""

from soulmatch.domains.compatibility.scorer import (
    CompatibilityScorer,
    age_compatibility,
    explanation_for,
    find_veto_violation,
    height_compatibility,
    interest_overlap,
)
from soulmatch.domains.compatibility.service import CompatibilityService
from soulmatch.domains.compatibility.types import (
    CompatibilityScore,
    ScoreBreakdown,
)

__all__ = [
    "CompatibilityScorer",
    "CompatibilityService",
    "CompatibilityScore",
    "ScoreBreakdown",
    "age_compatibility",
    "height_compatibility",
    "interest_overlap",
    "find_veto_violation",
    "explanation_for",
]
