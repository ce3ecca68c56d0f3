"""Recommendations 도메인 모듈

사용자별 추천 큐(채우기, 꺼내기, 좋아요/넘기기, 상태)와 대화 중 추천
노출 정책을 제공합니다.

구조:
    - models.py: 큐 상태 레코드와 상호작용 기록
    - collaborators.py: 후보 소스 / 매칭 판정자 인터페이스와 기본 구현
    - service.py: RecommendationQueueManager
    - trigger.py: 키워드 단계 기반 노출 정책
    - schemas.py, router.py: API 계층
"""

from soulmatch.domains.recommendations.collaborators import (
    FALLBACK_CANDIDATES,
    CandidateSource,
    InteractionMatchOracle,
    MatchOracle,
    ProfileCandidateSource,
    StaticCandidateSource,
)
from soulmatch.domains.recommendations.models import (
    InteractionAction,
    InteractionRecord,
    QueueEntry,
    UserQueueState,
)
from soulmatch.domains.recommendations.service import (
    RecommendationQueueManager,
    recommendation_text,
)
from soulmatch.domains.recommendations.trigger import (
    DEFAULT_TRIGGER_TIERS,
    RecommendationTriggerPolicy,
    TriggerTier,
)

__all__ = [
    "FALLBACK_CANDIDATES",
    "CandidateSource",
    "MatchOracle",
    "ProfileCandidateSource",
    "StaticCandidateSource",
    "InteractionMatchOracle",
    "InteractionAction",
    "InteractionRecord",
    "QueueEntry",
    "UserQueueState",
    "RecommendationQueueManager",
    "recommendation_text",
    "DEFAULT_TRIGGER_TIERS",
    "RecommendationTriggerPolicy",
    "TriggerTier",
]
