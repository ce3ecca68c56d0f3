"""Learning 도메인 모듈

상호작용 신호(인력/척력)로 사용자별 선호 가중치를 온라인 학습합니다.
"""

from soulmatch.domains.learning.exceptions import (
    InvalidAttributeException,
    InvalidReactionException,
    LearningErrorCode,
)
from soulmatch.domains.learning.service import (
    ATTRACTION_FORCES,
    REPULSION_FORCES,
    LearningService,
    generate_question,
)

__all__ = [
    "ATTRACTION_FORCES",
    "REPULSION_FORCES",
    "LearningService",
    "generate_question",
    "LearningErrorCode",
    "InvalidAttributeException",
    "InvalidReactionException",
]
