"""Recommendations 도메인 스키마 정의"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from soulmatch.domains.recommendations.models import (
    CONTEXT_MAX_LENGTH,
    InteractionRecord,
    QueueEntry,
)


class PopulateResult(BaseModel):
    """큐 채우기 결과"""

    queue_size: int
    degraded: bool = Field(
        default=False, description="대체 후보 풀을 사용했는지 여부"
    )


class DequeueResult(BaseModel):
    """다음 추천 꺼내기 결과"""

    has_more: bool
    remaining_count: int
    recommendation: Optional[QueueEntry] = None
    message: str
    degraded: bool = False


class LikeResult(BaseModel):
    """좋아요 결과"""

    is_match: bool
    is_pending: bool
    changed_mind: bool
    message: str
    degraded: bool = Field(
        default=False, description="매칭 판정 불가로 미매칭으로 가정했는지 여부"
    )


class PassResult(BaseModel):
    """넘기기 결과"""

    changed_mind: bool
    message: str


class QueueStatus(BaseModel):
    """큐 상태 (읽기 전용 스냅샷)"""

    queue_size: int
    total_served: int
    has_recommendations: bool
    last_updated: Optional[datetime] = None
    is_populating: bool = False


class ServedRecommendation(BaseModel):
    """제공된 후보와 그 후보에 대한 결정"""

    candidate_id: str
    served_at: datetime
    interaction: Optional[InteractionRecord] = None


class MatchSummary(BaseModel):
    """좋아요를 누른 후보와 상호 매칭 여부"""

    candidate_id: str
    liked_at: datetime
    changed_mind: bool
    is_mutual: bool


class InteractionRequest(BaseModel):
    """좋아요/넘기기 요청 본문"""

    context: Optional[str] = Field(
        default=None, description=f"대화 맥락 (앞 {CONTEXT_MAX_LENGTH}자만 저장)"
    )


class ConversationTurn(BaseModel):
    """최근 대화 턴"""

    type: str = Field(..., description="message, recommendation_card 등")
    text: Optional[str] = None


class TriggerRequest(BaseModel):
    """추천 노출 판단 요청"""

    message: str
    recent_history: list[ConversationTurn] = Field(default_factory=list)


class TriggerResponse(BaseModel):
    """추천 노출 판단 결과"""

    should_trigger: bool
    bridge_message: Optional[str] = None
