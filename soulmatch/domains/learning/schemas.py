"""Learning 도메인 스키마 정의"""

from pydantic import BaseModel, Field

from soulmatch.domains.profiles.models import (
    InteractionSignal,
    PreferenceAttribute,
    Reaction,
    UserProfile,
)


class SignalCreate(BaseModel):
    """상호작용 신호 기록 요청"""

    candidate_id: str = Field(..., min_length=1, description="후보 사용자 ID")
    attribute: PreferenceAttribute = Field(..., description="선호 속성")
    reaction: Reaction = Field(..., description="positive/neutral/negative")


class SignalResult(BaseModel):
    """신호 반영 결과 (새 신호 + 갱신된 가중치)"""

    signal: InteractionSignal
    weights: dict[PreferenceAttribute, float]
    total_interactions: int

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "SignalResult":
        return cls(
            signal=profile.interaction_history[-1],
            weights=profile.weights.values,
            total_interactions=profile.total_interactions,
        )


class NextQuestionResponse(BaseModel):
    """다음 질문 응답"""

    attribute: PreferenceAttribute
    question: str
