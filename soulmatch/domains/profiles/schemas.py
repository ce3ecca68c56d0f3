"""Profiles 도메인 스키마 정의"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from soulmatch.domains.personality.signature import archetype_for
from soulmatch.domains.profiles.models import (
    FactualProfile,
    PartnerPreferences,
    PreferenceAttribute,
    UserProfile,
)


class ProfileCreate(BaseModel):
    """프로필 생성 요청 스키마"""

    user_id: str = Field(
        ..., min_length=1, max_length=128, description="사용자 ID"
    )
    signature: str = Field(..., description="#HHMMSS 성격 시그니처")
    display_name: Optional[str] = Field(default=None, max_length=100)
    factual: FactualProfile = Field(default_factory=FactualProfile)
    preferences: PartnerPreferences = Field(default_factory=PartnerPreferences)


class ProfileResponse(BaseModel):
    """프로필 응답 스키마"""

    user_id: str
    display_name: Optional[str] = None
    signature: str
    archetype: str
    completeness: float
    factual: FactualProfile
    preferences: PartnerPreferences
    total_interactions: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "ProfileResponse":
        return cls(
            user_id=profile.user_id,
            display_name=profile.display_name,
            signature=profile.signature,
            archetype=archetype_for(profile.vector).name,
            completeness=profile.completeness,
            factual=profile.factual,
            preferences=profile.preferences,
            total_interactions=profile.total_interactions,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class WeightsResponse(BaseModel):
    """선호 가중치 응답 스키마"""

    user_id: str
    weights: dict[PreferenceAttribute, float]
    custom_label: Optional[str] = None
    total: float = Field(..., description="가중치 합 (항상 1)")
    explored: dict[PreferenceAttribute, int] = Field(
        default_factory=dict, description="속성별 질문 횟수"
    )

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "WeightsResponse":
        return cls(
            user_id=profile.user_id,
            weights=profile.weights.values,
            custom_label=profile.weights.custom_label,
            total=profile.weights.total(),
            explored=profile.attribute_questions,
        )
