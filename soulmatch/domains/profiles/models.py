"""Profiles 도메인 모델 정의

사실 프로필, 파트너 선호, 거부(veto) 조건, 동적 선호 가중치, 상호작용
신호를 정의합니다. 모두 불변(frozen) Pydantic 모델이며, 변경은
model_copy(update=...)로 새 스냅샷을 만들어 반영합니다.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from soulmatch.core.utils.datetime import now_utc
from soulmatch.domains.personality.signature import expand, is_valid_signature
from soulmatch.domains.personality.types import PersonalityVector


class PreferenceAttribute(str, Enum):
    """학습 가능한 선호 속성 (닫힌 집합 + custom 확장 슬롯)"""

    AGE = "age"
    HEIGHT = "height"
    GENDER_IDENTITY = "gender_identity"
    RELATIONSHIP_GOAL = "relationship_goal"
    FAMILY_PLANS = "family_plans"
    LIFESTYLE = "lifestyle"
    EXERCISE_HABITS = "exercise_habits"
    SMOKING_HABITS = "smoking_habits"
    DRINKING_HABITS = "drinking_habits"
    DIETARY_PREFERENCES = "dietary_preferences"
    INTERESTS = "interests"
    COMMUNICATION_STYLE = "communication_style"
    LOVE_LANGUAGE = "love_language"
    EDUCATION_LEVEL = "education_level"
    VALUES = "values"
    RELIGION = "religion"
    POLITICAL_VIEWS = "political_views"
    SOCIAL_ENERGY = "social_energy"
    CULTURAL_BACKGROUND = "cultural_background"
    CUSTOM = "custom"


class Reaction(str, Enum):
    """상호작용 신호에 대한 사용자 반응"""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


# 정규화 전 기본 가중치 (합이 1이 아니므로 생성 시 정규화)
DEFAULT_PREFERENCE_WEIGHTS: dict[PreferenceAttribute, float] = {
    PreferenceAttribute.AGE: 0.15,
    PreferenceAttribute.HEIGHT: 0.05,
    PreferenceAttribute.GENDER_IDENTITY: 0.05,
    PreferenceAttribute.RELATIONSHIP_GOAL: 0.25,
    PreferenceAttribute.FAMILY_PLANS: 0.20,
    PreferenceAttribute.LIFESTYLE: 0.10,
    PreferenceAttribute.EXERCISE_HABITS: 0.03,
    PreferenceAttribute.SMOKING_HABITS: 0.02,
    PreferenceAttribute.DRINKING_HABITS: 0.02,
    PreferenceAttribute.DIETARY_PREFERENCES: 0.02,
    PreferenceAttribute.INTERESTS: 0.15,
    PreferenceAttribute.COMMUNICATION_STYLE: 0.05,
    PreferenceAttribute.LOVE_LANGUAGE: 0.03,
    PreferenceAttribute.EDUCATION_LEVEL: 0.02,
    PreferenceAttribute.VALUES: 0.05,
    PreferenceAttribute.RELIGION: 0.02,
    PreferenceAttribute.POLITICAL_VIEWS: 0.02,
    PreferenceAttribute.SOCIAL_ENERGY: 0.03,
    PreferenceAttribute.CULTURAL_BACKGROUND: 0.02,
    PreferenceAttribute.CUSTOM: 0.0,
}

WEIGHT_SUM_TOLERANCE = 1e-6


class PreferenceWeights(BaseModel):
    """동적 선호 가중치

    모든 PreferenceAttribute에 대해 0 이상의 가중치를 가지며,
    normalized()/adjusted()가 반환하는 값은 항상 합이 1입니다.
    """

    model_config = ConfigDict(frozen=True)

    values: dict[PreferenceAttribute, float]
    custom_label: Optional[str] = None

    @field_validator("values")
    @classmethod
    def fill_missing_attributes(
        cls, v: dict[PreferenceAttribute, float]
    ) -> dict[PreferenceAttribute, float]:
        if any(weight < 0 for weight in v.values()):
            raise ValueError("preference weights must be non-negative")
        return {attr: float(v.get(attr, 0.0)) for attr in PreferenceAttribute}

    @classmethod
    def default(cls) -> "PreferenceWeights":
        return cls(values=DEFAULT_PREFERENCE_WEIGHTS).normalized()

    def get(self, attribute: PreferenceAttribute) -> float:
        return self.values.get(attribute, 0.0)

    def total(self) -> float:
        return sum(self.values.values())

    def is_normalized(self) -> bool:
        return abs(self.total() - 1.0) <= WEIGHT_SUM_TOLERANCE

    def normalized(self) -> "PreferenceWeights":
        """전체 벡터를 비례 축소/확대해 합을 1로 맞춘 사본

        합이 0이면 custom을 제외한 속성에 균등 분배합니다.
        """
        total = self.total()
        if total <= 0:
            known = [
                a
                for a in PreferenceAttribute
                if a is not PreferenceAttribute.CUSTOM
            ]
            values = {
                a: (1.0 / len(known) if a in known else 0.0)
                for a in PreferenceAttribute
            }
        else:
            values = {a: w / total for a, w in self.values.items()}
        return self.model_copy(update={"values": values})

    def adjusted(
        self, attribute: PreferenceAttribute, delta: float
    ) -> "PreferenceWeights":
        """한 속성에 delta를 더해 [0, 1]로 자른 뒤 전체를 재정규화한 사본"""
        values = dict(self.values)
        values[attribute] = min(1.0, max(0.0, values[attribute] + delta))
        return self.model_copy(update={"values": values}).normalized()

    def top_attribute(self) -> PreferenceAttribute:
        """가장 높은 가중치의 속성 (동률이면 열거 순서상 앞선 것)"""
        return max(PreferenceAttribute, key=lambda a: self.values[a])


class ValueRange(BaseModel):
    """선호 범위 (양 끝 포함)"""

    model_config = ConfigDict(frozen=True)

    min: float
    max: float

    @model_validator(mode="after")
    def check_bounds(self) -> "ValueRange":
        if self.min > self.max:
            raise ValueError("range min must not exceed max")
        return self

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    @property
    def center(self) -> float:
        return (self.min + self.max) / 2


class FactualProfile(BaseModel):
    """사용자가 직접 입력한 사실 정보 (모든 항목 선택)"""

    model_config = ConfigDict(frozen=True)

    age: Optional[int] = Field(default=None, ge=0, le=150)
    height_cm: Optional[float] = Field(default=None, gt=0)
    gender_identity: Optional[str] = None
    relationship_goal: Optional[str] = None
    family_plans: Optional[str] = None
    education_level: Optional[str] = None
    profession: Optional[str] = None
    exercise_habits: Optional[str] = None
    smoking_habits: Optional[str] = None
    drinking_habits: Optional[str] = None
    dietary_preferences: Optional[str] = None
    sleeping_habits: Optional[str] = None
    interests: Optional[list[str]] = None
    communication_style: Optional[str] = None
    love_language: Optional[str] = None
    values: Optional[list[str]] = None
    religion: Optional[str] = None
    political_views: Optional[str] = None
    social_energy: Optional[str] = None
    cultural_background: Optional[str] = None
    languages_spoken: Optional[list[str]] = None

    def completeness(self) -> float:
        """채워진 항목 수 / 전체 항목 수"""
        fields = type(self).model_fields
        filled = sum(
            1 for name in fields if getattr(self, name) not in (None, "", [])
        )
        return filled / len(fields)


class VetoCriteria(BaseModel):
    """가중치와 무관한 필수 조건 (하나라도 어기면 후보 제외)"""

    model_config = ConfigDict(frozen=True)

    non_smoker_only: bool = False
    must_want_children: bool = False
    must_not_have_children: bool = False
    minimum_age: Optional[int] = None
    maximum_age: Optional[int] = None
    deal_breaker_interests: list[str] = Field(default_factory=list)
    required_interests: list[str] = Field(default_factory=list)


class PartnerPreferences(BaseModel):
    """사용자가 찾는 상대에 대한 선호"""

    model_config = ConfigDict(frozen=True)

    desired_age_range: Optional[ValueRange] = None
    interested_in_genders: Optional[list[str]] = None
    desired_partner_height: Optional[ValueRange] = None
    relationship_goal: Optional[list[str]] = None
    family_plans: Optional[list[str]] = None
    interest_preference_weights: Optional[dict[str, float]] = None
    veto_criteria: VetoCriteria = Field(default_factory=VetoCriteria)

    @field_validator("relationship_goal", "family_plans", mode="before")
    @classmethod
    def wrap_single_value(cls, v):
        if isinstance(v, str):
            return [v]
        return v


class InteractionSignal(BaseModel):
    """학습 이벤트 한 건 (생성 후 변경하지 않음)"""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=now_utc)
    candidate_id: str
    question: str
    attribute: PreferenceAttribute
    reaction: Reaction
    attraction_force: float
    repulsion_force: float
    confidence: float


class UserProfile(BaseModel):
    """사용자 프로필 스냅샷

    성격 시그니처, 사실 프로필, 파트너 선호, 학습된 가중치와 학습 이력을
    하나의 불변 문서로 묶습니다. 저장소에는 model_dump(mode="json")으로
    저장됩니다.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., min_length=1)
    display_name: Optional[str] = None
    signature: str
    factual: FactualProfile = Field(default_factory=FactualProfile)
    preferences: PartnerPreferences = Field(default_factory=PartnerPreferences)
    weights: PreferenceWeights = Field(default_factory=PreferenceWeights.default)
    interaction_history: list[InteractionSignal] = Field(default_factory=list)
    attribute_questions: dict[PreferenceAttribute, int] = Field(
        default_factory=dict
    )
    total_interactions: int = 0
    created_at: datetime = Field(default_factory=now_utc)
    updated_at: Optional[datetime] = None

    @field_validator("signature")
    @classmethod
    def canonical_signature(cls, v: str) -> str:
        if not is_valid_signature(v):
            raise ValueError("signature must match #HHMMSS")
        return v.upper()

    @property
    def completeness(self) -> float:
        return self.factual.completeness()

    @property
    def vector(self) -> PersonalityVector:
        return expand(self.signature)

    @property
    def name(self) -> str:
        return self.display_name or self.user_id

    def explored_count(self, attribute: PreferenceAttribute) -> int:
        return self.attribute_questions.get(attribute, 0)
