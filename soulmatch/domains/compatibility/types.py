"""Compatibility 도메인 결과 타입"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

VETO_EXPLANATION = "Candidate violates mandatory requirements"


class ScoreBreakdown(BaseModel):
    """점수 구성 요소"""

    model_config = ConfigDict(frozen=True)

    personality_alignment: float
    factual_alignment: float = 0.0
    interest_overlap: float = 0.0
    components: dict[str, float] = Field(
        default_factory=dict, description="계산된 사실 항목별 점수"
    )
    skipped_components: list[str] = Field(
        default_factory=list, description="데이터 부족으로 건너뛴 항목"
    )
    veto_violation: bool = False
    veto_reason: Optional[str] = None


class CompatibilityScore(BaseModel):
    """한 번의 호환도 계산 결과 (불변)"""

    model_config = ConfigDict(frozen=True)

    seeker_id: str
    candidate_id: str
    hhc_score: float = Field(..., ge=0.0, le=1.0)
    factual_score: float = Field(..., ge=0.0, le=1.0)
    veto_factor: int = Field(..., ge=0, le=1)
    total_score: float = Field(..., ge=0.0, le=1.0)
    confidence: float = Field(..., ge=0.0, le=1.0)
    explanation: str
    breakdown: ScoreBreakdown

    @property
    def is_vetoed(self) -> bool:
        return self.veto_factor == 0
