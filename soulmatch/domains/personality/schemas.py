"""Personality 도메인 스키마 정의"""

from pydantic import BaseModel, Field

from soulmatch.domains.personality.signature import (
    archetype_for,
    expand,
    normalize_signature,
)


class SignatureRequest(BaseModel):
    """시그니처 해석 요청 스키마"""

    signature: str = Field(..., description="#HHMMSS 형식 시그니처")


class CompareRequest(BaseModel):
    """시그니처 비교 요청 스키마"""

    signature_a: str = Field(..., description="첫 번째 시그니처")
    signature_b: str = Field(..., description="두 번째 시그니처")


class GenerateRequest(BaseModel):
    """평가 결과 기반 시그니처 생성 요청 스키마"""

    anchor_weights: dict[str, float] = Field(
        default_factory=dict, description="원형 이름 → 가중치"
    )
    manifested_params: dict[str, float] = Field(
        default_factory=dict, description="드러난 자아 파라미터 (0~100)"
    )
    soul_params: dict[str, float] = Field(
        default_factory=dict, description="내면 깊이 파라미터 (0~100)"
    )


class ArchetypeResponse(BaseModel):
    """원형 응답 스키마"""

    angle: int
    name: str
    title: str
    description: str


class SignatureResponse(BaseModel):
    """시그니처 해석 응답 스키마"""

    signature: str
    hue: float
    manifested: int
    soul: int
    archetype: ArchetypeResponse

    @classmethod
    def from_signature(cls, signature: str) -> "SignatureResponse":
        vector = expand(signature)
        archetype = archetype_for(vector)
        return cls(
            signature=normalize_signature(signature),
            hue=vector.hue,
            manifested=vector.manifested,
            soul=vector.soul,
            archetype=ArchetypeResponse(
                angle=archetype.angle,
                name=archetype.name,
                title=archetype.title,
                description=archetype.description,
            ),
        )


class CompareResponse(BaseModel):
    """시그니처 비교 응답 스키마"""

    distance: float = Field(..., description="정규화 공간의 거리 (0~√3)")
    compatibility: float = Field(..., description="성격 호환도 (0~1)")
