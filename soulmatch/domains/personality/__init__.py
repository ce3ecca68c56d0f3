"""Personality 도메인 모듈

성격 시그니처(#HHMMSS)를 3차원 성격 벡터로 펼치고 거리를 계산합니다.

구조:
    - types.py: PersonalityVector, Archetype
    - signature.py: 인코딩/디코딩, 원형 거리, 호환도, 원형 분류, 시그니처 생성
    - schemas.py: Pydantic 스키마
    - router.py: API 엔드포인트
    - exceptions.py: 도메인 예외
"""

from soulmatch.domains.personality.exceptions import (
    InvalidSignatureException,
    PersonalityErrorCode,
)
from soulmatch.domains.personality.signature import (
    ARCHETYPES,
    MAX_DISTANCE,
    archetype_for,
    compatibility,
    compress,
    distance,
    expand,
    generate_signature,
)
from soulmatch.domains.personality.types import Archetype, PersonalityVector

__all__ = [
    "ARCHETYPES",
    "MAX_DISTANCE",
    "Archetype",
    "PersonalityVector",
    "InvalidSignatureException",
    "PersonalityErrorCode",
    "archetype_for",
    "compatibility",
    "compress",
    "distance",
    "expand",
    "generate_signature",
]
