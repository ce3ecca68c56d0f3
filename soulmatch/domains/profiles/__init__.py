"""Profiles 도메인 모듈

사용자 프로필(성격 시그니처 + 사실 정보 + 파트너 선호 + 학습 가중치)을
관리합니다.

구조:
    - models.py: Pydantic 도메인 모델 (UserProfile, PreferenceWeights, ...)
    - schemas.py: 요청/응답 스키마
    - repository.py: 캐시 + 키/값 저장소 접근 계층
    - service.py: 비즈니스 로직 (생성, 조회)
    - router.py: API 엔드포인트
    - exceptions.py: 도메인 예외
"""

from soulmatch.domains.profiles.exceptions import (
    ProfileAlreadyExistsException,
    ProfileErrorCode,
    ProfileNotFoundException,
)
from soulmatch.domains.profiles.models import (
    DEFAULT_PREFERENCE_WEIGHTS,
    FactualProfile,
    InteractionSignal,
    PartnerPreferences,
    PreferenceAttribute,
    PreferenceWeights,
    Reaction,
    UserProfile,
    ValueRange,
    VetoCriteria,
)
from soulmatch.domains.profiles.repository import ProfileRepository
from soulmatch.domains.profiles.service import ProfileService

__all__ = [
    "DEFAULT_PREFERENCE_WEIGHTS",
    "FactualProfile",
    "InteractionSignal",
    "PartnerPreferences",
    "PreferenceAttribute",
    "PreferenceWeights",
    "Reaction",
    "UserProfile",
    "ValueRange",
    "VetoCriteria",
    "ProfileRepository",
    "ProfileService",
    "ProfileErrorCode",
    "ProfileNotFoundException",
    "ProfileAlreadyExistsException",
]
