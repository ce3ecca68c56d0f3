"""Profiles 도메인 서비스

온보딩 시 프로필 생성과 조회를 담당하는 비즈니스 로직 계층입니다.
"""

from typing import Optional

from soulmatch.core.concurrency import UserLockRegistry
from soulmatch.core.context import get_request_id
from soulmatch.core.logging import get_logger
from soulmatch.core.utils.datetime import now_utc
from soulmatch.domains.personality.signature import normalize_signature
from soulmatch.domains.profiles.exceptions import (
    ProfileAlreadyExistsException,
    ProfileNotFoundException,
)
from soulmatch.domains.profiles.models import (
    FactualProfile,
    PartnerPreferences,
    PreferenceWeights,
    UserProfile,
)
from soulmatch.domains.profiles.repository import ProfileRepository

logger = get_logger(__name__)


class ProfileService:
    """프로필 서비스"""

    def __init__(
        self, repository: ProfileRepository, locks: UserLockRegistry
    ):
        self.repository = repository
        self.locks = locks

    async def create_profile(
        self,
        user_id: str,
        signature: str,
        factual: Optional[FactualProfile] = None,
        preferences: Optional[PartnerPreferences] = None,
        display_name: Optional[str] = None,
    ) -> UserProfile:
        """프로필 생성

        가중치는 기본값을 정규화해 초기화합니다.

        Args:
            user_id: 사용자 ID
            signature: #HHMMSS 성격 시그니처
            factual: 사실 프로필
            preferences: 파트너 선호
            display_name: 표시 이름

        Returns:
            생성된 프로필

        Raises:
            InvalidSignatureException: 시그니처 형식이 잘못된 경우
            ProfileAlreadyExistsException: 이미 프로필이 있는 경우
        """
        canonical = normalize_signature(signature)

        async with self.locks.lock_for(user_id):
            if await self.repository.get_by_id(user_id) is not None:
                raise ProfileAlreadyExistsException(user_id=user_id)

            profile = UserProfile(
                user_id=user_id,
                display_name=display_name,
                signature=canonical,
                factual=factual or FactualProfile(),
                preferences=preferences or PartnerPreferences(),
                weights=PreferenceWeights.default(),
            )
            self.repository.save(profile)

        logger.info(
            "Profile created",
            extra={
                "request_id": get_request_id(),
                "user_id": user_id,
                "completeness": round(profile.completeness, 3),
            },
        )
        return profile

    async def get_profile(self, user_id: str) -> UserProfile:
        """프로필 조회

        Raises:
            ProfileNotFoundException: 프로필을 찾을 수 없는 경우
        """
        profile = await self.repository.get_by_id(user_id)
        if profile is None:
            raise ProfileNotFoundException(user_id=user_id)
        return profile

    def list_profiles(
        self, exclude_user_id: Optional[str] = None, limit: int = 50
    ) -> list[UserProfile]:
        """알려진 프로필 목록"""
        return self.repository.list_profiles(
            exclude_user_id=exclude_user_id, limit=limit
        )

    def save_profile(self, profile: UserProfile) -> UserProfile:
        """변경된 프로필 스냅샷 저장 (호출자가 사용자 락을 보유해야 함)"""
        updated = profile.model_copy(update={"updated_at": now_utc()})
        return self.repository.save(updated)
