"""Profiles 도메인 리포지토리

메모리 캐시가 권위 있는 상태이고, 저장소는 재시작 시 복원용입니다.
쓰기는 PersistenceWriter를 통해 백그라운드로 반영됩니다.
"""

from typing import Optional

from pydantic import ValidationError

from soulmatch.core.exceptions import PersistenceException
from soulmatch.core.logging import get_logger
from soulmatch.core.persistence import PersistenceWriter
from soulmatch.core.store import KeyValueStore, make_key
from soulmatch.domains.profiles.models import UserProfile

logger = get_logger(__name__)

PROFILE_COLLECTION = "profile"


class ProfileRepository:
    """프로필 리포지토리"""

    def __init__(self, store: KeyValueStore, writer: PersistenceWriter):
        self.store = store
        self.writer = writer
        self._profiles: dict[str, UserProfile] = {}

    async def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        """ID로 프로필 조회

        캐시에 없으면 저장소에서 읽어 캐시에 올립니다. 저장소 읽기 실패나
        손상된 문서는 로그를 남기고 없는 것으로 취급합니다.

        Args:
            user_id: 사용자 ID

        Returns:
            프로필 또는 None
        """
        cached = self._profiles.get(user_id)
        if cached is not None:
            return cached

        key = make_key(PROFILE_COLLECTION, user_id)
        try:
            document = await self.store.get(key)
        except PersistenceException as e:
            logger.warning(
                f"Profile read failed, treating as missing: {e.message}",
                extra={"user_id": user_id},
            )
            return None

        if document is None:
            return None

        try:
            profile = UserProfile.model_validate(document)
        except ValidationError as e:
            logger.error(
                f"Stored profile is invalid: {e.error_count()} errors",
                extra={"user_id": user_id},
            )
            return None

        self._profiles[user_id] = profile
        return profile

    def get_cached(self, user_id: str) -> Optional[UserProfile]:
        """캐시에 있는 프로필만 조회 (저장소 접근 없음)"""
        return self._profiles.get(user_id)

    def list_profiles(
        self, exclude_user_id: Optional[str] = None, limit: int = 50
    ) -> list[UserProfile]:
        """캐시된 프로필 목록 (생성 순)

        Args:
            exclude_user_id: 제외할 사용자 ID
            limit: 최대 개수

        Returns:
            프로필 목록
        """
        profiles = [
            p for uid, p in self._profiles.items() if uid != exclude_user_id
        ]
        return profiles[:limit]

    def save(self, profile: UserProfile) -> UserProfile:
        """프로필 저장 (캐시 즉시 반영 + 백그라운드 영속화)"""
        self._profiles[profile.user_id] = profile
        self.writer.schedule_set(
            make_key(PROFILE_COLLECTION, profile.user_id),
            profile.model_dump(mode="json"),
        )
        return profile
