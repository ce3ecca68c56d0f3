"""추천 큐의 외부 협력자

- CandidateSource: 후보 풀 제공자
- MatchOracle: 상호 좋아요 여부 판정자

기본 구현은 프로세스 안에서 동작하며, 외부 서비스로 교체할 때는
추상 클래스를 상속합니다.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

from soulmatch.domains.profiles.models import FactualProfile, UserProfile
from soulmatch.domains.profiles.repository import ProfileRepository
from soulmatch.domains.recommendations.models import (
    InteractionAction,
    InteractionRecord,
)

InteractionLookup = Callable[
    [str, str], Awaitable[Optional[InteractionRecord]]
]


class CandidateSource(ABC):
    """후보 풀 제공자 인터페이스"""

    @abstractmethod
    async def get_candidates(
        self, user_id: str, limit: int
    ) -> list[UserProfile]:
        """user_id에게 추천할 후보 프로필 목록

        Raises:
            ExternalServiceException: 후보 소스를 사용할 수 없는 경우
        """
        pass


class MatchOracle(ABC):
    """상호 매칭 판정자 인터페이스"""

    @abstractmethod
    async def did_both_like(self, user_a: str, user_b: str) -> bool:
        """두 사용자가 서로 좋아요를 눌렀는지 여부"""
        pass


class ProfileCandidateSource(CandidateSource):
    """이 프로세스가 알고 있는 프로필을 후보로 제공"""

    def __init__(self, repository: ProfileRepository):
        self.repository = repository

    async def get_candidates(
        self, user_id: str, limit: int
    ) -> list[UserProfile]:
        return self.repository.list_profiles(
            exclude_user_id=user_id, limit=limit
        )


def _demo_profile(
    user_id: str,
    name: str,
    age: int,
    signature: str,
    interests: list[str],
) -> UserProfile:
    return UserProfile(
        user_id=user_id,
        display_name=name,
        signature=signature,
        factual=FactualProfile(age=age, interests=interests),
    )


FALLBACK_CANDIDATES: tuple[UserProfile, ...] = (
    _demo_profile(
        "demo_user_1",
        "Jordan",
        26,
        "#3CA0B4",
        ["Art", "Coffee", "Photography", "Literature"],
    ),
    _demo_profile(
        "demo_user_2",
        "Alex",
        28,
        "#E08C78",
        ["Technology", "Hiking", "Photography", "Startups"],
    ),
    _demo_profile(
        "demo_user_3",
        "Casey",
        24,
        "#B4C896",
        ["Writing", "Travel", "Music", "Food"],
    ),
    _demo_profile(
        "demo_user_4",
        "Riley",
        27,
        "#5F64C8",
        ["Yoga", "Meditation", "Nature", "Wellness"],
    ),
    _demo_profile(
        "demo_user_5",
        "Sam",
        25,
        "#20B48C",
        ["Cooking", "Food", "Travel", "Culture"],
    ),
)


class StaticCandidateSource(CandidateSource):
    """고정된 데모 후보 풀 (주 후보 소스 장애 시 대체용)"""

    def __init__(
        self, candidates: tuple[UserProfile, ...] = FALLBACK_CANDIDATES
    ):
        self.candidates = candidates

    async def get_candidates(
        self, user_id: str, limit: int
    ) -> list[UserProfile]:
        return [c for c in self.candidates if c.user_id != user_id][:limit]


class InteractionMatchOracle(MatchOracle):
    """기록된 좋아요 상호작용으로 매칭 여부를 판정"""

    def __init__(self, lookup: InteractionLookup):
        """
        Args:
            lookup: (user_id, candidate_id) → 해당 사용자의 최신 결정
        """
        self.lookup = lookup

    async def did_both_like(self, user_a: str, user_b: str) -> bool:
        for seeker, candidate in ((user_a, user_b), (user_b, user_a)):
            record = await self.lookup(seeker, candidate)
            if record is None or record.action != InteractionAction.LIKE:
                return False
        return True
