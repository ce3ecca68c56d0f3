"""Compatibility 도메인 서비스"""

from soulmatch.core.context import get_request_id
from soulmatch.core.logging import get_logger
from soulmatch.domains.compatibility.scorer import CompatibilityScorer
from soulmatch.domains.compatibility.types import CompatibilityScore
from soulmatch.domains.profiles.models import UserProfile
from soulmatch.domains.profiles.service import ProfileService

logger = get_logger(__name__)


class CompatibilityService:
    """프로필 ID 기반 호환도 조회 서비스"""

    def __init__(self, profiles: ProfileService, scorer: CompatibilityScorer):
        self.profiles = profiles
        self.scorer = scorer

    async def score_compatibility(
        self, seeker_id: str, candidate_id: str
    ) -> CompatibilityScore:
        """두 사용자 간 호환도 계산

        Raises:
            ProfileNotFoundException: 어느 한쪽 프로필이 없는 경우
        """
        seeker = await self.profiles.get_profile(seeker_id)
        candidate = await self.profiles.get_profile(candidate_id)
        result = self.scorer.score(seeker, candidate)

        logger.info(
            "Compatibility scored",
            extra={
                "request_id": get_request_id(),
                "user_id": seeker_id,
                "candidate_id": candidate_id,
                "total_score": round(result.total_score, 4),
                "veto": result.breakdown.veto_violation,
            },
        )
        return result

    def rank_candidates(
        self, seeker: UserProfile, candidates: list[UserProfile]
    ) -> list[CompatibilityScore]:
        """veto를 통과한 후보만 총점 내림차순으로 정렬

        동점이면 입력 순서를 유지합니다.
        """
        scores = [
            self.scorer.score(seeker, candidate)
            for candidate in candidates
            if candidate.user_id != seeker.user_id
        ]
        return sorted(
            (s for s in scores if not s.is_vetoed),
            key=lambda s: s.total_score,
            reverse=True,
        )
