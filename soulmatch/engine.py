"""매칭 엔진

저장소, 영속화 작성기, 리포지토리, 도메인 서비스를 한 번만 조립해 보관하는
서비스 객체입니다. 애플리케이션 시작 시 하나를 만들어 app.state.engine 에
두고, 라우터는 get_engine 의존성으로 꺼내 씁니다.

채팅 레이어처럼 프로세스 안에서 직접 호출하는 쪽을 위해 공개 연산을
OperationResult 로 감싸 제공합니다. 이 연산들은 예외를 던지지 않습니다.

Usage::

    engine = MatchmakingEngine(settings)
    engine.initialize()

    result = await engine.dequeue_recommendation("u-1")
    if result.success and result.data.recommendation:
        ...

    await engine.close()
"""

import random
from enum import Enum
from typing import Any, Awaitable, Mapping, Optional, Sequence

from soulmatch.core.concurrency import UserLockRegistry
from soulmatch.core.config import Settings, settings
from soulmatch.core.exceptions import BaseAPIException, ErrorCode
from soulmatch.core.logging import get_logger
from soulmatch.core.persistence import PersistenceWriter
from soulmatch.core.schemas import OperationResult
from soulmatch.core.store import KeyValueStore, build_store
from soulmatch.domains.compatibility.scorer import CompatibilityScorer
from soulmatch.domains.compatibility.service import CompatibilityService
from soulmatch.domains.learning.schemas import SignalResult
from soulmatch.domains.learning.service import LearningService
from soulmatch.domains.profiles.models import (
    FactualProfile,
    PartnerPreferences,
    PreferenceAttribute,
    Reaction,
)
from soulmatch.domains.profiles.repository import ProfileRepository
from soulmatch.domains.profiles.service import ProfileService
from soulmatch.domains.recommendations.collaborators import (
    CandidateSource,
    MatchOracle,
    ProfileCandidateSource,
    StaticCandidateSource,
)
from soulmatch.domains.recommendations.schemas import QueueStatus
from soulmatch.domains.recommendations.service import (
    RecommendationQueueManager,
)
from soulmatch.domains.recommendations.trigger import (
    RecommendationTriggerPolicy,
)

logger = get_logger(__name__)


def _reason(error_code: Any) -> str:
    return error_code.value if isinstance(error_code, Enum) else str(error_code)


class MatchmakingEngine:
    """매칭 엔진 서비스 객체"""

    def __init__(
        self,
        config: Settings = settings,
        store: Optional[KeyValueStore] = None,
        candidate_source: Optional[CandidateSource] = None,
        match_oracle: Optional[MatchOracle] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            config: 애플리케이션 설정
            store: 저장소 (없으면 config.store_backend 로 생성)
            candidate_source: 후보 소스 (없으면 저장된 프로필 사용)
            match_oracle: 매칭 판정자 (없으면 기록된 상호작용 사용)
            rng: 추천 노출 정책용 난수원 (없으면 config.trigger_seed 로 생성)
        """
        self.config = config
        self._store = store
        self._candidate_source = candidate_source
        self._match_oracle = match_oracle
        self._rng = rng
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> "MatchmakingEngine":
        """구성 요소 조립 (여러 번 호출해도 한 번만 수행)"""
        if self._initialized:
            return self

        config = self.config
        self.store = self._store or build_store(config)
        self.writer = PersistenceWriter(
            self.store,
            max_retries=config.persistence_max_retries,
            retry_delay=config.persistence_retry_delay,
        )
        self.locks = UserLockRegistry()

        self.profile_repository = ProfileRepository(self.store, self.writer)
        self.profiles = ProfileService(self.profile_repository, self.locks)

        self.scorer = CompatibilityScorer(
            hhc_weight=config.hhc_weight,
            factual_weight=config.factual_weight,
        )
        self.compatibility = CompatibilityService(self.profiles, self.scorer)

        self.learning = LearningService(
            self.profiles,
            self.locks,
            learning_rate=config.learning_rate,
            low_confidence_threshold=config.low_confidence_threshold,
            signal_confidence=config.signal_confidence,
        )

        self.recommendations = RecommendationQueueManager(
            profiles=self.profiles,
            compatibility=self.compatibility,
            store=self.store,
            writer=self.writer,
            candidate_source=(
                self._candidate_source
                or ProfileCandidateSource(self.profile_repository)
            ),
            fallback_source=StaticCandidateSource(),
            match_oracle=self._match_oracle,
            pool_limit=config.candidate_pool_limit,
        )
        self.trigger_policy = RecommendationTriggerPolicy(
            cooldown_turns=config.recommendation_cooldown_turns,
            long_message_threshold=config.long_message_threshold,
            rng=self._rng or random.Random(config.trigger_seed),
        )

        self._initialized = True
        logger.info(
            f"Matchmaking engine initialized "
            f"(store={type(self.store).__name__})"
        )
        return self

    async def close(self) -> None:
        """예약된 영속화 쓰기를 모두 마무리"""
        if not self._initialized:
            return
        await self.writer.drain()
        if self.writer.failed_writes:
            logger.warning(
                f"{self.writer.failed_writes} persistence writes were dropped"
            )
        logger.info("Matchmaking engine closed")

    async def _call(
        self, operation: str, awaitable: Awaitable[Any], message: str = ""
    ) -> OperationResult:
        try:
            data = await awaitable
        except BaseAPIException as e:
            logger.warning(
                f"{operation} failed: {_reason(e.error_code)} {e.message}"
            )
            return OperationResult.fail(
                reason=_reason(e.error_code), message=e.message
            )
        except Exception as e:
            logger.error(f"{operation} failed unexpectedly: {e}", exc_info=True)
            return OperationResult.fail(
                reason=ErrorCode.INTERNAL_ERROR.value,
                message="서버 내부 오류가 발생했습니다.",
            )
        return OperationResult.ok(
            data=data, message=getattr(data, "message", message)
        )

    # ------------------------------------------------------------------
    # 공개 연산
    # ------------------------------------------------------------------

    async def create_profile(
        self,
        user_id: str,
        signature: str,
        factual: Optional[FactualProfile] = None,
        preferences: Optional[PartnerPreferences] = None,
        display_name: Optional[str] = None,
    ) -> OperationResult:
        self.initialize()
        return await self._call(
            "create_profile",
            self.profiles.create_profile(
                user_id, signature, factual, preferences, display_name
            ),
        )

    async def get_profile(self, user_id: str) -> OperationResult:
        self.initialize()
        return await self._call(
            "get_profile", self.profiles.get_profile(user_id)
        )

    async def score_compatibility(
        self, seeker_id: str, candidate_id: str
    ) -> OperationResult:
        self.initialize()
        return await self._call(
            "score_compatibility",
            self.compatibility.score_compatibility(seeker_id, candidate_id),
        )

    async def record_interaction_signal(
        self,
        user_id: str,
        candidate_id: str,
        attribute: PreferenceAttribute | str,
        reaction: Reaction | str,
    ) -> OperationResult:
        """반응을 반영하고 SignalResult(새 신호, 갱신된 가중치) 반환"""
        self.initialize()
        result = await self._call(
            "record_interaction_signal",
            self.learning.record_interaction_signal(
                user_id, candidate_id, attribute, reaction
            ),
        )
        if result.success:
            result.data = SignalResult.from_profile(result.data)
        return result

    async def next_question(self, user_id: str) -> OperationResult:
        self.initialize()
        return await self._call(
            "next_question", self.learning.next_question(user_id)
        )

    async def populate_queue(self, user_id: str) -> OperationResult:
        self.initialize()
        return await self._call(
            "populate_queue", self.recommendations.populate_queue(user_id)
        )

    async def dequeue_recommendation(self, user_id: str) -> OperationResult:
        self.initialize()
        return await self._call(
            "dequeue_recommendation", self.recommendations.dequeue(user_id)
        )

    async def like(
        self,
        user_id: str,
        candidate_id: str,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> OperationResult:
        self.initialize()
        context = (metadata or {}).get("context")
        return await self._call(
            "like", self.recommendations.like(user_id, candidate_id, context)
        )

    async def pass_candidate(
        self,
        user_id: str,
        candidate_id: str,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> OperationResult:
        self.initialize()
        context = (metadata or {}).get("context")
        return await self._call(
            "pass_candidate",
            self.recommendations.pass_candidate(
                user_id, candidate_id, context
            ),
        )

    async def get_queue_status(self, user_id: str) -> OperationResult:
        self.initialize()
        return await self._call(
            "get_queue_status",
            self.recommendations.get_queue_status(user_id),
        )

    async def reset_user_queue(self, user_id: str) -> OperationResult:
        self.initialize()
        return await self._call(
            "reset_user_queue",
            self.recommendations.reset_user_queue(user_id),
            message="추천 큐를 초기화했습니다.",
        )

    async def get_served_recommendations(
        self, user_id: str
    ) -> OperationResult:
        self.initialize()
        return await self._call(
            "get_served_recommendations",
            self.recommendations.get_served_recommendations(user_id),
        )

    async def get_user_matches(self, user_id: str) -> OperationResult:
        self.initialize()
        return await self._call(
            "get_user_matches",
            self.recommendations.get_user_matches(user_id),
        )

    def should_trigger_recommendation(
        self,
        message: str,
        recent_history: Sequence[Any],
        status: QueueStatus | Mapping[str, Any],
    ) -> OperationResult:
        """이번 대화 턴에 추천을 보여줄지 판단 (data: bool)"""
        self.initialize()
        if isinstance(status, QueueStatus):
            has_recommendations = status.has_recommendations
        else:
            has_recommendations = bool(status.get("has_recommendations"))
        triggered = self.trigger_policy.should_trigger(
            message, recent_history, has_recommendations=has_recommendations
        )
        return OperationResult.ok(data=triggered)

    def bridge_message(self, message: str) -> str:
        self.initialize()
        return self.trigger_policy.bridge_message(message)
