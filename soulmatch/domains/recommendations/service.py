"""추천 큐 관리 서비스

사용자별 큐 상태(UserQueueState)를 하나의 레코드로 관리합니다.

- populate_queue: 후보 소스 → 제공 이력/veto 제외 → 호환도 내림차순 스냅샷
- dequeue: 제공하지 않은 항목이 없으면 채운 뒤 맨 앞 후보를 꺼내 제공 이력에 추가
- like / pass_candidate: 최신 결정과 직전 결정 한 단계를 기록
- get_queue_status: 락 없이 읽는 상태 스냅샷
- reset_user_queue: 큐, 제공 이력, 갱신 시각 초기화 (명시적 호출 전용)

상태 변경 후에는 스냅샷을 PersistenceWriter로 백그라운드 저장하고,
재시작 후 첫 접근 시 저장소에서 복원합니다.
"""

from typing import Optional

from pydantic import ValidationError

from soulmatch.core.context import get_request_id
from soulmatch.core.exceptions import PersistenceException
from soulmatch.core.logging import get_logger
from soulmatch.core.persistence import PersistenceWriter
from soulmatch.core.store import KeyValueStore, make_key
from soulmatch.core.utils.datetime import now_utc
from soulmatch.domains.compatibility.service import CompatibilityService
from soulmatch.domains.profiles.models import UserProfile
from soulmatch.domains.profiles.service import ProfileService
from soulmatch.domains.recommendations.collaborators import (
    CandidateSource,
    InteractionMatchOracle,
    MatchOracle,
    StaticCandidateSource,
)
from soulmatch.domains.recommendations.models import (
    InteractionAction,
    InteractionRecord,
    QueueEntry,
    UserQueueState,
)
from soulmatch.domains.recommendations.schemas import (
    DequeueResult,
    LikeResult,
    MatchSummary,
    PassResult,
    PopulateResult,
    QueueStatus,
    ServedRecommendation,
)

logger = get_logger(__name__)

QUEUE_COLLECTION = "queue"

NO_RECOMMENDATIONS_MESSAGE = (
    "I don't have any new recommendations right now, but I'm always "
    "working to find great matches for you!"
)
MATCH_AFTER_CHANGE_MESSAGE = (
    "🎉 Great decision! It's a match! You both liked each other!"
)
LIKE_AFTER_CHANGE_MESSAGE = (
    "👍 Second thoughts worked out! Like sent successfully."
)
MATCH_MESSAGE = "🎉 It's a match! You both liked each other!"
LIKE_MESSAGE = "👍 Like sent! I'll let you know if they like you back."
PASS_MESSAGE = "👌 No worries! I'll find someone more compatible for you."

# (하한 %, 표현) 내림차순
RECOMMENDATION_ADJECTIVES: tuple[tuple[int, str], ...] = (
    (85, "amazing"),
    (75, "great"),
    (65, "good"),
)


def dequeue_message(entry: QueueEntry) -> str:
    return (
        f"Here's {entry.name} - I think you two could have a great "
        "connection!"
    )


def recommendation_text(entry: QueueEntry) -> str:
    """추천 카드 소개 문구"""
    percent = round(entry.compatibility_score * 100)
    adjective = next(
        (word for floor, word in RECOMMENDATION_ADJECTIVES if percent >= floor),
        "interesting",
    )
    age = entry.age if entry.age is not None else "??"
    return (
        f"✨ I found {entry.name}, {age}, who could be an {adjective} match "
        f"for you ({percent}% compatibility)!"
    )


def like_message(is_match: bool, changed_mind: bool) -> str:
    if is_match:
        return MATCH_AFTER_CHANGE_MESSAGE if changed_mind else MATCH_MESSAGE
    return LIKE_AFTER_CHANGE_MESSAGE if changed_mind else LIKE_MESSAGE


class RecommendationQueueManager:
    """사용자별 추천 큐 관리자"""

    def __init__(
        self,
        profiles: ProfileService,
        compatibility: CompatibilityService,
        store: KeyValueStore,
        writer: PersistenceWriter,
        candidate_source: CandidateSource,
        fallback_source: Optional[CandidateSource] = None,
        match_oracle: Optional[MatchOracle] = None,
        pool_limit: int = 50,
    ):
        self.profiles = profiles
        self.compatibility = compatibility
        self.store = store
        self.writer = writer
        self.candidate_source = candidate_source
        self.fallback_source = fallback_source or StaticCandidateSource()
        self.match_oracle = match_oracle or InteractionMatchOracle(
            self.get_interaction
        )
        self.pool_limit = pool_limit
        self._states: dict[str, UserQueueState] = {}

    # ------------------------------------------------------------------
    # 상태 로드/저장
    # ------------------------------------------------------------------

    async def _load_state(self, user_id: str) -> Optional[UserQueueState]:
        """저장소에서 스냅샷 복원 (실패나 손상은 없는 것으로 취급)"""
        try:
            document = await self.store.get(
                make_key(QUEUE_COLLECTION, user_id)
            )
        except PersistenceException as e:
            logger.warning(
                f"Queue state read failed, starting empty: {e.message}",
                extra={"user_id": user_id},
            )
            return None
        if document is None:
            return None
        try:
            return UserQueueState.restore(document)
        except (KeyError, ValidationError) as e:
            logger.error(
                f"Stored queue state is invalid: {e}",
                extra={"user_id": user_id},
            )
            return None

    async def _state(self, user_id: str) -> UserQueueState:
        """사용자 상태 레코드 (없으면 복원 또는 생성)"""
        state = self._states.get(user_id)
        if state is not None:
            return state
        restored = await self._load_state(user_id)
        # 복원을 기다리는 동안 다른 코루틴이 먼저 만들었으면 그것을 사용
        return self._states.setdefault(
            user_id, restored or UserQueueState(user_id=user_id)
        )

    async def _peek_state(self, user_id: str) -> Optional[UserQueueState]:
        """상태 레코드 조회 전용 (캐시에 없으면 스냅샷만 읽고 만들지 않음)"""
        state = self._states.get(user_id)
        if state is None:
            state = await self._load_state(user_id)
        return state

    @staticmethod
    def _pending(state: UserQueueState) -> list[QueueEntry]:
        """아직 제공하지 않은 큐 항목"""
        return [
            e for e in state.entries if e.candidate_id not in state.served
        ]

    def _persist(self, state: UserQueueState) -> None:
        self.writer.schedule_set(
            make_key(QUEUE_COLLECTION, state.user_id), state.snapshot()
        )

    # ------------------------------------------------------------------
    # 큐 채우기 / 꺼내기
    # ------------------------------------------------------------------

    async def _fetch_candidates(
        self, user_id: str
    ) -> tuple[list[UserProfile], bool]:
        """(후보 목록, 대체 풀 사용 여부)"""
        try:
            candidates = await self.candidate_source.get_candidates(
                user_id, self.pool_limit
            )
            return candidates, False
        except Exception as e:
            logger.warning(
                f"Candidate source failed, using fallback pool: {e}",
                extra={"request_id": get_request_id(), "user_id": user_id},
            )
        candidates = await self.fallback_source.get_candidates(
            user_id, self.pool_limit
        )
        return candidates, True

    async def populate_queue(self, user_id: str) -> PopulateResult:
        """후보 풀로 큐를 새로 채움

        이미 채우는 중이면 새로 채우지 않고 진행 중인 작업이 끝나기를
        기다립니다. 후보 소스 호출 중에는 락을 잡지 않으므로 상태 조회가
        막히지 않습니다.

        Raises:
            ProfileNotFoundException: 사용자 프로필이 없는 경우
        """
        seeker = await self.profiles.get_profile(user_id)
        state = await self._state(user_id)

        if state.populating:
            await state.population_done.wait()
            return PopulateResult(
                queue_size=len(state.entries), degraded=state.degraded
            )

        state.populating = True
        state.population_done.clear()
        try:
            candidates, degraded = await self._fetch_candidates(user_id)
            ranked = self.compatibility.rank_candidates(seeker, candidates)
            by_id = {c.user_id: c for c in candidates}

            async with state.lock:
                entries = [
                    QueueEntry.from_score(by_id[s.candidate_id], s)
                    for s in ranked
                    if s.candidate_id not in state.served
                ]
                state.entries = entries
                state.last_populated = now_utc()
                state.degraded = degraded
                self._persist(state)
        finally:
            state.populating = False
            state.population_done.set()

        logger.info(
            "Recommendation queue populated",
            extra={
                "request_id": get_request_id(),
                "user_id": user_id,
                "queue_size": len(entries),
                "pool_size": len(candidates),
                "degraded": degraded,
            },
        )
        return PopulateResult(queue_size=len(entries), degraded=degraded)

    async def dequeue(self, user_id: str) -> DequeueResult:
        """다음 추천 후보 꺼내기

        아직 제공하지 않은 항목이 없으면 먼저 채웁니다. 이미 제공한 후보는
        절대 다시 반환하지 않습니다.

        Raises:
            ProfileNotFoundException: 사용자 프로필이 없는 경우
        """
        await self.profiles.get_profile(user_id)
        state = await self._state(user_id)
        if not self._pending(state):
            await self.populate_queue(user_id)

        async with state.lock:
            entries = self._pending(state)
            if not entries:
                state.entries = []
                return DequeueResult(
                    has_more=False,
                    remaining_count=0,
                    message=NO_RECOMMENDATIONS_MESSAGE,
                    degraded=state.degraded,
                )

            entry, state.entries = entries[0], entries[1:]
            state.served[entry.candidate_id] = now_utc()
            remaining = len(state.entries)
            self._persist(state)

        logger.info(
            "Recommendation served",
            extra={
                "request_id": get_request_id(),
                "user_id": user_id,
                "candidate_id": entry.candidate_id,
                "remaining": remaining,
            },
        )
        return DequeueResult(
            has_more=remaining > 0,
            remaining_count=remaining,
            recommendation=entry,
            message=dequeue_message(entry),
            degraded=state.degraded,
        )

    # ------------------------------------------------------------------
    # 좋아요 / 넘기기
    # ------------------------------------------------------------------

    async def _record(
        self,
        user_id: str,
        candidate_id: str,
        action: InteractionAction,
        context: Optional[str],
    ) -> InteractionRecord:
        await self.profiles.get_profile(user_id)
        state = await self._state(user_id)
        async with state.lock:
            record = InteractionRecord.follow(
                state.interactions.get(candidate_id), action, context
            )
            state.interactions[candidate_id] = record
            state.served.setdefault(candidate_id, record.timestamp)
            state.entries = self._pending(state)
            self._persist(state)

        logger.info(
            f"Recommendation {action.value}",
            extra={
                "request_id": get_request_id(),
                "user_id": user_id,
                "candidate_id": candidate_id,
                "previous_action": (
                    record.previous_action.value
                    if record.previous_action
                    else None
                ),
                "changed_mind": record.changed_mind,
            },
        )
        return record

    async def like(
        self, user_id: str, candidate_id: str, context: Optional[str] = None
    ) -> LikeResult:
        """좋아요 기록 후 상호 매칭 확인

        매칭 판정자가 실패하면 미매칭으로 가정하고 degraded=True 입니다.

        Raises:
            ProfileNotFoundException: 사용자 프로필이 없는 경우
        """
        record = await self._record(
            user_id, candidate_id, InteractionAction.LIKE, context
        )

        degraded = False
        try:
            is_match = await self.match_oracle.did_both_like(
                user_id, candidate_id
            )
        except Exception as e:
            logger.warning(
                f"Match oracle failed, assuming no match: {e}",
                extra={"request_id": get_request_id(), "user_id": user_id},
            )
            is_match = False
            degraded = True

        return LikeResult(
            is_match=is_match,
            is_pending=not is_match,
            changed_mind=record.changed_mind,
            message=like_message(is_match, record.changed_mind),
            degraded=degraded,
        )

    async def pass_candidate(
        self, user_id: str, candidate_id: str, context: Optional[str] = None
    ) -> PassResult:
        """넘기기 기록

        Raises:
            ProfileNotFoundException: 사용자 프로필이 없는 경우
        """
        record = await self._record(
            user_id, candidate_id, InteractionAction.PASS, context
        )
        return PassResult(
            changed_mind=record.changed_mind, message=PASS_MESSAGE
        )

    # ------------------------------------------------------------------
    # 조회 / 관리
    # ------------------------------------------------------------------

    async def get_interaction(
        self, user_id: str, candidate_id: str
    ) -> Optional[InteractionRecord]:
        """(사용자, 후보) 최신 결정 (상태를 만들지 않음)"""
        state = await self._peek_state(user_id)
        if state is None:
            return None
        return state.interactions.get(candidate_id)

    async def get_queue_status(self, user_id: str) -> QueueStatus:
        """큐 상태 조회 (락을 잡지 않으며 상태를 바꾸지 않음)"""
        state = await self._peek_state(user_id)
        if state is None:
            return QueueStatus(
                queue_size=0, total_served=0, has_recommendations=False
            )
        pending = self._pending(state)
        return QueueStatus(
            queue_size=len(pending),
            total_served=len(state.served),
            has_recommendations=bool(pending),
            last_updated=state.last_populated,
            is_populating=state.populating,
        )

    async def reset_user_queue(self, user_id: str) -> None:
        """사용자 큐, 제공 이력, 갱신 시각 초기화 (관리/테스트용)"""
        await self.profiles.get_profile(user_id)
        state = await self._state(user_id)
        async with state.lock:
            state.entries = []
            state.served = {}
            state.last_populated = None
            state.degraded = False
            self._persist(state)

        logger.info(
            "Recommendation queue reset",
            extra={"request_id": get_request_id(), "user_id": user_id},
        )

    async def get_served_recommendations(
        self, user_id: str
    ) -> list[ServedRecommendation]:
        """제공한 후보 목록 (제공 순)"""
        await self.profiles.get_profile(user_id)
        state = await self._peek_state(user_id)
        if state is None:
            return []
        return [
            ServedRecommendation(
                candidate_id=candidate_id,
                served_at=served_at,
                interaction=state.interactions.get(candidate_id),
            )
            for candidate_id, served_at in state.served.items()
        ]

    async def get_user_matches(self, user_id: str) -> list[MatchSummary]:
        """좋아요를 누른 후보 목록과 상호 매칭 여부"""
        await self.profiles.get_profile(user_id)
        state = await self._peek_state(user_id)
        if state is None:
            return []
        liked = [
            (candidate_id, record)
            for candidate_id, record in state.interactions.items()
            if record.action == InteractionAction.LIKE
        ]

        matches = []
        for candidate_id, record in liked:
            try:
                is_mutual = await self.match_oracle.did_both_like(
                    user_id, candidate_id
                )
            except Exception as e:
                logger.warning(
                    f"Match oracle failed for {candidate_id}: {e}",
                    extra={"user_id": user_id},
                )
                is_mutual = False
            matches.append(
                MatchSummary(
                    candidate_id=candidate_id,
                    liked_at=record.timestamp,
                    changed_mind=record.changed_mind,
                    is_mutual=is_mutual,
                )
            )
        return matches

