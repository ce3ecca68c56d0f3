"""MatchmakingEngine 파사드 단위 테스트"""

import random
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from soulmatch.core.exceptions import ErrorCode
from soulmatch.core.store import InMemoryKeyValueStore
from soulmatch.domains.profiles.models import FactualProfile
from soulmatch.domains.recommendations.schemas import QueueStatus
from soulmatch.engine import MatchmakingEngine


class TestInitialize:
    """엔진 초기화 테스트"""

    def test_initialize_is_idempotent(self, test_settings):
        """여러 번 호출해도 구성 요소는 한 번만 생성"""
        # Given
        engine = MatchmakingEngine(test_settings)

        # When
        first = engine.initialize()
        store = engine.store
        second = engine.initialize()

        # Then
        assert first is second is engine
        assert engine.initialized
        assert engine.store is store
        assert isinstance(store, InMemoryKeyValueStore)

    def test_components_share_store(self, test_settings):
        """리포지토리와 큐 관리자는 같은 저장소 사용"""
        store = InMemoryKeyValueStore()
        engine = MatchmakingEngine(test_settings, store=store).initialize()

        assert engine.profile_repository.store is store
        assert engine.recommendations.store is store
        assert engine.scorer.hhc_weight == test_settings.hhc_weight

    @pytest.mark.asyncio
    async def test_close_drains_writer(self, test_settings):
        """close는 예약된 쓰기를 모두 반영"""
        store = InMemoryKeyValueStore()
        engine = MatchmakingEngine(test_settings, store=store).initialize()
        await engine.create_profile("u-1", "#808080")

        await engine.close()

        assert await store.get("profile:u-1") is not None


class TestOperationResults:
    """공개 연산 결과 테스트"""

    @pytest.mark.asyncio
    async def test_create_and_get_profile(self, engine):
        """프로필 생성 후 조회"""
        # When
        created = await engine.create_profile(
            "u-1", "#3ca0b4", factual=FactualProfile(age=30)
        )
        fetched = await engine.get_profile("u-1")

        # Then
        assert created.success
        assert created.data.signature == "#3CA0B4"
        assert fetched.data == created.data

    @pytest.mark.asyncio
    async def test_missing_profile_is_failure_not_exception(self, engine):
        """도메인 예외는 실패 결과로 변환"""
        result = await engine.get_profile("missing")

        assert result.success is False
        assert result.reason == "PROFILE_NOT_FOUND"
        assert result.message == "프로필을 찾을 수 없습니다."
        assert result.data is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["like", "pass_candidate"])
    async def test_decision_by_unknown_user_fails(self, engine, operation):
        """프로필이 없는 사용자의 좋아요/넘기기는 PROFILE_NOT_FOUND"""
        # Given
        await engine.create_profile("someone", "#808080")

        # When
        result = await getattr(engine, operation)("ghost", "someone")
        served = await engine.get_served_recommendations("ghost")

        # Then
        assert result.success is False
        assert result.reason == "PROFILE_NOT_FOUND"
        assert served.success is False
        assert served.reason == "PROFILE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_invalid_signature_reason(self, engine):
        """잘못된 시그니처는 INVALID_SIGNATURE"""
        result = await engine.create_profile("u-1", "#12345")

        assert result.success is False
        assert result.reason == "INVALID_SIGNATURE"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal(self, engine):
        """예상치 못한 예외는 INTERNAL_ERROR"""
        # Given
        engine.recommendations.get_queue_status = AsyncMock(
            side_effect=RuntimeError("boom")
        )

        # When
        with patch("soulmatch.engine.logger") as mock_logger:
            result = await engine.get_queue_status("u-1")

        # Then
        assert result.success is False
        assert result.reason == ErrorCode.INTERNAL_ERROR.value
        mock_logger.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_record_signal_returns_signal_and_weights(self, engine):
        """학습 결과에는 새 신호와 갱신된 가중치"""
        await engine.create_profile("u-1", "#808080")

        result = await engine.record_interaction_signal(
            "u-1", "c-1", "interests", "positive"
        )

        assert result.success
        assert result.data.signal.candidate_id == "c-1"
        assert result.data.total_interactions == 1
        assert sum(result.data.weights.values()) == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_invalid_reaction_reason(self, engine):
        await engine.create_profile("u-1", "#808080")

        result = await engine.record_interaction_signal(
            "u-1", "c-1", "interests", "ecstatic"
        )

        assert result.reason == "INVALID_REACTION"

    @pytest.mark.asyncio
    async def test_recommendation_flow(self, engine):
        """프로필 등록 → 추천 → 좋아요 → 매칭"""
        # Given
        await engine.create_profile("u-1", "#808080")
        await engine.create_profile("u-2", "#818080", display_name="Jordan")

        # When
        dequeued = await engine.dequeue_recommendation("u-1")
        liked_back = await engine.like("u-2", "u-1")
        liked = await engine.like(
            "u-1", "u-2", metadata={"context": "loves hiking"}
        )
        matches = await engine.get_user_matches("u-1")

        # Then
        assert dequeued.data.recommendation.candidate_id == "u-2"
        assert dequeued.message.startswith("Here's Jordan")
        assert liked_back.data.is_match is False
        assert liked.data.is_match is True
        assert liked.message == liked.data.message
        assert matches.data[0].is_mutual is True

    @pytest.mark.asyncio
    async def test_reset_user_queue(self, engine):
        await engine.create_profile("u-1", "#808080")
        await engine.create_profile("u-2", "#808080")
        await engine.dequeue_recommendation("u-1")

        result = await engine.reset_user_queue("u-1")
        status = await engine.get_queue_status("u-1")

        assert result.success
        assert result.message == "추천 큐를 초기화했습니다."
        assert status.data.total_served == 0


class TestShouldTriggerRecommendation:
    """추천 노출 판단 테스트"""

    def test_uses_queue_status(self, test_settings):
        """큐에 추천이 없으면 항상 False"""
        rng = MagicMock(spec=random.Random)
        rng.random.return_value = 0.0
        engine = MatchmakingEngine(test_settings, rng=rng)
        empty = QueueStatus(
            queue_size=0, total_served=0, has_recommendations=False
        )

        result = engine.should_trigger_recommendation("so lonely", [], empty)

        assert result.success
        assert result.data is False

    def test_accepts_mapping_status(self, test_settings):
        """상태를 dict로 넘겨도 동작"""
        rng = MagicMock(spec=random.Random)
        rng.random.return_value = 0.0
        engine = MatchmakingEngine(test_settings, rng=rng)

        result = engine.should_trigger_recommendation(
            "so lonely", [], {"has_recommendations": True}
        )

        assert result.data is True

    def test_seeded_engines_agree(self, test_settings):
        """같은 시드의 엔진은 같은 결정"""
        status = {"has_recommendations": True}
        messages = ["hmm", "cool", "I love art", "hmm", "so lonely"] * 3

        def decisions():
            engine = MatchmakingEngine(test_settings).initialize()
            return [
                engine.should_trigger_recommendation(m, [], status).data
                for m in messages
            ]

        assert decisions() == decisions()
