"""Recommendations 도메인 라우터

사용자별 추천 큐 API 엔드포인트입니다.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends

from soulmatch.core.dependencies import get_engine, verify_internal_api_key
from soulmatch.core.schemas import APIResponse, create_response
from soulmatch.domains.recommendations.schemas import (
    DequeueResult,
    InteractionRequest,
    LikeResult,
    MatchSummary,
    PassResult,
    PopulateResult,
    QueueStatus,
    ServedRecommendation,
    TriggerRequest,
    TriggerResponse,
)
from soulmatch.domains.recommendations.service import (
    RecommendationQueueManager,
)
from soulmatch.domains.recommendations.trigger import (
    RecommendationTriggerPolicy,
)

router = APIRouter(dependencies=[Depends(verify_internal_api_key)])


def get_queue_manager(
    engine=Depends(get_engine),
) -> RecommendationQueueManager:
    """RecommendationQueueManager 의존성"""
    return engine.recommendations


def get_trigger_policy(
    engine=Depends(get_engine),
) -> RecommendationTriggerPolicy:
    """RecommendationTriggerPolicy 의존성"""
    return engine.trigger_policy


@router.post("/{user_id}/populate", response_model=APIResponse[PopulateResult])
async def populate_queue(
    user_id: str,
    manager: RecommendationQueueManager = Depends(get_queue_manager),
):
    """추천 큐 채우기"""
    result = await manager.populate_queue(user_id)
    return create_response(data=result, message="추천 큐를 채웠습니다.")


@router.post("/{user_id}/dequeue", response_model=APIResponse[DequeueResult])
async def dequeue_recommendation(
    user_id: str,
    manager: RecommendationQueueManager = Depends(get_queue_manager),
):
    """다음 추천 꺼내기"""
    result = await manager.dequeue(user_id)
    return create_response(data=result, message=result.message)


@router.post(
    "/{user_id}/like/{candidate_id}",
    response_model=APIResponse[LikeResult],
)
async def like_candidate(
    user_id: str,
    candidate_id: str,
    request: Optional[InteractionRequest] = Body(default=None),
    manager: RecommendationQueueManager = Depends(get_queue_manager),
):
    """좋아요"""
    context = request.context if request else None
    result = await manager.like(user_id, candidate_id, context)
    return create_response(data=result, message=result.message)


@router.post(
    "/{user_id}/pass/{candidate_id}",
    response_model=APIResponse[PassResult],
)
async def pass_candidate(
    user_id: str,
    candidate_id: str,
    request: Optional[InteractionRequest] = Body(default=None),
    manager: RecommendationQueueManager = Depends(get_queue_manager),
):
    """넘기기"""
    context = request.context if request else None
    result = await manager.pass_candidate(user_id, candidate_id, context)
    return create_response(data=result, message=result.message)


@router.get("/{user_id}/status", response_model=APIResponse[QueueStatus])
async def get_queue_status(
    user_id: str,
    manager: RecommendationQueueManager = Depends(get_queue_manager),
):
    """추천 큐 상태 조회"""
    status = await manager.get_queue_status(user_id)
    return create_response(data=status)


@router.delete("/{user_id}/queue", status_code=204)
async def reset_queue(
    user_id: str,
    manager: RecommendationQueueManager = Depends(get_queue_manager),
):
    """추천 큐 초기화 (관리/테스트용)"""
    await manager.reset_user_queue(user_id)
    return None


@router.get(
    "/{user_id}/served",
    response_model=APIResponse[list[ServedRecommendation]],
)
async def get_served_recommendations(
    user_id: str,
    manager: RecommendationQueueManager = Depends(get_queue_manager),
):
    """제공한 추천 목록"""
    served = await manager.get_served_recommendations(user_id)
    return create_response(data=served)


@router.get(
    "/{user_id}/matches",
    response_model=APIResponse[list[MatchSummary]],
)
async def get_user_matches(
    user_id: str,
    manager: RecommendationQueueManager = Depends(get_queue_manager),
):
    """좋아요한 후보와 상호 매칭 여부"""
    matches = await manager.get_user_matches(user_id)
    return create_response(data=matches)


@router.post("/{user_id}/trigger", response_model=APIResponse[TriggerResponse])
async def should_trigger_recommendation(
    user_id: str,
    request: TriggerRequest,
    manager: RecommendationQueueManager = Depends(get_queue_manager),
    policy: RecommendationTriggerPolicy = Depends(get_trigger_policy),
):
    """이번 대화 턴에 추천을 보여줄지 판단"""
    status = await manager.get_queue_status(user_id)
    triggered = policy.should_trigger(
        request.message,
        [turn.model_dump() for turn in request.recent_history],
        has_recommendations=status.has_recommendations,
    )
    return create_response(
        data=TriggerResponse(
            should_trigger=triggered,
            bridge_message=(
                policy.bridge_message(request.message) if triggered else None
            ),
        )
    )
