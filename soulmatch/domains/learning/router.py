"""Learning 도메인 라우터"""

from fastapi import APIRouter, Depends

from soulmatch.core.dependencies import get_engine, verify_internal_api_key
from soulmatch.core.schemas import APIResponse, create_response
from soulmatch.domains.learning.schemas import (
    NextQuestionResponse,
    SignalCreate,
    SignalResult,
)
from soulmatch.domains.learning.service import LearningService

router = APIRouter(dependencies=[Depends(verify_internal_api_key)])


def get_learning_service(engine=Depends(get_engine)) -> LearningService:
    """LearningService 의존성"""
    return engine.learning


@router.post(
    "/{user_id}/signals",
    response_model=APIResponse[SignalResult],
    status_code=201,
)
async def record_signal(
    user_id: str,
    signal_data: SignalCreate,
    service: LearningService = Depends(get_learning_service),
):
    """상호작용 신호 기록 및 가중치 갱신"""
    profile = await service.record_interaction_signal(
        user_id=user_id,
        candidate_id=signal_data.candidate_id,
        attribute=signal_data.attribute,
        reaction=signal_data.reaction,
    )
    return create_response(
        data=SignalResult.from_profile(profile),
        message="선호 가중치를 갱신했습니다.",
    )


@router.get(
    "/{user_id}/next-question",
    response_model=APIResponse[NextQuestionResponse],
)
async def get_next_question(
    user_id: str,
    service: LearningService = Depends(get_learning_service),
):
    """다음 선호 탐색 질문 조회"""
    attribute, question = await service.next_question(user_id)
    return create_response(
        data=NextQuestionResponse(attribute=attribute, question=question),
    )
