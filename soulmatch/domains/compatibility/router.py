"""Compatibility 도메인 라우터"""

from fastapi import APIRouter, Depends

from soulmatch.core.dependencies import get_engine, verify_internal_api_key
from soulmatch.core.schemas import APIResponse, create_response
from soulmatch.domains.compatibility.service import CompatibilityService
from soulmatch.domains.compatibility.types import CompatibilityScore

router = APIRouter(dependencies=[Depends(verify_internal_api_key)])


def get_compatibility_service(
    engine=Depends(get_engine),
) -> CompatibilityService:
    """CompatibilityService 의존성"""
    return engine.compatibility


@router.get(
    "/{seeker_id}/{candidate_id}",
    response_model=APIResponse[CompatibilityScore],
)
async def score_compatibility(
    seeker_id: str,
    candidate_id: str,
    service: CompatibilityService = Depends(get_compatibility_service),
):
    """seeker 관점의 후보 호환도 조회"""
    result = await service.score_compatibility(seeker_id, candidate_id)
    return create_response(data=result, message="호환도를 계산했습니다.")
