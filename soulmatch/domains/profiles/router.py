"""Profiles 도메인 라우터

온보딩 프로필 생성 및 조회 API 엔드포인트입니다.
"""

from fastapi import APIRouter, Depends

from soulmatch.core.dependencies import get_engine, verify_internal_api_key
from soulmatch.core.schemas import APIResponse, create_response
from soulmatch.domains.profiles.schemas import (
    ProfileCreate,
    ProfileResponse,
    WeightsResponse,
)
from soulmatch.domains.profiles.service import ProfileService

router = APIRouter(dependencies=[Depends(verify_internal_api_key)])


def get_profile_service(engine=Depends(get_engine)) -> ProfileService:
    """ProfileService 의존성"""
    return engine.profiles


@router.post(
    "",
    response_model=APIResponse[ProfileResponse],
    status_code=201,
)
async def create_profile(
    profile_data: ProfileCreate,
    service: ProfileService = Depends(get_profile_service),
):
    """프로필 생성 (온보딩)"""
    profile = await service.create_profile(
        user_id=profile_data.user_id,
        signature=profile_data.signature,
        factual=profile_data.factual,
        preferences=profile_data.preferences,
        display_name=profile_data.display_name,
    )
    return create_response(
        data=ProfileResponse.from_profile(profile),
        message="프로필이 생성되었습니다.",
    )


@router.get("/{user_id}", response_model=APIResponse[ProfileResponse])
async def get_profile(
    user_id: str,
    service: ProfileService = Depends(get_profile_service),
):
    """프로필 조회"""
    profile = await service.get_profile(user_id)
    return create_response(
        data=ProfileResponse.from_profile(profile),
        message="프로필을 조회했습니다.",
    )


@router.get("/{user_id}/weights", response_model=APIResponse[WeightsResponse])
async def get_weights(
    user_id: str,
    service: ProfileService = Depends(get_profile_service),
):
    """학습된 선호 가중치 조회"""
    profile = await service.get_profile(user_id)
    return create_response(
        data=WeightsResponse.from_profile(profile),
        message="선호 가중치를 조회했습니다.",
    )
