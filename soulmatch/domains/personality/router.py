"""Personality 도메인 라우터

성격 시그니처 해석, 비교, 생성 API 엔드포인트입니다.
"""

from fastapi import APIRouter, Depends

from soulmatch.core.dependencies import verify_internal_api_key
from soulmatch.core.schemas import APIResponse, create_response
from soulmatch.domains.personality import signature as sig
from soulmatch.domains.personality.schemas import (
    CompareRequest,
    CompareResponse,
    GenerateRequest,
    SignatureRequest,
    SignatureResponse,
)

router = APIRouter(dependencies=[Depends(verify_internal_api_key)])


@router.post("/decode", response_model=APIResponse[SignatureResponse])
async def decode_signature(request: SignatureRequest):
    """시그니처를 성격 벡터와 원형으로 해석"""
    return create_response(
        data=SignatureResponse.from_signature(request.signature),
        message="시그니처를 해석했습니다.",
    )


@router.post("/compare", response_model=APIResponse[CompareResponse])
async def compare_signatures(request: CompareRequest):
    """두 시그니처의 거리와 성격 호환도 계산"""
    a = sig.expand(request.signature_a)
    b = sig.expand(request.signature_b)
    return create_response(
        data=CompareResponse(
            distance=sig.distance(a, b),
            compatibility=sig.compatibility(a, b),
        ),
        message="시그니처를 비교했습니다.",
    )


@router.post("/generate", response_model=APIResponse[SignatureResponse])
async def generate_signature(request: GenerateRequest):
    """평가 결과로부터 시그니처 생성"""
    signature = sig.generate_signature(
        request.anchor_weights,
        request.manifested_params,
        request.soul_params,
    )
    return create_response(
        data=SignatureResponse.from_signature(signature),
        message="시그니처를 생성했습니다.",
    )
