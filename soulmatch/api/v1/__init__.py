"""API v1 라우터"""

from typing import Any

from fastapi import APIRouter

from soulmatch.core.schemas import APIResponse
from soulmatch.domains.compatibility.router import (
    router as compatibility_router,
)
from soulmatch.domains.learning.router import router as learning_router
from soulmatch.domains.personality.router import router as personality_router
from soulmatch.domains.profiles.router import router as profiles_router
from soulmatch.domains.recommendations.router import (
    router as recommendations_router,
)

api_router = APIRouter()

# 도메인 라우터 등록
api_router.include_router(
    personality_router, prefix="/personality", tags=["Personality"]
)
api_router.include_router(profiles_router, prefix="/profiles", tags=["Profiles"])
api_router.include_router(
    compatibility_router, prefix="/compatibility", tags=["Compatibility"]
)
api_router.include_router(learning_router, prefix="/learning", tags=["Learning"])
api_router.include_router(
    recommendations_router,
    prefix="/recommendations",
    tags=["Recommendations"],
)


@api_router.get("/", response_model=APIResponse[dict[str, Any]])
async def api_v1_root():
    """API v1 루트 엔드포인트"""
    return APIResponse(
        success=True,
        message="SoulMatch Engine API v1",
        data={
            "version": "1.0.0",
            "docs": "/docs",
        },
    )
