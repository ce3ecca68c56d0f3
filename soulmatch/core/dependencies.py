"""공통 의존성 함수 정의

FastAPI 엔드포인트에서 사용되는 공통 의존성 함수들을 정의합니다.
"""

from typing import TYPE_CHECKING

from fastapi import Header, Request

from soulmatch.core.config import settings
from soulmatch.core.exceptions import UnauthorizedException

if TYPE_CHECKING:
    from soulmatch.engine import MatchmakingEngine


async def verify_internal_api_key(
    x_internal_api_key: str = Header(..., alias="X-Internal-Api-Key")
) -> None:
    """내부 API Key 검증 (채팅 레이어 통신용)

    Args:
        x_internal_api_key: 요청 헤더의 X-Internal-Api-Key 값

    Raises:
        UnauthorizedException: API Key가 유효하지 않은 경우
    """
    if x_internal_api_key != settings.internal_api_key:
        raise UnauthorizedException(
            message="유효하지 않은 API 키입니다.",
            error_code="INVALID_API_KEY",
        )


def get_engine(request: Request) -> "MatchmakingEngine":
    """애플리케이션 시작 시 생성된 엔진 인스턴스 반환

    테스트에서는 app.dependency_overrides[get_engine]으로 교체합니다.
    """
    return request.app.state.engine
