"""공통 응답 스키마

HTTP 응답(APIResponse)과 엔진 파사드의 인프로세스 결과(OperationResult)가
같은 success/message 구조를 공유합니다.

Usage::

    from soulmatch.core.schemas import create_response
    return create_response(data=profile, message="프로필을 생성했습니다.")

    from soulmatch.core.schemas import OperationResult
    result = await engine.like("u-1", "u-2")
    if not result.success:
        print(result.reason)
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class APIResponse(BaseModel, Generic[DataT]):
    """단일 데이터 API 응답

    Example::

        @router.get("/{user_id}", response_model=APIResponse[ProfileResponse])
        async def get_profile(user_id: str):
            profile = await service.get_profile(user_id)
            return create_response(data=ProfileResponse.from_profile(profile))
    """

    success: bool = True
    message: str = "요청이 성공적으로 처리되었습니다."
    data: Optional[DataT] = None


def create_response(
    data: Optional[DataT] = None,
    message: str = "요청이 성공적으로 처리되었습니다.",
    success: bool = True,
) -> APIResponse[DataT]:
    """API 응답 생성 팩토리 함수

    Args:
        data: 응답 데이터
        message: 응답 메시지
        success: 성공 여부

    Returns:
        APIResponse 인스턴스
    """
    return APIResponse(success=success, message=message, data=data)


class OperationResult(BaseModel, Generic[DataT]):
    """엔진 공개 연산의 결과

    실패해도 예외를 던지지 않고 success=False와 reason(에러 코드)을 담아
    반환합니다. 호출 측(채팅 레이어)이 대체 메시지를 결정합니다.
    """

    success: bool = True
    reason: Optional[str] = None
    message: str = ""
    data: Optional[DataT] = None

    @classmethod
    def ok(cls, data: Any = None, message: str = "") -> "OperationResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, reason: str, message: str = "") -> "OperationResult":
        return cls(success=False, reason=reason, message=message)


class ErrorDetail(BaseModel):
    """에러 상세 정보"""

    code: str = Field(..., description="에러 코드")
    message: str = Field(..., description="에러 메시지")
    detail: Optional[dict[str, Any]] = Field(default=None, description="추가 정보")


class ErrorResponse(BaseModel):
    """에러 API 응답

    Example::

        {
            "success": false,
            "message": "프로필을 찾을 수 없습니다.",
            "error": {
                "code": "PROFILE_NOT_FOUND",
                "message": "프로필을 찾을 수 없습니다.",
                "detail": {"user_id": "u-123"}
            }
        }
    """

    success: bool = False
    message: str
    error: ErrorDetail
