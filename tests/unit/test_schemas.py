"""스키마 단위 테스트"""

from soulmatch.core.schemas import (
    APIResponse,
    ErrorDetail,
    ErrorResponse,
    OperationResult,
    create_response,
)


class TestAPIResponse:
    """APIResponse 테스트"""

    def test_success_response_with_data(self):
        """데이터가 있는 성공 응답"""
        response = APIResponse(
            success=True,
            data={"user_id": "u-1", "signature": "#FF8040"},
            message="조회 성공",
        )

        assert response.success is True
        assert response.message == "조회 성공"
        assert response.data == {"user_id": "u-1", "signature": "#FF8040"}

    def test_success_response_without_data(self):
        """데이터가 없는 성공 응답"""
        response = APIResponse(success=True, message="초기화 성공")

        assert response.success is True
        assert response.data is None

    def test_default_message(self):
        """기본 메시지"""
        response = create_response()

        assert response.message == "요청이 성공적으로 처리되었습니다."


class TestOperationResult:
    """OperationResult 테스트"""

    def test_ok(self):
        """성공 결과"""
        result = OperationResult.ok(data={"queue_size": 3}, message="done")

        assert result.success is True
        assert result.reason is None
        assert result.data == {"queue_size": 3}
        assert result.message == "done"

    def test_fail(self):
        """실패 결과는 reason을 담고 data가 없음"""
        result = OperationResult.fail(
            reason="PROFILE_NOT_FOUND", message="프로필을 찾을 수 없습니다."
        )

        assert result.success is False
        assert result.reason == "PROFILE_NOT_FOUND"
        assert result.data is None


class TestErrorResponse:
    """ErrorResponse 테스트"""

    def test_error_response_structure(self):
        """에러 응답 구조"""
        response = ErrorResponse(
            message="프로필을 찾을 수 없습니다.",
            error=ErrorDetail(
                code="PROFILE_NOT_FOUND",
                message="프로필을 찾을 수 없습니다.",
                detail={"user_id": "u-123"},
            ),
        )

        assert response.success is False
        assert response.error.code == "PROFILE_NOT_FOUND"
        assert response.error.detail == {"user_id": "u-123"}
