"""Profiles 도메인 예외 정의"""

from enum import Enum

from soulmatch.core.exceptions import ConflictException, NotFoundException


class ProfileErrorCode(str, Enum):
    """프로필 도메인 에러 코드"""

    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    PROFILE_ALREADY_EXISTS = "PROFILE_ALREADY_EXISTS"


class ProfileNotFoundException(NotFoundException):
    """프로필을 찾을 수 없는 경우"""

    def __init__(self, user_id: str | None = None):
        detail = {"user_id": user_id} if user_id else {}
        super().__init__(
            message="프로필을 찾을 수 없습니다.",
            error_code=ProfileErrorCode.PROFILE_NOT_FOUND,
            detail=detail,
        )


class ProfileAlreadyExistsException(ConflictException):
    """이미 프로필이 생성된 사용자인 경우"""

    def __init__(self, user_id: str | None = None):
        detail = {"user_id": user_id} if user_id else {}
        super().__init__(
            message="이미 프로필이 존재하는 사용자입니다.",
            error_code=ProfileErrorCode.PROFILE_ALREADY_EXISTS,
            detail=detail,
        )
