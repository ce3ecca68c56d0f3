"""Personality 도메인 예외 정의"""

from enum import Enum

from soulmatch.core.exceptions import BadRequestException


class PersonalityErrorCode(str, Enum):
    """성격 시그니처 도메인 에러 코드"""

    INVALID_SIGNATURE = "INVALID_SIGNATURE"


class InvalidSignatureException(BadRequestException):
    """시그니처 형식이 #HHMMSS 가 아닌 경우"""

    def __init__(self, signature: str | None = None):
        detail = {"signature": signature} if signature is not None else {}
        super().__init__(
            message="성격 시그니처는 #HHMMSS 형식의 16진수여야 합니다.",
            error_code=PersonalityErrorCode.INVALID_SIGNATURE,
            detail=detail,
        )
