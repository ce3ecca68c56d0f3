"""Learning 도메인 예외 정의"""

from enum import Enum

from soulmatch.core.exceptions import BadRequestException


class LearningErrorCode(str, Enum):
    """선호 학습 도메인 에러 코드"""

    INVALID_ATTRIBUTE = "INVALID_ATTRIBUTE"
    INVALID_REACTION = "INVALID_REACTION"


class InvalidAttributeException(BadRequestException):
    """알 수 없는 선호 속성"""

    def __init__(self, attribute: str):
        super().__init__(
            message="알 수 없는 선호 속성입니다.",
            error_code=LearningErrorCode.INVALID_ATTRIBUTE,
            detail={"attribute": attribute},
        )


class InvalidReactionException(BadRequestException):
    """positive/neutral/negative 이외의 반응"""

    def __init__(self, reaction: str):
        super().__init__(
            message="반응은 positive, neutral, negative 중 하나여야 합니다.",
            error_code=LearningErrorCode.INVALID_REACTION,
            detail={"reaction": reaction},
        )
