"""Core 모듈"""

from soulmatch.core.config import Settings, get_settings, settings
from soulmatch.core.exceptions import (
    BadRequestException,
    BaseAPIException,
    ConflictException,
    ErrorCode,
    ExternalServiceException,
    InternalServerException,
    NotFoundException,
    PersistenceException,
    UnauthorizedException,
)
from soulmatch.core.logging import get_logger, setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "ErrorCode",
    "BaseAPIException",
    "BadRequestException",
    "UnauthorizedException",
    "NotFoundException",
    "ConflictException",
    "InternalServerException",
    "PersistenceException",
    "ExternalServiceException",
    "get_logger",
    "setup_logging",
]
