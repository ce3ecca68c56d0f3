"""미들웨어 모듈"""

from soulmatch.core.middlewares.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
