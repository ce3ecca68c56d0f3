"""요청/응답 로깅 미들웨어"""

from typing import Callable, cast

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from soulmatch.core.context import request_id_ctx, set_request_id
from soulmatch.core.logging import get_logger
from soulmatch.core.utils.time import measure_time

logger = get_logger(__name__)

# 로깅 제외 경로
EXCLUDE_PATHS = {"/health", "/docs", "/redoc", "/openapi.json", "/favicon.ico"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """요청 ID 부여, 요청/응답 로깅 및 처리 시간 측정 미들웨어"""

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        if request.url.path in EXCLUDE_PATHS:
            return cast(Response, await call_next(request))

        request_id = set_request_id(request.headers.get("X-Request-ID"))
        client = request.client.host if request.client else "unknown"
        logger.info(
            f"→ {request.method} {request.url.path} | Client: {client}"
        )

        with measure_time() as timer:
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    f"✗ {request.method} {request.url.path} "
                    f"| Error: {e} | Time: {timer['elapsed_ms']:.2f}ms"
                )
                raise
            finally:
                request_id_ctx.set(None)

        elapsed_ms = timer["elapsed_ms"]
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed_ms:.2f}ms"

        log_method = (
            logger.info if response.status_code < 400 else logger.warning
        )
        log_method(
            f"{'✓' if response.status_code < 400 else '✗'} "
            f"{request.method} {request.url.path} "
            f"| Status: {response.status_code} | Time: {elapsed_ms:.2f}ms",
            extra={"request_id": request_id},
        )

        return cast(Response, response)
