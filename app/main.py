"""Start Application."""
import os
import time

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from loguru import logger as custom_logger
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.api.errors import VideoPipelineError
from app.api.exception_handlers import (
    global_exception_handler,
    http_exception_handler,
    pipeline_exception_handler,
    validation_exception_handler,
)
from app.api.responses.base import BaseResponse
from app.api.routers.api import app as api_router
from app.core.config import ALLOWED_HOSTS, API_PREFIX, DEBUG, PROJECT_NAME, VERSION, MAX_UPLOAD_SIZE

# multipart boundaries and headers on top of the file itself
FORM_OVERHEAD = 1024 * 1024


class LargeFileMiddleware(BaseHTTPMiddleware):
    """Reject uploads whose declared size is over the ceiling before reading them."""

    async def dispatch(self, request: Request, call_next):
        if request.method == "POST" and request.url.path.endswith("/upload"):
            content_length = request.headers.get("content-length")
            if content_length and content_length.isdigit() and int(content_length) > MAX_UPLOAD_SIZE + FORM_OVERHEAD:
                custom_logger.warning(f"Rejected upload of {int(content_length):,} bytes: {request.url.path}")
                max_mb = MAX_UPLOAD_SIZE / (1024 * 1024)
                return BaseResponse.error_response(
                    message=f"Video too large. Max: {max_mb:.0f}MB",
                    status_code=400
                )

        return await call_next(request)

class LoggingMiddleware(BaseHTTPMiddleware):
    """Logging All API request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Dispatch."""
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        custom_logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.0f}ms)"
        )
        return response

def get_application() -> FastAPI:
    """Get application

    Returns:
        FastAPI video upload application
    """

    application = FastAPI(title=PROJECT_NAME, version=VERSION, debug=DEBUG)
    application.add_middleware(LargeFileMiddleware)
    application.add_middleware(LoggingMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_HOSTS or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(TrustedHostMiddleware, allowed_hosts=["*"])

    application.add_exception_handler(VideoPipelineError, pipeline_exception_handler)
    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(Exception, global_exception_handler)

    application.include_router(api_router, prefix=API_PREFIX)

    return application

app = get_application()

if __name__ == "__main__":
    HOST = os.getenv("APP_HOST", "0.0.0.0")
    PORT = os.getenv("APP_PORT", "8091")
    uvicorn.run(
        app,
        host=HOST,
        port=int(PORT),
        timeout_keep_alive=300,
        timeout_graceful_shutdown=300,
    )
