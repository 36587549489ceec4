from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from loguru import logger

from app.api.errors import VideoPipelineError
from app.api.responses.base import BaseResponse

async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions."""
    logger.warning(f"HTTPException: {exc.detail} - Path: {request.url.path}")
    return BaseResponse.error_response(
        message=str(exc.detail),
        status_code=exc.status_code
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors."""
    logger.warning(f"Validation Error: {exc.errors()} - Path: {request.url.path}")
    return BaseResponse.error_response(
        message="Validation Error: malformed request",
        status_code=400
    )

async def pipeline_exception_handler(request: Request, exc: VideoPipelineError):
    """Handle upload pipeline errors. Only the short message reaches the caller."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message} - Path: {request.url.path}")
    else:
        logger.warning(f"{type(exc).__name__}: {exc.message} - Path: {request.url.path}")
    return BaseResponse.error_response(
        message=exc.message,
        status_code=exc.status_code
    )

async def global_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions."""
    logger.opt(exception=exc).error(f"Unhandled Exception: {str(exc)} - Path: {request.url.path}")
    return BaseResponse.error_response(
        message="Internal Server Error: An unexpected error occurred.",
        status_code=500
    )
