"""Errors raised by the upload pipeline.

Every error carries the short message shown to the caller and the HTTP status
it maps to. Anything more detailed (tool stderr, boto3 errors) is logged by the
stage that failed and never attached here.
"""
from starlette import status


class VideoPipelineError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(VideoPipelineError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(VideoPipelineError):
    status_code = status.HTTP_401_UNAUTHORIZED


class UpstreamToolFailure(VideoPipelineError):
    """ffprobe or ffmpeg could not be launched, failed, or produced nothing."""


class StorageFailure(VideoPipelineError):
    """Object store or metadata store operation failed."""
