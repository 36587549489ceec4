"""Response envelopes: ``{"message", "data"}`` on success, ``{"message"}`` on error."""

from fastapi.responses import JSONResponse, ORJSONResponse
from starlette import status


class BaseResponse:

    @staticmethod
    def success_response(message: str = "API success", status_code: int = status.HTTP_200_OK, data=None):
        content = {"message": message}
        if data is None:
            return JSONResponse(status_code=status_code, content=content)

        content["data"] = data
        return ORJSONResponse(status_code=status_code, content=content)

    @staticmethod
    def error_response(message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        return JSONResponse(status_code=status_code, content={"message": message})
