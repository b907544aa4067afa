import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from device import ActionResult

log = logging.getLogger(__name__)

ROUTING_ERRORS = {
    status.HTTP_404_NOT_FOUND: "Not found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method not allowed",
}


class RelayError(Exception):
    """Request rejected before any device is touched"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidRequest(RelayError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotAuthenticated(RelayError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotPermitted(RelayError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Action not permitted for this token"):
        super().__init__(message)


def result_response(result: ActionResult, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=result.model_dump(exclude_none=True))


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as {"ok": false, "error": ...}"""

    @app.exception_handler(StarletteHTTPException)
    async def routing_exception_handler(request: Request, exc: StarletteHTTPException):
        message = ROUTING_ERRORS.get(exc.status_code) or str(exc.detail)
        log.info(f"{request.method} {request.url.path} -> {exc.status_code}")
        return result_response(ActionResult(ok=False, error=message), exc.status_code)

    @app.exception_handler(RelayError)
    async def relay_exception_handler(request: Request, exc: RelayError):
        log.warning(f"Rejected {request.url.path} ({exc.status_code}): {exc.message}")
        return result_response(ActionResult(ok=False, error=exc.message), exc.status_code)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        log.error(f"Unexpected error: {type(exc).__name__}: {exc}", exc_info=exc)
        return result_response(ActionResult(ok=False, error="Internal server error"),
                               status.HTTP_500_INTERNAL_SERVER_ERROR)
