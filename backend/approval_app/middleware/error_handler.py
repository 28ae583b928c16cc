"""Global error handlers producing RFC 7807 style bodies."""
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from approval_app.schemas.common import ErrorDetail

logger = structlog.get_logger()


class AppException(Exception):
    def __init__(self, status_code: int, detail: str, error_type: str = "about:blank"):
        self.status_code = status_code
        self.detail = detail
        self.error_type = error_type


def _problem(
    request: Request, status_code: int, title: str, detail: str, error_type: str = "about:blank"
) -> JSONResponse:
    body = ErrorDetail(
        type=error_type,
        title=title,
        status=status_code,
        detail=detail,
        instance=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


def setup_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        return _problem(request, exc.status_code, "Error", exc.detail, exc.error_type)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return _problem(request, 400, "Bad Request", str(exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled_exception", path=request.url.path, error=str(exc), exc_info=True)
        return _problem(request, 500, "Internal Server Error", "An unexpected error occurred.")
