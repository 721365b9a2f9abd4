# 도메인 예외 + FastAPI 예외 핸들러
# 응답 본문은 FastAPI 기본 형식 {"detail": ...} 유지

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from thinklink.config import is_development

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """crud/service 계층 예외. 라우터에서 HTTPException으로 변환."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _field_errors(exc: RequestValidationError) -> list:
    errors = []
    for err in exc.errors():
        # loc 예: ("body", "capacity") → "capacity"
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc), "message": err.get("msg", "")})
    return errors


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request data", "errors": _field_errors(exc)},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error: method=%s path=%s",
        request.method,
        request.url.path,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    content = {"detail": "Internal Server Error"}
    if is_development():
        content["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=500, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
