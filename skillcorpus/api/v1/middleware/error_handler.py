"""Turns skill-corpus exceptions into JSON error responses.

Every body follows :class:`ErrorResponse`; the status code is looked up by
walking the exception's class hierarchy, so subclasses inherit the code of
their closest mapped base.  Routing errors and request validation errors
raised by FastAPI itself are rendered with the same body.
"""

from __future__ import annotations

from http import HTTPStatus

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from skillcorpus.api.v1.schemas.common import ErrorResponse
from skillcorpus.utils.exceptions import (
    FrontmatterError,
    SkillCorpusError,
    SkillNotFoundError,
    SkillParseError,
    ValidationRunError,
)
from skillcorpus.utils.logging import get_logger

logger = get_logger(__name__)

_STATUS_MAP: dict[type, int] = {
    SkillNotFoundError: 404,
    FrontmatterError: 422,
    SkillParseError: 422,
    ValidationRunError: 502,
}


def status_for(exc: SkillCorpusError) -> int:
    for cls in type(exc).__mro__:
        if cls in _STATUS_MAP:
            return _STATUS_MAP[cls]
    return 500


def error_body(exc: SkillCorpusError) -> ErrorResponse:
    return ErrorResponse(
        error=type(exc).__name__,
        detail=str(exc),
        skill=getattr(exc, "skill_name", None),
        line=getattr(exc, "line", None),
    )


def _json_error(
    status_code: int, body: ErrorResponse, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = [
        ".".join(str(part) for part in err["loc"]) + ": " + err["msg"]
        for err in exc.errors()
    ]
    return _json_error(
        422,
        ErrorResponse(error="RequestValidationError", detail="; ".join(problems)),
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    try:
        phrase = HTTPStatus(exc.status_code).phrase
    except ValueError:
        phrase = "HTTP Error"
    error = phrase.replace(" ", "")
    return _json_error(
        exc.status_code,
        ErrorResponse(error=error, detail=str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Catches every exception raised by a handler and renders it as JSON."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except SkillCorpusError as exc:
            status_code = status_for(exc)
            body = error_body(exc)
            logger.warning(
                "corpus_error",
                error=body.error,
                status_code=status_code,
                path=request.url.path,
                skill=body.skill,
            )
        except Exception:
            status_code = 500
            body = ErrorResponse(
                error="InternalServerError",
                detail="An unexpected error occurred.",
            )
            logger.exception("unhandled_error", path=request.url.path)

        return _json_error(status_code, body)
