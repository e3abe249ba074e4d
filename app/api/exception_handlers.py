"""Global exception filter that maps every failure to an API error response."""

import logging
from collections.abc import Callable, Sequence
from http import HTTPStatus

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import NoResultFound
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.errors import (
    ApiError,
    InternalServerError,
    NotAuthorizedError,
    NotFoundError,
    ParamMissingError,
    RecordInvalidError,
)

logger = logging.getLogger(__name__)

# Location prefixes FastAPI puts in front of the field path.
_LOCATION_SOURCES = {"body", "query", "path", "header", "cookie"}

_MESSAGE_OVERRIDES = {"missing": "can't be blank"}


def _field_name(loc: Sequence[str | int]) -> str:
    parts = list(loc)
    if parts and parts[0] in _LOCATION_SOURCES:
        source = parts.pop(0)
        if not parts:
            return str(source)
    if not parts:
        return "base"
    return ".".join(str(part) for part in parts)


def field_errors(exc: RequestValidationError | ValidationError) -> dict[str, list[str]]:
    """Group pydantic error entries into ``{field: [messages...]}``, keeping order."""
    grouped: dict[str, list[str]] = {}
    for error in exc.errors():
        message = _MESSAGE_OVERRIDES.get(error["type"], error["msg"])
        grouped.setdefault(_field_name(error["loc"]), []).append(message)
    return grouped


def _missing_param(exc: RequestValidationError) -> str | None:
    for error in exc.errors():
        if error["type"] == "missing":
            return _field_name(error["loc"])
    return None


def _http_error(exc: StarletteHTTPException) -> ApiError:
    if exc.status_code == HTTPStatus.NOT_FOUND:
        return NotFoundError()
    if exc.status_code == HTTPStatus.UNAUTHORIZED:
        return NotAuthorizedError()
    try:
        code = HTTPStatus(exc.status_code).phrase.lower().replace(" ", "_").replace("-", "_")
    except ValueError:
        code = "http_error"
    return ApiError(code=code, message=str(exc.detail), status_code=exc.status_code)


class ExceptionFilter:
    """Translate, log and render any exception escaping a route.

    Translation rules are evaluated in order; the first matching predicate
    wins. Anything no rule claims becomes an ``internal_server_error`` whose
    message is the exception's own only when ``verbose_errors`` is set.
    """

    def __init__(self, verbose_errors: bool = False):
        self.verbose_errors = verbose_errors
        self._rules: list[tuple[Callable[[Exception], bool], Callable[[Exception], ApiError]]] = [
            (
                lambda exc: isinstance(exc, RequestValidationError)
                and _missing_param(exc) is not None,
                lambda exc: ParamMissingError(_missing_param(exc)),
            ),
            (
                lambda exc: isinstance(exc, NoResultFound),
                lambda exc: NotFoundError(),
            ),
            (
                lambda exc: isinstance(exc, (RequestValidationError, ValidationError)),
                lambda exc: RecordInvalidError(field_errors(exc)),
            ),
            (
                lambda exc: isinstance(exc, StarletteHTTPException),
                _http_error,
            ),
            (
                lambda exc: isinstance(exc, ApiError),
                lambda exc: exc,
            ),
        ]

    def classify(self, exc: Exception) -> ApiError:
        for matches, translate in self._rules:
            if matches(exc):
                return translate(exc)
        return self._internal_error(exc)

    def _internal_error(self, exc: Exception) -> InternalServerError:
        if not self.verbose_errors:
            return InternalServerError()
        return InternalServerError(str(exc) or type(exc).__name__)

    def log_error(self, exc: Exception) -> None:
        """Log the failure with its traceback, if it has one. Never raises."""
        try:
            logger.error(
                "%s: %s",
                type(exc).__name__,
                exc,
                exc_info=(type(exc), exc, exc.__traceback__),
                extra={"error_code": getattr(exc, "code", None)},
            )
        except Exception:  # noqa: BLE001 - logging never blocks the response
            pass

    def render(self, error: ApiError, headers: dict[str, str] | None = None) -> JSONResponse:
        return JSONResponse(
            status_code=error.status_code, content=error.serialize(), headers=headers
        )

    def __call__(self, _request: Request, exc: Exception) -> JSONResponse:
        self.log_error(exc)
        # WWW-Authenticate and friends survive the translation
        headers = exc.headers if isinstance(exc, StarletteHTTPException) else None
        return self.render(self.classify(exc), headers=headers)

    async def catch_unhandled(self, request: Request, call_next):
        """HTTP middleware: the recovery point for failures no handler is keyed on."""
        try:
            return await call_next(request)
        except Exception as exc:  # noqa: BLE001
            return self(request, exc)


def register_exception_handlers(app, exception_filter: ExceptionFilter):
    """Register the exception filter on the FastAPI app for every failure type.

    Known failure types go through class-keyed handlers; everything else is
    caught by a middleware so it is answered here and never re-raised to the
    server. Middleware added after this call wraps it and sees the response.
    """
    app.add_exception_handler(RequestValidationError, exception_filter)
    app.add_exception_handler(StarletteHTTPException, exception_filter)
    app.add_exception_handler(NoResultFound, exception_filter)
    app.add_exception_handler(ValidationError, exception_filter)
    app.add_exception_handler(ApiError, exception_filter)
    app.middleware("http")(exception_filter.catch_unhandled)
