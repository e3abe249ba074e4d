"""API error taxonomy.

Every error raised towards a client is an ``ApiError``: a machine-readable
code, a human message, an HTTP status and, for validation failures, a mapping
of field name to violation messages.
"""

from http import HTTPStatus

from app.schemas.error import ErrorResponse

# Stable, machine-readable error codes for API consumers.
INTERNAL_SERVER_ERROR = "internal_server_error"
NOT_AUTHORIZED = "not_authorized"
NOT_FOUND = "not_found"
PARAM_MISSING = "param_missing"
RECORD_INVALID = "record_invalid"


class ApiError(Exception):
    """Base API error. Construct it directly for a custom code and status."""

    def __init__(
        self,
        code: str = INTERNAL_SERVER_ERROR,
        message: str = "Internal server error",
        status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR,
        errors: dict[str, list[str] | str] | None = None,
    ):
        super().__init__(message)
        self._code = code
        self._message = message
        self._status_code = int(status_code)
        self._errors = (
            {
                field: [messages] if isinstance(messages, str) else list(messages)
                for field, messages in errors.items()
            }
            if errors
            else None
        )

    @property
    def code(self) -> str:
        return self._code

    @property
    def message(self) -> str:
        return self._message

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def errors(self) -> dict[str, list[str]] | None:
        if self._errors is None:
            return None
        return {field: list(messages) for field, messages in self._errors.items()}

    def serialize(self) -> dict:
        """Return the JSON body for this error, omitting absent fields."""
        body = ErrorResponse(code=self.code, message=self.message, errors=self.errors)
        return body.model_dump(exclude_none=True)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, status_code={self.status_code})"


class ParamMissingError(ApiError):
    """A required request parameter was not supplied."""

    def __init__(self, param: str):
        super().__init__(
            code=PARAM_MISSING,
            message=f"Parameter missing: {param}",
            status_code=HTTPStatus.BAD_REQUEST,
        )
        self.param = param


class NotFoundError(ApiError):
    """Raised when a requested resource does not exist."""

    def __init__(self, message: str | None = None):
        super().__init__(
            code=NOT_FOUND,
            message=message or "Resource not found",
            status_code=HTTPStatus.NOT_FOUND,
        )


class RecordInvalidError(ApiError):
    """A record failed validation; ``errors`` maps each field to its violations."""

    def __init__(self, errors: dict[str, list[str] | str]):
        super().__init__(
            code=RECORD_INVALID,
            message="Record invalid",
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            errors=errors,
        )


class NotAuthorizedError(ApiError):
    def __init__(self, message: str | None = None):
        super().__init__(
            code=NOT_AUTHORIZED,
            message=message or "Not authorized",
            status_code=HTTPStatus.UNAUTHORIZED,
        )


class InternalServerError(ApiError):
    def __init__(self, message: str | None = None):
        super().__init__(
            code=INTERNAL_SERVER_ERROR,
            message=message or "Something went wrong",
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        )
