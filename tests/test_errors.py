import json

import pytest

from app.errors import (
    ApiError,
    InternalServerError,
    NotAuthorizedError,
    NotFoundError,
    ParamMissingError,
    RecordInvalidError,
)


class TempApiError(ApiError):
    def __init__(self):
        super().__init__(code="temp_error", message="Temp error", status_code=502)


@pytest.mark.parametrize(
    "error, code, status_code, message",
    [
        (ParamMissingError("test_param"), "param_missing", 400, "Parameter missing: test_param"),
        (NotFoundError(), "not_found", 404, "Resource not found"),
        (RecordInvalidError({"email": ["can't be blank"]}), "record_invalid", 422, "Record invalid"),
        (NotAuthorizedError(), "not_authorized", 401, "Not authorized"),
        (InternalServerError(), "internal_server_error", 500, "Something went wrong"),
    ],
)
def test_builtin_error_defaults(error, code, status_code, message):
    """Each built-in error carries its code, status and default message."""
    assert error.code == code
    assert error.status_code == status_code
    assert error.message == message
    assert str(error) == message


def test_messages_can_be_overridden():
    assert NotFoundError("User not found").message == "User not found"
    assert NotAuthorizedError("Incorrect email or password").message == "Incorrect email or password"
    assert InternalServerError("A test error").message == "A test error"


def test_serialize_omits_errors_when_absent():
    assert ParamMissingError("test_param").serialize() == {
        "code": "param_missing",
        "message": "Parameter missing: test_param",
    }


def test_serialize_includes_field_errors():
    error = RecordInvalidError({"email": ["can't be blank", "is invalid"]})
    assert error.serialize() == {
        "code": "record_invalid",
        "message": "Record invalid",
        "errors": {"email": ["can't be blank", "is invalid"]},
    }


def test_empty_errors_mapping_is_treated_as_absent():
    error = RecordInvalidError({})
    assert error.errors is None
    assert "errors" not in error.serialize()


def test_serialize_is_idempotent():
    error = RecordInvalidError({"email": ["can't be blank"]})
    assert json.dumps(error.serialize()) == json.dumps(error.serialize())


def test_errors_cannot_be_mutated_through_accessor():
    source = {"email": ["can't be blank"]}
    error = RecordInvalidError(source)
    source["email"].append("is invalid")
    error.errors["email"].append("mutated")
    assert error.errors == {"email": ["can't be blank"]}


def test_code_and_status_are_read_only():
    error = NotFoundError()
    with pytest.raises(AttributeError):
        error.code = "other"
    with pytest.raises(AttributeError):
        error.status_code = 500


def test_custom_error_subclass():
    error = TempApiError()
    assert error.code == "temp_error"
    assert error.status_code == 502
    assert error.serialize() == {"code": "temp_error", "message": "Temp error"}


def test_custom_error_constructed_directly():
    error = ApiError(code="quota_exceeded", message="Quota exceeded", status_code=429)
    assert error.serialize() == {"code": "quota_exceeded", "message": "Quota exceeded"}
    assert error.status_code == 429


def test_base_error_defaults_to_internal_server_error():
    error = ApiError()
    assert error.code == "internal_server_error"
    assert error.status_code == 500


def test_single_string_message_is_wrapped_in_a_list():
    error = RecordInvalidError({"email": "is invalid"})
    assert error.serialize()["errors"] == {"email": ["is invalid"]}
