import re
from datetime import datetime

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_core import PydanticCustomError

PASSWORD_MIN_LENGTH = 8

# Checked in order; the first unmet rule is reported.
PASSWORD_RULES = (
    (r"[A-Z]", "must contain at least one uppercase letter"),
    (r"[a-z]", "must contain at least one lowercase letter"),
    (r"\d", "must contain at least one number"),
    (r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?~`]", "must contain at least one symbol"),
)


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    failed_attempts: int
    last_sign_in_at: datetime | None = None
    created_at: datetime


class UserCreate(BaseModel):
    """Registration payload. Violations surface as record_invalid field errors."""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise PydanticCustomError("blank", "can't be blank")
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError:
            raise PydanticCustomError("invalid", "is invalid") from None
        return v.lower()

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if not v:
            raise PydanticCustomError("blank", "can't be blank")
        if len(v) < PASSWORD_MIN_LENGTH:
            raise PydanticCustomError("password_policy", "is too short (minimum is 8 characters)")
        for pattern, message in PASSWORD_RULES:
            if not re.search(pattern, v):
                raise PydanticCustomError("password_policy", message)
        return v


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User
