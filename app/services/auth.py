"""Auth service: login and current-user resolution from access tokens."""

import logging

from sqlalchemy.orm import Session

from app.core.security import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    decode_token,
    verify_password,
)
from app.db.models.user import User as UserModel
from app.errors import NotAuthorizedError
from app.repositories.user import (
    get_user_by_email,
    get_user_by_id,
    record_failed_sign_in,
    record_sign_in,
)
from app.schemas.user import Token, User

logger = logging.getLogger(__name__)


def login(db: Session, email: str, password: str) -> Token:
    """
    Authenticate user by email and password, return JWT access token.

    A wrong password increments the user's failed_attempts; a successful
    login resets it and stamps last_sign_in_at.

    Raises:
        NotAuthorizedError: If email not found or password incorrect.
    """
    user = get_user_by_email(db, email.strip().lower())
    if not user:
        raise NotAuthorizedError("Incorrect email or password")

    if not verify_password(password, user.password_hash):
        record_failed_sign_in(db, user)
        logger.info("Failed sign-in for user %s (%d attempts)", user.id, user.failed_attempts)
        raise NotAuthorizedError("Incorrect email or password")

    user = record_sign_in(db, user)
    access_token = create_access_token(user.id)
    return Token(
        access_token=access_token,
        token_type="bearer",
        user=User.model_validate(user),
    )


def authenticate_token(db: Session, token: str) -> UserModel:
    """
    Resolve the user an access token belongs to.

    Raises:
        NotAuthorizedError: If the token is invalid, expired, not an access
            token, or its user no longer exists.
    """
    payload = decode_token(token)
    if payload is None or payload.get("type") != ACCESS_TOKEN_TYPE:
        raise NotAuthorizedError("Could not validate credentials")

    user_id = payload.get("sub")
    if not user_id:
        raise NotAuthorizedError("Could not validate credentials")

    user = get_user_by_id(db, user_id)
    if user is None:
        raise NotAuthorizedError("Could not validate credentials")
    return user
