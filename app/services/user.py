from sqlalchemy.orm import Session

import app.repositories.user as user_repo
from app.core.security import get_password_hash
from app.db.models.user import User as UserModel
from app.errors import RecordInvalidError
from app.schemas.user import UserCreate


def create_user(db: Session, user_data: UserCreate) -> UserModel:
    """
    Create a new user with business logic validation.

    - Validates email uniqueness
    - Hashes the password (format and policy are validated by UserCreate)

    Raises:
        RecordInvalidError: If the email is already registered
    """
    if user_repo.get_user_by_email(db, user_data.email):
        raise RecordInvalidError({"email": ["has already been taken"]})

    return user_repo.create_user(
        db,
        email=user_data.email,
        password_hash=get_password_hash(user_data.password),
    )


def get_user(db: Session, user_id: str) -> UserModel:
    """Get a user by ID. A missing user propagates as NoResultFound (rendered as not_found)."""
    return user_repo.get_user_or_raise(db, user_id)
