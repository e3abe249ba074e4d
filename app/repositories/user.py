from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.db.models.user import User as UserModel


def get_user_by_email(db: Session, email: str) -> UserModel | None:
    """Get a user by email."""
    return db.query(UserModel).filter(UserModel.email == email).first()


def get_user_by_id(db: Session, user_id: str) -> UserModel | None:
    """Get a user by ID."""
    return db.query(UserModel).filter(UserModel.id == user_id).first()


def get_user_or_raise(db: Session, user_id: str) -> UserModel:
    """Get a user by ID. Raises NoResultFound when there is none."""
    return db.query(UserModel).filter(UserModel.id == user_id).one()


def create_user(db: Session, email: str, password_hash: str) -> UserModel:
    """Create a new user in the database. Pure data access - no business logic."""
    db_user = UserModel(email=email, password_hash=password_hash)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def record_failed_sign_in(db: Session, user: UserModel) -> UserModel:
    """Increment the user's failed sign-in counter."""
    user.failed_attempts = (user.failed_attempts or 0) + 1
    db.commit()
    db.refresh(user)
    return user


def record_sign_in(db: Session, user: UserModel, at: datetime | None = None) -> UserModel:
    """Reset the failed sign-in counter and stamp the sign-in time."""
    user.failed_attempts = 0
    user.last_sign_in_at = at or datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    return user
