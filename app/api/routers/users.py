from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.db.models.user import User as UserModel
from app.schemas.error import ErrorResponse
from app.schemas.user import User, UserCreate
from app.services.user import create_user, get_user

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Parameter missing"},
        422: {"model": ErrorResponse, "description": "Record invalid"},
    },
)
def create_new_user(user_data: UserCreate, db: Session = Depends(get_db)):
    """
    Register a new user.

    The email must be present, well formed and not yet registered; the
    password must satisfy the password policy.
    """
    user = create_user(db, user_data)
    return User.model_validate(user)


@router.get(
    "/{user_id}",
    response_model=User,
    responses={
        401: {"model": ErrorResponse, "description": "Not authorized"},
        404: {"model": ErrorResponse, "description": "Resource not found"},
    },
)
def get_user_by_id(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    """Get a user by ID. Requires an authenticated user."""
    user = get_user(db, user_id)
    return User.model_validate(user)
