from fastapi import APIRouter, Depends, Form
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.db.models.user import User as UserModel
from app.schemas.error import ErrorResponse
from app.schemas.user import Token, User
from app.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=Token,
    responses={401: {"model": ErrorResponse, "description": "Not authorized"}},
)
def login(
    username: str = Form(...),  # OAuth2 uses "username", but we treat it as email
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    """
    Login endpoint - returns JWT token.
    Uses form data for OAuth2 compatibility (Swagger UI authorization).
    The 'username' field should contain the user's email address.
    """
    return auth_service.login(db, username, password)


@router.get(
    "/me",
    response_model=User,
    responses={401: {"model": ErrorResponse, "description": "Not authorized"}},
)
def get_current_user_info(current_user: UserModel = Depends(get_current_user)):
    """Get current authenticated user information."""
    return User.model_validate(current_user)
