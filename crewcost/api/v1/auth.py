"""
Auth API Endpoints - Registration and session sign-in.

Implements:
- POST /api/v1/auth/register - Create an account
- POST /api/v1/auth/login - Start a session
- POST /api/v1/auth/logout - End the session
- GET /api/v1/auth/me - Current user

The signed session cookie holds only the user id; every other router
resolves it through get_current_active_user.
"""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from crewcost.models import get_db, User
from crewcost.domain.exceptions import DomainError
from crewcost.domain.services import UserService
from crewcost.api.v1.errors import to_http_exception

router = APIRouter()

SESSION_USER_KEY = "user_id"


# =============================================================================
# Pydantic Models
# =============================================================================

class RegisterRequest(BaseModel):
    """Request model for creating an account."""
    name: str = Field(..., min_length=2, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=200)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: int
    name: Optional[str]
    email: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# Dependencies
# =============================================================================

def get_current_active_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Resolve the signed-in user from the session cookie or fail with 401."""
    user = UserService(db).get_user(request.session.get(SESSION_USER_KEY))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "UNAUTHORIZED", "message": "Unauthorized"}
        )
    return user


# =============================================================================
# Endpoints
# =============================================================================

@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account"
)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    try:
        return UserService(db).register_user(payload.name, payload.email, payload.password)
    except DomainError as e:
        raise to_http_exception(e)


@router.post("/login", response_model=UserResponse, summary="Sign in with email and password")
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    try:
        user = UserService(db).authenticate(payload.email, payload.password)
    except DomainError as e:
        raise to_http_exception(e)

    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id
    return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, summary="Sign out")
def logout(request: Request):
    request.session.clear()


@router.get("/me", response_model=UserResponse, summary="Current user")
def me(current_user: User = Depends(get_current_active_user)):
    return current_user
