"""Authentication API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from cloudspace.api.dependencies import get_current_user_id, get_user_service
from cloudspace.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from cloudspace.services.user_service import UserService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Register a new user with their own bucket."""
    user, access_token = user_service.register(user_data.username, user_data.password)
    return AuthResponse(access_token=access_token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Login with username and password."""
    user, access_token = user_service.authenticate(credentials.username, credentials.password)
    return AuthResponse(access_token=access_token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
def get_me(
    user_id: Annotated[UUID, Depends(get_current_user_id)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Get current user information."""
    return UserResponse.model_validate(user_service.get_user(user_id))
