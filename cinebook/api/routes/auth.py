"""
Authentication endpoints: register, login and profile.
"""

from fastapi import APIRouter, Depends, status

from cinebook.api.deps import get_auth_service, get_current_user
from cinebook.models.user import User
from cinebook.schemas.common import ApiResponse, ok
from cinebook.schemas.user import (
    AuthResponse,
    PasswordChange,
    Token,
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
)
from cinebook.services.auth_service import AuthService, issue_token

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=ApiResponse[AuthResponse], status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, service: AuthService = Depends(get_auth_service)):
    """Register a new user account and return a token for it."""
    user = await service.register_user(user_data)
    data = AuthResponse(user=UserResponse.model_validate(user), token=Token(access_token=issue_token(user)))
    return ok("User registered successfully", data)


@router.post("/login", response_model=ApiResponse[AuthResponse])
async def login(login_data: UserLogin, service: AuthService = Depends(get_auth_service)):
    """Authenticate and receive a JWT access token."""
    user, token = await service.authenticate_user(login_data)
    data = AuthResponse(user=UserResponse.model_validate(user), token=Token(access_token=token))
    return ok("Login successful", data)


@router.get("/profile", response_model=ApiResponse[UserResponse])
async def get_profile(user: User = Depends(get_current_user)):
    return ok("Profile retrieved successfully", UserResponse.model_validate(user))


@router.put("/profile", response_model=ApiResponse[UserResponse])
async def update_profile(
    update: UserUpdate,
    user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    user = await service.update_profile(user, update)
    return ok("Profile updated successfully", UserResponse.model_validate(user))


@router.put("/change-password", response_model=ApiResponse[None])
async def change_password(
    change: PasswordChange,
    user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    await service.change_password(user, change)
    return ok("Password changed successfully")
