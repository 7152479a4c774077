# bitacora/app/api/v1/endpoints/auth.py
from fastapi import APIRouter, Depends, status

from bitacora.app.api.deps import get_auth_service, get_current_user
from bitacora.app.schemas.user import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    ProfileEnvelope,
    ProfileUpdate,
    UserCreate,
    UserResponse,
)
from bitacora.app.services.auth import AuthService

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate, auth: AuthService = Depends(get_auth_service)):
    user, token = await auth.register(user_in)
    return AuthResponse(
        message="User registered successfully",
        token=token,
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(credentials: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    user, token = await auth.login(credentials)
    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserResponse.model_validate(user),
    )


@router.get("/profile", response_model=ProfileEnvelope)
async def get_profile(
        current_user: CurrentUser = Depends(get_current_user),
        auth: AuthService = Depends(get_auth_service),
):
    user = await auth.get_profile(current_user.id)
    return ProfileEnvelope(user=UserResponse.model_validate(user))


@router.put("/profile", response_model=ProfileEnvelope)
async def update_profile(
        profile_in: ProfileUpdate,
        current_user: CurrentUser = Depends(get_current_user),
        auth: AuthService = Depends(get_auth_service),
):
    user = await auth.update_profile(current_user.id, profile_in)
    return ProfileEnvelope(message="Profile updated successfully", user=UserResponse.model_validate(user))
