"""
Authentication endpoints - email + password with signed bearer tokens.
"""

from fastapi import APIRouter, Depends, status
import logging

from app.models.report import CreatedResponse
from app.models.user import AuthResponse, CurrentUser, LoginRequest, RegisterRequest, UserProfile
from app.services.user_service import UserService, get_user_service
from app.utils.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=CreatedResponse)
async def register(request: RegisterRequest, users: UserService = Depends(get_user_service)):
    """
    Register a new user.

    Role defaults to citizen. Ward officers must name their ward.

    Returns:
        {id, message}

    Raises:
        409: Email already exists
        400: Ward officer without ward, or unknown ward
    """
    user = users.register(request)
    return {"id": user.id, "message": "User registered successfully"}


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, users: UserService = Depends(get_user_service)):
    """
    Exchange email + password for a 24h bearer token.

    Raises:
        404: No user with that email
        400: Password does not match
    """
    return users.login(request.email, request.password)


@router.get("/me", response_model=UserProfile)
async def me(
    current_user: CurrentUser = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    """
    Resolve the caller from their bearer token.

    Raises:
        401: No token
        403: Invalid or expired token
    """
    return users.get_profile(current_user)
