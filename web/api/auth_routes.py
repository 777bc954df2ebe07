"""Auth API routes: register, login."""
from __future__ import annotations

from fastapi import APIRouter, status

from web import auth_service
from web.api.schemas import LoginRequest, LoginResponse, MessageResponse, RegisterRequest

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest):
    """Create a user. Requires the API key header."""
    await auth_service.register(body)
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest):
    """Check username and password. No token is issued; 200 is the success signal."""
    user = await auth_service.login(body)
    return LoginResponse(message="Login successful", user=user)
