"""Request and response models for the auth API."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from store.models import USER_DEFAULTS


class RegisterRequest(BaseModel):
    model_config = ConfigDict(strict=True)

    username: str = Field(..., min_length=4, max_length=64)
    password: str = Field(..., min_length=8, max_length=256)
    email: Optional[EmailStr] = None
    discord_user_id: str
    create_max_proxy_count: int = Field(default=USER_DEFAULTS.create_max_proxy_count, ge=1)
    speed_limit: int = Field(default=USER_DEFAULTS.speed_limit, ge=1)
    is_admin: bool = USER_DEFAULTS.is_admin
    use_totp: bool = USER_DEFAULTS.use_totp  # stored, not enforced


class LoginRequest(BaseModel):
    model_config = ConfigDict(strict=True)

    username: str = Field(..., min_length=4, max_length=64)
    password: str = Field(..., min_length=8, max_length=256)


class MessageResponse(BaseModel):
    message: str


class UserResponse(BaseModel):
    id: int
    username: str
    email: Optional[str] = None
    discord_user_id: str
    create_max_proxy_count: int
    speed_limit: int
    is_admin: bool
    use_totp: bool
    created_at: int
    updated_at: int


class LoginResponse(BaseModel):
    message: str
    user: UserResponse

