"""Schemas for authentication."""

from pydantic import BaseModel, Field


class UserInfo(BaseModel):
    """Current user information."""

    id: str
    username: str
    email: str | None = None
    display_name: str | None = None
    role: str = "user"
    is_admin: bool = False

    model_config = {"from_attributes": True}


class AuthStatus(BaseModel):
    """Authentication status response."""

    authenticated: bool
    user: UserInfo | None = None
    setup_required: bool = False


class LoginRequest(BaseModel):
    """Local login request."""

    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    """Registration request (for initial setup or admin creating users)."""

    username: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=8)
    email: str | None = Field(default=None, max_length=255)
    display_name: str | None = Field(default=None, max_length=255)

