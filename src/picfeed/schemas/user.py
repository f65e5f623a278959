"""Account-related Pydantic schemas."""

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    account_name: str = Field(..., description="3+ characters of [0-9A-Za-z_]")
    password: str = Field(..., description="6+ characters of [0-9A-Za-z_]")


class LoginRequest(BaseModel):
    """Schema for login submissions."""

    account_name: str
    password: str


class LoginResponse(BaseModel):
    """Response returned after successful login or registration."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    csrf_token: str = Field(..., description="Token required by mutating requests")
    user_id: int
