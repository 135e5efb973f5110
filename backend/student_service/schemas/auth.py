"""
Authentication request/response schemas.
"""
from pydantic import BaseModel, EmailStr, Field


class SignUpRequest(BaseModel):
    """Registration request body."""
    first_name: str = Field(..., min_length=1, max_length=100, description="Given name")
    last_name: str = Field(..., min_length=1, max_length=100, description="Family name")
    email: EmailStr = Field(..., description="Student email address")
    password: str = Field(
        ...,
        min_length=8,
        max_length=72,
        description="Password (8-72 characters)",
    )


class SignInRequest(BaseModel):
    """Login request body."""
    email: EmailStr = Field(..., description="Student email address")
    password: str = Field(..., min_length=8, max_length=72, description="Student password")


class RefreshRequest(BaseModel):
    """Token refresh request body."""
    refresh_token: str = Field(..., min_length=1, description="Refresh token from sign-in")


class Tokens(BaseModel):
    """Access/refresh token pair."""
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="Opaque refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in seconds")
