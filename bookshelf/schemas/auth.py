"""Authentication schemas."""

from pydantic import BaseModel, Field


class UserCredentials(BaseModel):
    """Email and password, as sent to signup and login."""

    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class AuthResponse(BaseModel):
    """Authentication response with the user identity and a bearer token."""

    id: str
    email: str
    token: str
