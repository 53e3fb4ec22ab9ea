from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints

from tracker.schemas import CamelModel


class Identity(BaseModel):
    """The minimal session subject produced by a successful login."""

    id: str = Field(min_length=1)
    email: str = Field(min_length=1)
    name: str


class RegisterRequest(BaseModel):
    # whitespace-only names count as empty
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
    email: EmailStr
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    # Optional on purpose: absent or unreadable credentials are an auth failure (401), not a 400
    email: str | None = None
    password: str | None = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(CamelModel):
    id: str
    email: str
    name: str
    created_at: datetime | None = None
