"""
User models for registration, login and identity.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from app.models.enums import UserRole


class RegisterRequest(BaseModel):
    """Model for creating a new user."""
    name: str = Field(..., min_length=1, max_length=120, description="Display name")
    email: EmailStr = Field(..., description="Unique login email")
    password: str = Field(..., min_length=1, max_length=128, description="Plain-text password (hashed before storage)")
    role: UserRole = Field(default=UserRole.CITIZEN, description="Defaults to citizen")
    ward_id: Optional[int] = Field(None, description="Required for ward officers")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Asha",
                "email": "asha@example.com",
                "password": "s3cret",
                "role": "citizen",
            }
        }


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class PublicUser(BaseModel):
    """Public user view returned alongside a token."""
    id: int
    name: str
    email: str
    role: UserRole


class UserProfile(PublicUser):
    """Stored profile returned by /auth/me."""
    ward_id: Optional[int] = None


class AuthResponse(BaseModel):
    """Authentication response."""
    token: str
    user: PublicUser


class CurrentUser(BaseModel):
    """
    Identity claims decoded from a bearer token.

    Trusted as-is for the lifetime of the token; role and ward changes in the
    store are not seen until the user logs in again.
    """
    id: int
    email: str
    role: UserRole
    ward_id: Optional[int] = None

    @property
    def is_officer(self) -> bool:
        return self.role in (UserRole.WARD_OFFICER, UserRole.ADMIN)
