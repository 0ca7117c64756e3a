from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from uuid import UUID


class UserCreate(BaseModel):
    """Schema for local registration."""
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=30)
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=1, max_length=100)


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=20)


class FirebaseLoginRequest(BaseModel):
    id_token: str = Field(..., min_length=20)
    name: Optional[str] = None


class UserResponse(BaseModel):
    """Schema for user response."""
    id: UUID
    email: str
    username: Optional[str] = None
    name: Optional[str] = None
    avatar: Optional[str] = None
    provider: str
    created_at: datetime

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class OAuthURLResponse(BaseModel):
    url: str


class UserStatsResponse(BaseModel):
    total_catches: int
    unique_species: int
    total_points: int
    verified_catches: int
    level: int
    points_to_next_level: int
