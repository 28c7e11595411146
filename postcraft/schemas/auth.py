from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class UserCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class Account(BaseModel):
    """Stored account, as returned by either store backend. Carries the password hash."""
    id: str
    email: str
    name: str
    hashed_password: str
    plan_tier: str = "free"
    generations_count: int = 0
    created_at: datetime

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    plan: str
    generations_count: int
    generations_limit: Optional[int] = None  # None for unlimited plans
    created_at: Optional[str] = None
