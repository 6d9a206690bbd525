from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import EmailStr, Field

from .base import CamelModel


class UserRole(str, Enum):
    STUDENT = "student"
    ADMIN = "admin"


class UserBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr


class UserCreate(UserBase):
    password: str = Field(..., min_length=1)


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class User(UserBase):
    id: str
    avatar_url: str = ""
    role: UserRole = UserRole.STUDENT
    created_at: Optional[datetime] = None


class UserSummary(CamelModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None


class AuthResponse(CamelModel):
    token: str
    user: User
