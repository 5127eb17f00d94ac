# backend/schemas/user.py
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from schemas.common import ORMBase


# Schema for user registration requests
class UserCreate(ORMBase):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)


# Schema for user authentication credentials.
# Both fields are optional so the route can answer with its own message.
class UserLogin(ORMBase):
    email: Optional[str] = None
    password: Optional[str] = None


# Output schema for user profile details (never includes the password hash)
class UserResponse(ORMBase):
    id: str
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = None
