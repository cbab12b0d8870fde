from pydantic import BaseModel, EmailStr, Field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from app.models.user import UserRole


class UserProfile(BaseModel):
    date_of_birth: Optional[date] = None
    phone: Optional[str] = Field(None, max_length=20)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=2)
    zip: Optional[str] = Field(None, max_length=10)
    school_or_employer: Optional[str] = Field(None, max_length=255)
    field_of_interest: Optional[str] = Field(None, max_length=100)


class UserCreate(UserProfile):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)
    password: str


class UserUpdate(UserProfile):
    name: Optional[str] = Field(None, min_length=1, max_length=255)


class PasswordChange(BaseModel):
    new_password: str


class RoleChange(BaseModel):
    role: UserRole


class UserResponse(UserProfile):
    id: int
    email: str
    name: str
    role: UserRole
    total_donations: Decimal
    login_count: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
