"""
Admin panel user schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from datetime import datetime


class UserCreate(BaseModel):
    """
    Signup request. Field rules (username charset, password strength, role,
    phone format) are checked in the route so violations come back as 400
    with a readable message.
    """
    username: str
    email: str
    password: str
    role: str = Field(..., description="Admin or Sales")
    phone_number: str = Field(..., description="+974 XXXXXXXX")

    class Config:
        json_schema_extra = {
            "example": {
                "username": "jdoe01",
                "email": "jdoe@example.com",
                "password": "Secret#123",
                "role": "Sales",
                "phone_number": "+974 55123456",
            }
        }


class UserUpdate(BaseModel):
    """Update user (same rules as signup, per provided field)"""
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    phone_number: Optional[str] = None


class UserResponse(BaseModel):
    """User response (never includes the password hash)"""
    id: UUID
    username: str
    email: str
    role: str
    phone_number: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    """Issued on signup and login"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
