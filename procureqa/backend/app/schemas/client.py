"""
Client (enquiry) and client history schemas
"""
import re
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from uuid import UUID
from datetime import datetime

from app.models import ENQUIRY_STATUSES

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ClientCreate(BaseModel):
    """Create client request"""
    name: str = Field(..., min_length=1)
    company_name: str = Field(..., min_length=1)
    phone_no: str = Field(..., min_length=1)
    email: str
    product_id: Optional[UUID] = None
    sub_category_id: Optional[UUID] = None
    supplier_id: Optional[UUID] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email format")
        return v


class ClientUpdate(BaseModel):
    """Update client request"""
    name: Optional[str] = None
    company_name: Optional[str] = None
    phone_no: Optional[str] = None
    email: Optional[str] = None
    product_id: Optional[UUID] = None
    sub_category_id: Optional[UUID] = None
    supplier_id: Optional[UUID] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip().lower()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email format")
        return v


class ClientResponse(BaseModel):
    """Client response"""
    id: UUID
    name: str
    company_name: str
    phone_no: str
    email: str
    product_id: Optional[UUID] = None
    item_code: Optional[str] = None
    sub_category_id: Optional[UUID] = None
    supplier_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ClientHistoryCreate(BaseModel):
    client_id: UUID
    enquiry_status: str = Field(..., description="Pending, In Progress, Completed or Cancelled")

    @field_validator("enquiry_status")
    @classmethod
    def check_status(cls, v: str) -> str:
        if v not in ENQUIRY_STATUSES:
            raise ValueError(f"enquiry_status must be one of: {', '.join(ENQUIRY_STATUSES)}")
        return v


class ClientHistoryResponse(BaseModel):
    id: UUID
    client_id: UUID
    enquiry_status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
