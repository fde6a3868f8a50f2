"""
Supplier schemas
"""
import re
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime

CONTACT_NUMBER_PATTERN = re.compile(r"^\d{3} \d{8}$")
CONTACT_NUMBER_MESSAGE = "Contact number must be in the format: XXX XXXXXXXX"


def is_valid_contact_number(value: Optional[str]) -> bool:
    return bool(value) and bool(CONTACT_NUMBER_PATTERN.match(value))


class SupplierBase(BaseModel):
    """Supplier base schema"""
    first_name: str = Field(..., min_length=1)
    last_name: Optional[str] = None
    email: str = Field(..., min_length=3)
    company_name: str = Field(..., min_length=1)
    company_type: Optional[str] = None
    office_address: Optional[str] = None
    contact_number: str = Field(..., description="XXX XXXXXXXX")

    @field_validator("contact_number")
    @classmethod
    def check_contact_number(cls, v: str) -> str:
        v = v.strip()
        if not is_valid_contact_number(v):
            raise ValueError(CONTACT_NUMBER_MESSAGE)
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class SupplierCreate(SupplierBase):
    """Create supplier request (JSON)"""
    company_logo: Optional[str] = None
    category_ids: List[UUID] = Field(default_factory=list)
    sub_category_ids: List[UUID] = Field(default_factory=list)


class SupplierUpdate(BaseModel):
    """Update supplier request"""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    company_name: Optional[str] = None
    company_type: Optional[str] = None
    office_address: Optional[str] = None
    contact_number: Optional[str] = None
    company_logo: Optional[str] = None
    category_ids: Optional[List[UUID]] = None
    sub_category_ids: Optional[List[UUID]] = None

    @field_validator("contact_number")
    @classmethod
    def check_contact_number(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not is_valid_contact_number(v):
            raise ValueError(CONTACT_NUMBER_MESSAGE)
        return v


class SupplierResponse(BaseModel):
    """Supplier response"""
    id: UUID
    first_name: str
    last_name: Optional[str] = None
    email: str
    company_name: str
    company_type: Optional[str] = None
    company_logo: Optional[str] = None
    office_address: Optional[str] = None
    contact_number: str
    category_ids: List[UUID] = []
    sub_category_ids: List[UUID] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SupplierBrief(BaseModel):
    """Name and logo only (supplier pickers, homepage)"""
    id: UUID
    company_name: str
    company_logo: Optional[str] = None

    class Config:
        from_attributes = True
