"""
Product schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from datetime import datetime


class ProductCreate(BaseModel):
    """
    Create product request.

    Category and subcategory are referenced by id; their current names are
    copied onto the product when it is written.
    """
    product_name: str = Field(..., min_length=1)
    item_code: str = Field(..., min_length=1, description="Unique across all suppliers")
    unit: str = Field(..., min_length=1)
    description: Optional[str] = None
    category_id: Optional[UUID] = None
    sub_category_id: Optional[UUID] = None
    supplier_id: UUID


class ProductUpdate(BaseModel):
    """Partial product update"""
    product_name: Optional[str] = None
    item_code: Optional[str] = None
    unit: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[UUID] = None
    sub_category_id: Optional[UUID] = None
    supplier_id: Optional[UUID] = None


class ProductResponse(BaseModel):
    """Product response"""
    id: UUID
    product_name: str
    item_code: str
    unit: str
    description: Optional[str] = None
    category_id: Optional[UUID] = None
    category_name: str
    sub_category_id: Optional[UUID] = None
    sub_category_name: str
    sub_category_category_id: Optional[UUID] = None
    supplier_id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductDetailResponse(ProductResponse):
    """Product with its supplier's company name"""
    supplier_company_name: Optional[str] = None
