"""
Category and subcategory schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime


class CategoryCreate(BaseModel):
    """Create category request (JSON). Subcategory names are created under it."""
    name: str = Field(..., description="Category name, unique case-insensitively")
    description: Optional[str] = None
    subcategories: List[str] = Field(default_factory=list, description="Subcategory names to create")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("subcategories")
    @classmethod
    def strip_subcategories(cls, v: List[str]) -> List[str]:
        return [s.strip() for s in v if s and s.strip()]


class CategoryUpdate(BaseModel):
    """Update category request (all fields optional)"""
    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


class SubCategoryBrief(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True


class CategoryResponse(BaseModel):
    """Category response"""
    id: UUID
    name: str
    description: Optional[str] = None
    image_path: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CategoryWithSubCategories(CategoryResponse):
    sub_categories: List[SubCategoryBrief] = []


class SubCategoryCreate(BaseModel):
    """Create subcategory request"""
    name: str = Field(..., min_length=1)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class SubCategoryUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class SubCategoryResponse(BaseModel):
    """Subcategory response"""
    id: UUID
    name: str
    category_id: UUID
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
