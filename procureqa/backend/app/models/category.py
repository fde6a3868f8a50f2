"""
Category and SubCategory models
"""
from sqlalchemy import Column, String, Text, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
import uuid
from app.database import Base


class Category(Base):
    """Product category (spreadsheet column "Group")"""
    __tablename__ = "categories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text)
    image_path = Column(String(500), nullable=True)  # Public URL of the uploaded image
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    sub_categories = relationship("SubCategory", back_populates="category", cascade="all, delete-orphan")


class SubCategory(Base):
    """
    Subcategory (spreadsheet column "Brand").

    Belongs to exactly one category. A name may repeat under different
    categories, so uniqueness is (name, category_id).
    """
    __tablename__ = "sub_categories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    category_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    category = relationship("Category", back_populates="sub_categories")

    __table_args__ = (
        UniqueConstraint("name", "category_id", name="uq_sub_categories_name_category"),
    )
