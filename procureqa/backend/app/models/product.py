"""
Product model
"""
from sqlalchemy import Column, String, Text, ForeignKey, Uuid, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
import uuid
from app.database import Base


class Product(Base):
    """
    Product (SKU) model

    Category and subcategory names are stored next to their ids so listings
    and search never join. They are captured when the product is written and
    are not updated if the category is renamed later.
    """
    __tablename__ = "products"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    product_name = Column(String(255), nullable=False)
    item_code = Column(String(100), nullable=False)
    # Category reference
    category_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    category_name = Column(String(255), nullable=False)
    # Subcategory reference (carries its own category id, as written at creation)
    sub_category_id = Column(Uuid(as_uuid=True), ForeignKey("sub_categories.id", ondelete="SET NULL"), nullable=True)
    sub_category_name = Column(String(255), nullable=False)
    sub_category_category_id = Column(Uuid(as_uuid=True), nullable=True)
    unit = Column(String(50), nullable=False)
    description = Column(Text)
    supplier_id = Column(Uuid(as_uuid=True), ForeignKey("suppliers.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    supplier = relationship("Supplier", back_populates="products")

    __table_args__ = (
        Index("ix_products_item_code", "item_code", unique=True),
        Index("ix_products_category_name", "category_name"),
        Index("ix_products_sub_category_name", "sub_category_name"),
        Index("ix_products_name_item_code", "product_name", "item_code"),
    )
