"""
Banner model (homepage carousel)
"""
from sqlalchemy import Column, String, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
import uuid
from app.database import Base


class Banner(Base):
    """Banner model"""
    __tablename__ = "banners"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    banner_image = Column(String(500), nullable=False)
    description = Column(Text)
    category_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    supplier_id = Column(Uuid(as_uuid=True), ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    category = relationship("Category")
    supplier = relationship("Supplier")
