"""
Supplier model
"""
from sqlalchemy import Column, String, Text, ForeignKey, Table, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
import uuid
from app.database import Base


# Categories / subcategories a supplier declares it deals in
supplier_categories = Table(
    "supplier_categories",
    Base.metadata,
    Column("supplier_id", Uuid(as_uuid=True), ForeignKey("suppliers.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Uuid(as_uuid=True), ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)

supplier_sub_categories = Table(
    "supplier_sub_categories",
    Base.metadata,
    Column("supplier_id", Uuid(as_uuid=True), ForeignKey("suppliers.id", ondelete="CASCADE"), primary_key=True),
    Column("sub_category_id", Uuid(as_uuid=True), ForeignKey("sub_categories.id", ondelete="CASCADE"), primary_key=True),
)


class Supplier(Base):
    """Supplier model"""
    __tablename__ = "suppliers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255))
    email = Column(String(255), nullable=False, unique=True)
    company_name = Column(String(255), nullable=False)
    company_type = Column(String(100))
    company_logo = Column(String(500))  # Public URL of the uploaded logo
    office_address = Column(Text)
    contact_number = Column(String(50), nullable=False)  # "XXX XXXXXXXX"
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    products = relationship("Product", back_populates="supplier", passive_deletes=True)
    product_categories = relationship("Category", secondary=supplier_categories)
    product_sub_categories = relationship("SubCategory", secondary=supplier_sub_categories)

    @property
    def category_ids(self):
        return [c.id for c in self.product_categories]

    @property
    def sub_category_ids(self):
        return [s.id for s in self.product_sub_categories]
