"""
Client (enquiry) and ClientHistory models
"""
from sqlalchemy import Column, String, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
import uuid
from app.database import Base


ENQUIRY_STATUSES = ("Pending", "In Progress", "Completed", "Cancelled")


class Client(Base):
    """A buyer enquiring about a product from a supplier"""
    __tablename__ = "clients"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    company_name = Column(String(255), nullable=False)
    phone_no = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    sub_category_id = Column(Uuid(as_uuid=True), ForeignKey("sub_categories.id", ondelete="SET NULL"), nullable=True)
    supplier_id = Column(Uuid(as_uuid=True), ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    product = relationship("Product")
    sub_category = relationship("SubCategory")
    supplier = relationship("Supplier")
    history = relationship("ClientHistory", back_populates="client", cascade="all, delete-orphan")

    @property
    def item_code(self):
        return self.product.item_code if self.product else None


class ClientHistory(Base):
    """Status trail of a client's enquiry"""
    __tablename__ = "client_history"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid(as_uuid=True), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    enquiry_status = Column(String(20), nullable=False)  # one of ENQUIRY_STATUSES
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    client = relationship("Client", back_populates="history")
