"""
Database models for ProcureQA
"""
from app.database import Base

# Import all models
from .category import Category, SubCategory
from .supplier import Supplier, supplier_categories, supplier_sub_categories
from .product import Product
from .client import Client, ClientHistory, ENQUIRY_STATUSES
from .banner import Banner
from .user import User, USER_ROLES

__all__ = [
    "Base",
    "Category",
    "SubCategory",
    "Supplier",
    "supplier_categories",
    "supplier_sub_categories",
    "Product",
    "Client",
    "ClientHistory",
    "ENQUIRY_STATUSES",
    "Banner",
    "User",
    "USER_ROLES",
]
