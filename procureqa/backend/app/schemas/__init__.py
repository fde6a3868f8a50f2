"""
Pydantic schemas for request/response validation
"""
from .category import (
    CategoryCreate, CategoryUpdate, CategoryResponse, CategoryWithSubCategories,
    SubCategoryBrief, SubCategoryCreate, SubCategoryUpdate, SubCategoryResponse,
)
from .product import ProductCreate, ProductUpdate, ProductResponse, ProductDetailResponse
from .supplier import SupplierCreate, SupplierUpdate, SupplierResponse, SupplierBrief
from .user import UserCreate, UserUpdate, UserResponse, LoginRequest, TokenResponse
from .client import (
    ClientCreate, ClientUpdate, ClientResponse,
    ClientHistoryCreate, ClientHistoryResponse,
)
from .banner import BannerResponse

__all__ = [
    # Category
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CategoryWithSubCategories",
    "SubCategoryBrief",
    "SubCategoryCreate",
    "SubCategoryUpdate",
    "SubCategoryResponse",
    # Product
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "ProductDetailResponse",
    # Supplier
    "SupplierCreate",
    "SupplierUpdate",
    "SupplierResponse",
    "SupplierBrief",
    # User
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "LoginRequest",
    "TokenResponse",
    # Client
    "ClientCreate",
    "ClientUpdate",
    "ClientResponse",
    "ClientHistoryCreate",
    "ClientHistoryResponse",
    # Banner
    "BannerResponse",
]
