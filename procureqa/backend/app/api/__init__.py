"""
API routes for ProcureQA
"""
from .products import router as products_router
from .categories import router as categories_router
from .subcategories import router as subcategories_router
from .suppliers import router as suppliers_router
from .users import router as users_router
from .clients import router as clients_router
from .client_history import router as client_history_router
from .banners import router as banners_router
from .search import router as search_router

__all__ = [
    "products_router",
    "categories_router",
    "subcategories_router",
    "suppliers_router",
    "users_router",
    "clients_router",
    "client_history_router",
    "banners_router",
    "search_router",
]
