"""
ProcureQA - Main FastAPI Application
"""
import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.database import init_db

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Procurement catalog admin: suppliers, products, categories and bulk product import",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Errors go out as {code, error, message} so the admin panel reads one shape"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.status_code, "error": True, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


@app.on_event("startup")
def create_tables():
    """Create missing tables on the configured database."""
    try:
        init_db()
    except Exception as e:
        logger.exception("Startup table creation failed: %s", e)
        raise


# Import and include routers
from app.api import (  # noqa: E402
    banners_router,
    categories_router,
    client_history_router,
    clients_router,
    products_router,
    search_router,
    subcategories_router,
    suppliers_router,
    users_router,
)

app.include_router(products_router, prefix="/api/admin/products", tags=["Products"])
app.include_router(categories_router, prefix="/api/admin/cat", tags=["Categories"])
app.include_router(subcategories_router, prefix="/api/admin/sub", tags=["Subcategories"])
app.include_router(suppliers_router, prefix="/api/admin/suppliers", tags=["Suppliers"])
app.include_router(users_router, prefix="/api/admin", tags=["User Management"])
app.include_router(clients_router, prefix="/api/admin/clients", tags=["Clients"])
app.include_router(client_history_router, prefix="/api/admin/clientHistory", tags=["Client History"])
app.include_router(banners_router, prefix="/api/home", tags=["Homepage & Banners"])
# Storefront search first: /api/category/search belongs to it, not to the category router below
app.include_router(search_router, prefix="/api", tags=["Search"])
app.include_router(categories_router, prefix="/api/category", tags=["Categories"])
app.include_router(suppliers_router, prefix="/api/suppliers", tags=["Suppliers"])

# Serve uploaded images (category images, supplier logos, banners)
_IMAGES_DIR = Path(settings.IMAGES_DIR)
_IMAGES_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/images", StaticFiles(directory=str(_IMAGES_DIR)), name="images")
