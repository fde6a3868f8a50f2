"""
Homepage and banner routes
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Banner, Category, Supplier
from app.schemas import BannerResponse, CategoryResponse, SupplierBrief
from app.services.file_storage_service import (
    BANNER_IMAGE_CONTENT_TYPES,
    BANNER_IMAGE_EXTENSIONS,
    delete_image,
    save_image,
    validate_image_upload,
)
from app.utils.display_time import with_display_dates
from app.utils.pagination import page_offset, pagination_meta, paginated_response

logger = logging.getLogger(__name__)
router = APIRouter()

IMAGE_KIND = "banners"


def _get_banner_or_404(db: Session, banner_id: UUID) -> Banner:
    banner = db.query(Banner).filter(Banner.id == banner_id).first()
    if not banner:
        raise HTTPException(status_code=404, detail="Banner not found")
    return banner


def _check_links(db: Session, category_id: Optional[UUID], supplier_id: Optional[UUID]) -> None:
    if category_id is not None and not db.query(Category.id).filter(Category.id == category_id).first():
        raise HTTPException(status_code=404, detail="Category not found")
    if supplier_id is not None and not db.query(Supplier.id).filter(Supplier.id == supplier_id).first():
        raise HTTPException(status_code=404, detail="Supplier not found")


async def _store_banner_image(upload: UploadFile) -> str:
    content = await upload.read()
    ok, error = validate_image_upload(
        upload.filename,
        content,
        upload.content_type,
        allowed_extensions=BANNER_IMAGE_EXTENSIONS,
        allowed_content_types=BANNER_IMAGE_CONTENT_TYPES,
    )
    if not ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)
    return save_image(IMAGE_KIND, upload.filename, content)


def _banner_page(db: Session, page: int, limit: int):
    query = db.query(Banner)
    total = query.count()
    banners = query.order_by(Banner.created_at.desc()).offset(page_offset(page, limit)).limit(limit).all()
    return [with_display_dates(BannerResponse.model_validate(b).model_dump()) for b in banners], total


@router.get("/")
def get_homepage(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    """
    Everything the storefront homepage renders in one call: a page of
    banners, all categories and all suppliers (with image URLs).
    """
    banners, total = _banner_page(db, page, limit)
    categories = db.query(Category).order_by(Category.name.asc()).all()
    suppliers = db.query(Supplier).order_by(Supplier.company_name.asc()).all()
    return {
        "code": 200,
        "error": False,
        "message": "Homepage data fetched",
        "pagination": pagination_meta(total, page, limit, len(banners)),
        "data": {
            "banners": banners,
            "categories": [CategoryResponse.model_validate(c).model_dump() for c in categories],
            "suppliers": [SupplierBrief.model_validate(s).model_dump() for s in suppliers],
        },
    }


@router.post("/banner", response_model=BannerResponse, status_code=status.HTTP_201_CREATED)
async def create_banner(
    description: str = Form(...),
    category_id: Optional[UUID] = Form(None),
    supplier_id: Optional[UUID] = Form(None),
    banner_image: Optional[UploadFile] = File(None, alias="bannerImage"),
    db: Session = Depends(get_db),
):
    """Create a banner (multipart). Image: jpeg/jpg/png/gif, 5MB max."""
    if banner_image is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Banner image is required")
    if not description.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Description is required")
    _check_links(db, category_id, supplier_id)
    image_url = await _store_banner_image(banner_image)
    banner = Banner(
        banner_image=image_url,
        description=description.strip(),
        category_id=category_id,
        supplier_id=supplier_id,
    )
    db.add(banner)
    db.commit()
    db.refresh(banner)
    logger.info(f"Created banner {banner.id}")
    return banner


@router.get("/admin/banner")
def list_banners(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    banners, total = _banner_page(db, page, limit)
    return paginated_response("Banners fetched", banners, total, page, limit)


@router.get("/admin/banner/{banner_id}", response_model=BannerResponse)
def get_banner(banner_id: UUID, db: Session = Depends(get_db)):
    return _get_banner_or_404(db, banner_id)


@router.put("/admin/banner/{banner_id}", response_model=BannerResponse)
async def update_banner(
    banner_id: UUID,
    description: Optional[str] = Form(None),
    category_id: Optional[UUID] = Form(None),
    supplier_id: Optional[UUID] = Form(None),
    banner_image: Optional[UploadFile] = File(None, alias="bannerImage"),
    db: Session = Depends(get_db),
):
    """Update banner fields; a new image replaces (and removes) the old one"""
    banner = _get_banner_or_404(db, banner_id)
    _check_links(db, category_id, supplier_id)
    if description is not None:
        banner.description = description.strip()
    if category_id is not None:
        banner.category_id = category_id
    if supplier_id is not None:
        banner.supplier_id = supplier_id

    old_image = None
    if banner_image is not None:
        old_image = banner.banner_image
        banner.banner_image = await _store_banner_image(banner_image)

    db.commit()
    db.refresh(banner)
    delete_image(old_image)
    return banner


@router.delete("/admin/banner/{banner_id}")
def delete_banner(banner_id: UUID, db: Session = Depends(get_db)):
    banner = _get_banner_or_404(db, banner_id)
    image_url = banner.banner_image
    db.delete(banner)
    db.commit()
    delete_image(image_url)
    return {"message": "Banner deleted successfully"}
