"""
Categories API routes (admin)
"""
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Category, SubCategory
from app.schemas import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    CategoryWithSubCategories,
)
from app.services.file_storage_service import delete_image, save_image, validate_image_upload
from app.utils.display_time import with_display_dates
from app.utils.pagination import page_offset, paginated_response

logger = logging.getLogger(__name__)
router = APIRouter()

MIN_CATEGORY_NAME_LENGTH = 3
IMAGE_KIND = "categories"


def _get_category_or_404(db: Session, category_id: UUID) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


def _check_name(db: Session, name: str, exclude_id: Optional[UUID] = None) -> str:
    """Reject short names and case-insensitive duplicates."""
    name = (name or "").strip()
    if len(name) < MIN_CATEGORY_NAME_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Category name must be at least {MIN_CATEGORY_NAME_LENGTH} characters long",
        )
    query = db.query(Category.id).filter(func.lower(Category.name) == func.lower(name))
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category already exists")
    return name


async def _read_image(upload: UploadFile) -> bytes:
    content = await upload.read()
    ok, error = validate_image_upload(upload.filename, content, upload.content_type)
    if not ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)
    return content


@router.post("/categories", response_model=CategoryWithSubCategories, status_code=status.HTTP_201_CREATED)
def create_category(category: CategoryCreate, db: Session = Depends(get_db)):
    """
    Create a category, optionally with subcategories.
    Repeated subcategory names in the request are created once.
    """
    name = _check_name(db, category.name)
    db_category = Category(name=name, description=category.description)
    db.add(db_category)
    db.flush()

    seen = set()
    for sub_name in category.subcategories:
        if sub_name.lower() in seen:
            continue
        seen.add(sub_name.lower())
        db.add(SubCategory(name=sub_name, category_id=db_category.id))

    db.commit()
    db.refresh(db_category)
    logger.info(f"Created category {db_category.name} with {len(seen)} subcategories")
    return db_category


@router.post("/category", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category_with_image(
    name: str = Form(...),
    description: Optional[str] = Form(None),
    category_image: Optional[UploadFile] = File(None, alias="categoryImage"),
    db: Session = Depends(get_db),
):
    """Create a category from a multipart form with an optional image (jpeg/jpg/png, 5MB)"""
    name = _check_name(db, name)
    image_path = None
    if category_image is not None:
        content = await _read_image(category_image)
        image_path = save_image(IMAGE_KIND, category_image.filename, content)

    db_category = Category(name=name, description=description, image_path=image_path)
    db.add(db_category)
    try:
        db.commit()
    except Exception:
        db.rollback()
        delete_image(image_path)
        raise
    db.refresh(db_category)
    return db_category


@router.get("/categories", response_model=List[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    return db.query(Category).order_by(Category.created_at.desc(), Category.name.asc()).all()


@router.get("/categories/{category_id}", response_model=CategoryWithSubCategories)
def get_category(category_id: UUID, db: Session = Depends(get_db)):
    return _get_category_or_404(db, category_id)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
def update_category(category_id: UUID, category_update: CategoryUpdate, db: Session = Depends(get_db)):
    """Rename or re-describe a category. Products keep the name they were created with."""
    category = _get_category_or_404(db, category_id)
    update_data = category_update.model_dump(exclude_unset=True)
    if "name" in update_data:
        update_data["name"] = _check_name(db, update_data["name"], exclude_id=category.id)
    for field, value in update_data.items():
        setattr(category, field, value)
    db.commit()
    db.refresh(category)
    return category


@router.put("/categories/{category_id}/image", response_model=CategoryResponse)
async def update_category_image(
    category_id: UUID,
    category_image: UploadFile = File(..., alias="categoryImage"),
    db: Session = Depends(get_db),
):
    category = _get_category_or_404(db, category_id)
    content = await _read_image(category_image)
    old_image = category.image_path
    category.image_path = save_image(IMAGE_KIND, category_image.filename, content)
    db.commit()
    db.refresh(category)
    delete_image(old_image)
    return category


@router.delete("/categories/{category_id}")
def delete_category(category_id: UUID, db: Session = Depends(get_db)):
    """Delete a category, its subcategories and its stored image"""
    category = _get_category_or_404(db, category_id)
    image_path = category.image_path
    db.delete(category)
    db.commit()
    delete_image(image_path)
    logger.info(f"Deleted category {category_id}")
    return {"message": "Category deleted successfully"}


@router.get("/category")
def list_categories_paginated(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    search: Optional[str] = Query(None, description="Matches name or description"),
    db: Session = Depends(get_db),
):
    query = db.query(Category)
    if search and search.strip():
        term = f"%{search.strip().lower()}%"
        query = query.filter(
            or_(
                func.lower(Category.name).like(term),
                func.lower(Category.description).like(term),
            )
        )
    total = query.count()
    categories = (
        query.order_by(Category.created_at.desc(), Category.name.asc())
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    data = [with_display_dates(CategoryResponse.model_validate(c).model_dump()) for c in categories]
    return paginated_response("Categories fetched", data, total, page, limit)


@router.get("/search", response_model=List[CategoryResponse])
def search_categories(q: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    term = f"%{q.strip().lower()}%"
    categories = (
        db.query(Category)
        .filter(func.lower(Category.name).like(term))
        .order_by(Category.name.asc())
        .all()
    )
    if not categories:
        raise HTTPException(status_code=404, detail="No categories found")
    return categories
