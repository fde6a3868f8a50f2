"""
Subcategories API routes (admin)
"""
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Category, SubCategory
from app.schemas import SubCategoryCreate, SubCategoryResponse, SubCategoryUpdate
from app.utils.display_time import with_display_dates
from app.utils.pagination import page_offset, paginated_response

logger = logging.getLogger(__name__)
router = APIRouter()


def _name_taken(db: Session, name: str, category_id: UUID, exclude_id: Optional[UUID] = None) -> bool:
    query = db.query(SubCategory.id).filter(
        func.lower(SubCategory.name) == func.lower(name),
        SubCategory.category_id == category_id,
    )
    if exclude_id is not None:
        query = query.filter(SubCategory.id != exclude_id)
    return query.first() is not None


def _get_sub_category_or_404(db: Session, sub_category_id: UUID) -> SubCategory:
    sub_category = db.query(SubCategory).filter(SubCategory.id == sub_category_id).first()
    if not sub_category:
        raise HTTPException(status_code=404, detail="Subcategory not found")
    return sub_category


@router.post(
    "/categories/{category_id}/subcategories",
    response_model=SubCategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_sub_category(category_id: UUID, sub_category: SubCategoryCreate, db: Session = Depends(get_db)):
    if not db.query(Category.id).filter(Category.id == category_id).first():
        raise HTTPException(status_code=404, detail="Category not found")
    if not sub_category.name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Subcategory name is required")
    if _name_taken(db, sub_category.name, category_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Subcategory already exists in this category",
        )
    db_sub_category = SubCategory(
        name=sub_category.name,
        description=sub_category.description,
        category_id=category_id,
    )
    db.add(db_sub_category)
    db.commit()
    db.refresh(db_sub_category)
    return db_sub_category


@router.get("/categories/{category_id}/subcategories", response_model=List[SubCategoryResponse])
def list_sub_categories_for_category(category_id: UUID, db: Session = Depends(get_db)):
    if not db.query(Category.id).filter(Category.id == category_id).first():
        raise HTTPException(status_code=404, detail="Category not found")
    return (
        db.query(SubCategory)
        .filter(SubCategory.category_id == category_id)
        .order_by(SubCategory.name.asc())
        .all()
    )


@router.put("/subcategories/{sub_category_id}", response_model=SubCategoryResponse)
def update_sub_category(sub_category_id: UUID, sub_category_update: SubCategoryUpdate, db: Session = Depends(get_db)):
    sub_category = _get_sub_category_or_404(db, sub_category_id)
    update_data = sub_category_update.model_dump(exclude_unset=True)
    if update_data.get("name") is not None:
        update_data["name"] = update_data["name"].strip()
        if not update_data["name"]:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Subcategory name is required")
        if _name_taken(db, update_data["name"], sub_category.category_id, exclude_id=sub_category.id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Subcategory already exists in this category",
            )
    for field, value in update_data.items():
        setattr(sub_category, field, value)
    db.commit()
    db.refresh(sub_category)
    return sub_category


@router.delete("/subcategories/{sub_category_id}")
def delete_sub_category(sub_category_id: UUID, db: Session = Depends(get_db)):
    sub_category = _get_sub_category_or_404(db, sub_category_id)
    db.delete(sub_category)
    db.commit()
    return {"message": "Subcategory deleted successfully"}


@router.get("/subcategories")
def list_sub_categories(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    query = db.query(SubCategory)
    total = query.count()
    sub_categories = (
        query.order_by(SubCategory.created_at.desc(), SubCategory.name.asc())
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    data = [with_display_dates(SubCategoryResponse.model_validate(s).model_dump()) for s in sub_categories]
    return paginated_response("Subcategories fetched", data, total, page, limit)
