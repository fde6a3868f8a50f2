"""
Suppliers API routes
"""
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Category, SubCategory, Supplier
from app.schemas import SupplierBrief, SupplierCreate, SupplierResponse, SupplierUpdate
from app.schemas.supplier import CONTACT_NUMBER_MESSAGE, is_valid_contact_number
from app.services.file_storage_service import delete_image, save_image, validate_image_upload
from app.utils.display_time import with_display_dates
from app.utils.pagination import page_offset, paginated_response

logger = logging.getLogger(__name__)
router = APIRouter()

LOGO_KIND = "suppliers"


def _get_supplier_or_404(db: Session, supplier_id: UUID) -> Supplier:
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id).first()
    if not supplier:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return supplier


def _email_taken(db: Session, email: str, exclude_id: Optional[UUID] = None) -> bool:
    query = db.query(Supplier.id).filter(func.lower(Supplier.email) == func.lower(email))
    if exclude_id is not None:
        query = query.filter(Supplier.id != exclude_id)
    return query.first() is not None


def _load_categories(db: Session, category_ids: List[UUID]) -> List[Category]:
    if not category_ids:
        return []
    categories = db.query(Category).filter(Category.id.in_(category_ids)).all()
    if len(categories) != len(set(category_ids)):
        raise HTTPException(status_code=404, detail="Category not found")
    return categories


def _load_sub_categories(db: Session, sub_category_ids: List[UUID]) -> List[SubCategory]:
    if not sub_category_ids:
        return []
    sub_categories = db.query(SubCategory).filter(SubCategory.id.in_(sub_category_ids)).all()
    if len(sub_categories) != len(set(sub_category_ids)):
        raise HTTPException(status_code=404, detail="Subcategory not found")
    return sub_categories


def _supplier_row(supplier: Supplier) -> dict:
    return with_display_dates(SupplierResponse.model_validate(supplier).model_dump())


@router.get("/")
def list_suppliers(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    query = db.query(Supplier)
    total = query.count()
    suppliers = (
        query.order_by(Supplier.created_at.desc(), Supplier.company_name.asc())
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    return paginated_response("Suppliers fetched", [_supplier_row(s) for s in suppliers], total, page, limit)


@router.get("/search/name", response_model=List[SupplierResponse])
def search_suppliers_by_name(
    name: str = Query(..., min_length=1, description="Matches first, last or company name"),
    db: Session = Depends(get_db),
):
    term = f"%{name.strip().lower()}%"
    suppliers = db.query(Supplier).filter(
        or_(
            func.lower(Supplier.first_name).like(term),
            func.lower(Supplier.last_name).like(term),
            func.lower(Supplier.company_name).like(term),
        )
    ).order_by(Supplier.company_name.asc()).all()
    if not suppliers:
        raise HTTPException(status_code=404, detail="No suppliers found")
    return suppliers


@router.get("/search/q", response_model=List[SupplierBrief])
def search_suppliers_by_company(
    q: str = Query(..., min_length=1, description="Matches company name"),
    db: Session = Depends(get_db),
):
    """Lightweight supplier search for pickers. Returns id, company name and logo."""
    term = f"%{q.strip().lower()}%"
    suppliers = (
        db.query(Supplier)
        .filter(func.lower(Supplier.company_name).like(term))
        .order_by(Supplier.company_name.asc())
        .all()
    )
    if not suppliers:
        raise HTTPException(status_code=404, detail="No suppliers found")
    return suppliers


@router.get("/name/logo")
def list_supplier_names_and_logos(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    query = db.query(Supplier)
    total = query.count()
    suppliers = (
        query.order_by(Supplier.company_name.asc())
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    data = [SupplierBrief.model_validate(s).model_dump() for s in suppliers]
    return paginated_response("Suppliers fetched", data, total, page, limit)


@router.post("/suppliers", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
async def create_supplier_with_logo(
    first_name: str = Form(...),
    last_name: Optional[str] = Form(None),
    email: str = Form(...),
    company_name: str = Form(...),
    company_type: Optional[str] = Form(None),
    office_address: Optional[str] = Form(None),
    contact_number: str = Form(...),
    category_ids: List[UUID] = Form([]),
    sub_category_ids: List[UUID] = Form([]),
    company_logo: Optional[UploadFile] = File(None, alias="companyLogo"),
    db: Session = Depends(get_db),
):
    """Create a supplier from a multipart form. The company logo is required."""
    if company_logo is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Company logo is required")
    contact_number = contact_number.strip()
    if not is_valid_contact_number(contact_number):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=CONTACT_NUMBER_MESSAGE)
    email = email.strip().lower()
    if _email_taken(db, email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Supplier with this email already exists")

    content = await company_logo.read()
    ok, error = validate_image_upload(company_logo.filename, content, company_logo.content_type)
    if not ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    categories = _load_categories(db, category_ids)
    sub_categories = _load_sub_categories(db, sub_category_ids)
    logo_url = save_image(LOGO_KIND, company_logo.filename, content)
    supplier = Supplier(
        first_name=first_name.strip(),
        last_name=last_name,
        email=email,
        company_name=company_name.strip(),
        company_type=company_type,
        office_address=office_address,
        contact_number=contact_number,
        company_logo=logo_url,
        product_categories=categories,
        product_sub_categories=sub_categories,
    )
    db.add(supplier)
    try:
        db.commit()
    except Exception:
        db.rollback()
        delete_image(logo_url)
        raise
    db.refresh(supplier)
    logger.info(f"Created supplier {supplier.company_name} ({supplier.id})")
    return supplier


@router.post("/", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
def create_supplier(supplier: SupplierCreate, db: Session = Depends(get_db)):
    if _email_taken(db, supplier.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Supplier with this email already exists")
    data = supplier.model_dump(exclude={"category_ids", "sub_category_ids"})
    db_supplier = Supplier(
        **data,
        product_categories=_load_categories(db, supplier.category_ids),
        product_sub_categories=_load_sub_categories(db, supplier.sub_category_ids),
    )
    db.add(db_supplier)
    db.commit()
    db.refresh(db_supplier)
    return db_supplier


@router.get("/{supplier_id}", response_model=SupplierResponse)
def get_supplier(supplier_id: UUID, db: Session = Depends(get_db)):
    return _get_supplier_or_404(db, supplier_id)


@router.put("/{supplier_id}", response_model=SupplierResponse)
def update_supplier(supplier_id: UUID, supplier_update: SupplierUpdate, db: Session = Depends(get_db)):
    supplier = _get_supplier_or_404(db, supplier_id)
    update_data = supplier_update.model_dump(exclude_unset=True)

    if update_data.get("email"):
        update_data["email"] = update_data["email"].strip().lower()
        if _email_taken(db, update_data["email"], exclude_id=supplier.id):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Supplier with this email already exists")
    if "category_ids" in update_data:
        supplier.product_categories = _load_categories(db, update_data.pop("category_ids") or [])
    if "sub_category_ids" in update_data:
        supplier.product_sub_categories = _load_sub_categories(db, update_data.pop("sub_category_ids") or [])

    for field, value in update_data.items():
        setattr(supplier, field, value)

    db.commit()
    db.refresh(supplier)
    return supplier


@router.delete("/{supplier_id}")
def delete_supplier(supplier_id: UUID, db: Session = Depends(get_db)):
    """Delete a supplier, its products and its stored logo"""
    supplier = _get_supplier_or_404(db, supplier_id)
    logo_url = supplier.company_logo
    db.delete(supplier)
    db.commit()
    delete_image(logo_url)
    logger.info(f"Deleted supplier {supplier_id}")
    return {"message": "Supplier deleted successfully"}
