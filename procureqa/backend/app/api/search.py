"""
Storefront product search.

Every endpoint returns the same flattened product item so the frontend can
render results without further lookups.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from app.database import get_db
from app.models import Product, Supplier
from app.utils.pagination import page_offset, paginated_response

logger = logging.getLogger(__name__)
router = APIRouter()


def _search_item(product: Product) -> dict:
    supplier = product.supplier
    return {
        "productId": product.id,
        "supplierId": supplier.id if supplier else "",
        "productName": product.product_name,
        "itemCode": product.item_code,
        "categoryName": product.category_name or "",
        "subCategoryName": product.sub_category_name or "",
        "supplierName": supplier.company_name if supplier else "",
        "supplierContactNumber": supplier.contact_number if supplier else "",
        "supplierEmailId": supplier.email if supplier else "",
    }


def _contains(column, q: Optional[str]):
    return func.lower(column).like(f"%{(q or '').strip().lower()}%")


def _run(db: Session, criterion, page: int, limit: int, message: str = "Search results"):
    query = db.query(Product).options(joinedload(Product.supplier))
    if criterion is not None:
        query = query.filter(criterion)
    total = query.count()
    products = (
        query.order_by(Product.product_name.asc(), Product.item_code.asc())
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    return paginated_response(message, [_search_item(p) for p in products], total, page, limit)


@router.get("/search")
def global_search(
    q: Optional[str] = Query(None, description="Matches product, category, subcategory name or item code"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    criterion = None
    if q and q.strip():
        criterion = or_(
            _contains(Product.product_name, q),
            _contains(Product.category_name, q),
            _contains(Product.sub_category_name, q),
            _contains(Product.item_code, q),
        )
    return _run(db, criterion, page, limit)


@router.get("/products/search")
def search_by_product_name(
    q: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    criterion = _contains(Product.product_name, q) if q else None
    return _run(db, criterion, page, limit)


@router.get("/itemcode/search")
def search_by_item_code(
    q: Optional[str] = Query(None, description="Item code prefix"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    criterion = func.lower(Product.item_code).like(f"{q.strip().lower()}%") if q else None
    return _run(db, criterion, page, limit)


@router.get("/category/search")
def search_by_category_name(
    q: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    criterion = _contains(Product.category_name, q) if q else None
    return _run(db, criterion, page, limit)


@router.get("/subcategory/search")
def search_by_sub_category_name(
    q: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(500, ge=1),
    db: Session = Depends(get_db),
):
    """Subcategory pages list everything at once, hence the larger default limit"""
    criterion = _contains(Product.sub_category_name, q) if q else None
    return _run(db, criterion, page, limit)


@router.get("/supplier/search")
def search_by_supplier_name(
    q: str = Query(..., min_length=1, description="Supplier company or contact name"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    supplier_ids = [
        row.id
        for row in db.query(Supplier.id).filter(
            or_(
                _contains(Supplier.company_name, q),
                _contains(Supplier.first_name, q),
            )
        )
    ]
    if not supplier_ids:
        raise HTTPException(status_code=404, detail="No suppliers found matching the search criteria")
    return _run(db, Product.supplier_id.in_(supplier_ids), page, limit)
