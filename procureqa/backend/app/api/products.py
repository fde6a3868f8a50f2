"""
Products API routes (admin), including the supplier spreadsheet bulk upload
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.database import get_db
from app.models import Category, Product, SubCategory, Supplier
from app.schemas import ProductCreate, ProductDetailResponse, ProductResponse, ProductUpdate
from app.services.file_storage_service import transient_upload
from app.services.product_import_service import (
    ProductImportService,
    SpreadsheetParseError,
    parse_spreadsheet,
)
from app.utils.display_time import with_display_dates
from app.utils.pagination import page_offset, paginated_response

logger = logging.getLogger(__name__)
router = APIRouter()


def _product_row(product: Product) -> dict:
    return with_display_dates(ProductResponse.model_validate(product).model_dump())


def _get_product_or_404(db: Session, product_id: UUID) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def _item_code_taken(db: Session, item_code: str, exclude_id: Optional[UUID] = None) -> bool:
    query = db.query(Product.id).filter(Product.item_code == item_code)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    return query.first() is not None


def _resolve_refs(db: Session, category_id: UUID, sub_category_id: UUID):
    """Load the category and subcategory a product points at; the subcategory must belong to the category."""
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    sub_category = db.query(SubCategory).filter(SubCategory.id == sub_category_id).first()
    if not sub_category:
        raise HTTPException(status_code=404, detail="Subcategory not found")
    if sub_category.category_id != category.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Subcategory does not belong to the selected category",
        )
    return category, sub_category


def _paginate(query, page: int, limit: int, message: str, empty_message: Optional[str] = None):
    total = query.count()
    if total == 0 and empty_message:
        raise HTTPException(status_code=404, detail=empty_message)
    products = (
        query.order_by(Product.created_at.desc(), Product.product_name.asc())
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    return paginated_response(message, [_product_row(p) for p in products], total, page, limit)


def _import_upload(db: Session, supplier_id: UUID, filename: Optional[str], contents: bytes):
    """Parse and import an uploaded sheet. Blocking: pandas and one commit per created row."""
    with transient_upload(filename, contents) as path:
        rows = parse_spreadsheet(path)
        return ProductImportService.import_rows(db, supplier_id, rows)


@router.post("/bulk-upload/{supplier_id}")
async def bulk_upload_products(
    supplier_id: UUID,
    excel_file: Optional[UploadFile] = File(None, alias="excelFile"),
    db: Session = Depends(get_db),
):
    """
    Import products for a supplier from a spreadsheet (multipart field "excelFile").

    Columns: Product Name, Item Code*, Unit*, Group, Brand, Description.
    Group/Brand become category/subcategory (created when new). Rows are
    reported individually; only an unreadable file fails the request.
    The import runs in the threadpool so other requests are served meanwhile.
    """
    if excel_file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Please upload an Excel file.")

    contents = await excel_file.read()
    logger.info(f"📥 Bulk upload for supplier {supplier_id}: {excel_file.filename} ({len(contents)} bytes)")

    try:
        result = await run_in_threadpool(_import_upload, db, supplier_id, excel_file.filename, contents)
    except SpreadsheetParseError as e:
        logger.error(f"❌ Could not read {excel_file.filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error processing the Excel file.",
        )

    return result.to_response()


@router.get("/search/q")
def search_products(
    q: str = Query(..., min_length=1, description="Matches product name or item code"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    term = f"%{q.strip().lower()}%"
    query = db.query(Product).filter(
        or_(
            func.lower(Product.product_name).like(term),
            func.lower(Product.item_code).like(term),
        )
    )
    return _paginate(query, page, limit, "Products found", empty_message="No products found")


@router.get("/category/{category}")
def get_products_by_category(
    category: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    """Products whose category name contains the given text (case-insensitive)"""
    query = db.query(Product).filter(func.lower(Product.category_name).like(f"%{category.lower()}%"))
    return _paginate(query, page, limit, "Products fetched", empty_message="No products found for this category")


@router.get("/subcategory/{subcategory}")
def get_products_by_subcategory(
    subcategory: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    query = db.query(Product).filter(func.lower(Product.sub_category_name).like(f"%{subcategory.lower()}%"))
    return _paginate(query, page, limit, "Products fetched", empty_message="No products found for this subcategory")


@router.get("/categories")
def list_category_names(db: Session = Depends(get_db)):
    """All categories as {id, name}, for the product form"""
    categories = db.query(Category.id, Category.name).order_by(Category.name.asc()).all()
    return [{"id": c.id, "name": c.name} for c in categories]


@router.get("/subcategories")
def list_subcategory_names(db: Session = Depends(get_db)):
    sub_categories = db.query(SubCategory).order_by(SubCategory.name.asc()).all()
    if not sub_categories:
        raise HTTPException(status_code=404, detail="No subcategories found")
    return [{"id": s.id, "name": s.name, "category_id": s.category_id} for s in sub_categories]


@router.get("/subcategories/by/{category_id}")
def list_subcategories_for_category(category_id: UUID, db: Session = Depends(get_db)):
    sub_categories = (
        db.query(SubCategory)
        .filter(SubCategory.category_id == category_id)
        .order_by(SubCategory.name.asc())
        .all()
    )
    return [{"id": s.id, "name": s.name, "category_id": s.category_id} for s in sub_categories]


@router.post("/", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(product: ProductCreate, db: Session = Depends(get_db)):
    """Create a single product. Category and subcategory are required."""
    if product.category_id is None or product.sub_category_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category & Subcategory are required")
    if not db.query(Supplier.id).filter(Supplier.id == product.supplier_id).first():
        raise HTTPException(status_code=404, detail="Supplier not found")
    item_code = product.item_code.strip()
    if _item_code_taken(db, item_code):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Item code {item_code} already exists")

    category, sub_category = _resolve_refs(db, product.category_id, product.sub_category_id)
    db_product = Product(
        product_name=product.product_name.strip(),
        item_code=item_code,
        unit=product.unit.strip(),
        description=product.description,
        category_id=category.id,
        category_name=category.name,
        sub_category_id=sub_category.id,
        sub_category_name=sub_category.name,
        sub_category_category_id=sub_category.category_id,
        supplier_id=product.supplier_id,
    )
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    logger.info(f"Created product {db_product.item_code} for supplier {db_product.supplier_id}")
    return db_product


@router.get("/")
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    return _paginate(db.query(Product), page, limit, "Products fetched")


@router.get("/{product_id}", response_model=ProductDetailResponse)
def get_product(product_id: UUID, db: Session = Depends(get_db)):
    product = _get_product_or_404(db, product_id)
    payload = ProductDetailResponse.model_validate(product)
    payload.supplier_company_name = product.supplier.company_name if product.supplier else None
    return payload


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(product_id: UUID, product_update: ProductUpdate, db: Session = Depends(get_db)):
    product = _get_product_or_404(db, product_id)
    update_data = product_update.model_dump(exclude_unset=True)

    if update_data.get("item_code") is not None:
        update_data["item_code"] = update_data["item_code"].strip()
        if _item_code_taken(db, update_data["item_code"], exclude_id=product.id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Item code {update_data['item_code']} already exists",
            )

    # Re-point category/subcategory together so the embedded names stay consistent
    if "category_id" in update_data or "sub_category_id" in update_data:
        category_id = update_data.pop("category_id", product.category_id)
        sub_category_id = update_data.pop("sub_category_id", product.sub_category_id)
        if category_id is None or sub_category_id is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category & Subcategory are required")
        category, sub_category = _resolve_refs(db, category_id, sub_category_id)
        product.category_id = category.id
        product.category_name = category.name
        product.sub_category_id = sub_category.id
        product.sub_category_name = sub_category.name
        product.sub_category_category_id = sub_category.category_id

    for field, value in update_data.items():
        if value is not None:
            setattr(product, field, value)

    db.commit()
    db.refresh(product)
    return product


@router.delete("/{product_id}")
def delete_product(product_id: UUID, db: Session = Depends(get_db)):
    product = _get_product_or_404(db, product_id)
    db.delete(product)
    db.commit()
    logger.info(f"Deleted product {product_id}")
    return {"message": "Product deleted successfully"}
