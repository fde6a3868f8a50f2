"""
Clients API routes (buyer enquiries)
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Client, Product, SubCategory, Supplier
from app.schemas import ClientCreate, ClientResponse, ClientUpdate
from app.utils.display_time import with_display_dates
from app.utils.pagination import page_offset, paginated_response

logger = logging.getLogger(__name__)
router = APIRouter()

# Referenced entity -> (model, not-found message)
_REFERENCES = {
    "product_id": (Product, "Product not found"),
    "sub_category_id": (SubCategory, "Subcategory not found"),
    "supplier_id": (Supplier, "Supplier not found"),
}


def _check_references(db: Session, data: dict) -> None:
    for field, (model, message) in _REFERENCES.items():
        ref_id = data.get(field)
        if ref_id is not None and not db.query(model.id).filter(model.id == ref_id).first():
            raise HTTPException(status_code=404, detail=message)


def _email_taken(db: Session, email: str, exclude_id: Optional[UUID] = None) -> bool:
    query = db.query(Client.id).filter(func.lower(Client.email) == func.lower(email))
    if exclude_id is not None:
        query = query.filter(Client.id != exclude_id)
    return query.first() is not None


def _get_client_or_404(db: Session, client_id: UUID) -> Client:
    client = db.query(Client).filter(Client.id == client_id).first()
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


@router.get("/")
def list_clients(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    search: Optional[str] = Query(None, description="Matches name, company, email or phone"),
    db: Session = Depends(get_db),
):
    query = db.query(Client)
    if search and search.strip():
        term = f"%{search.strip().lower()}%"
        query = query.filter(
            or_(
                func.lower(Client.name).like(term),
                func.lower(Client.company_name).like(term),
                func.lower(Client.email).like(term),
                func.lower(Client.phone_no).like(term),
            )
        )
    total = query.count()
    clients = (
        query.order_by(Client.created_at.desc(), Client.name.asc())
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    data = [with_display_dates(ClientResponse.model_validate(c).model_dump()) for c in clients]
    return paginated_response("Clients fetched", data, total, page, limit)


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(client_id: UUID, db: Session = Depends(get_db)):
    return _get_client_or_404(db, client_id)


@router.post("/", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def create_client(client: ClientCreate, db: Session = Depends(get_db)):
    if _email_taken(db, client.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Client with this email already exists")
    data = client.model_dump()
    _check_references(db, data)
    db_client = Client(**data)
    db.add(db_client)
    db.commit()
    db.refresh(db_client)
    logger.info(f"Created client {db_client.email}")
    return db_client


@router.put("/{client_id}", response_model=ClientResponse)
def update_client(client_id: UUID, client_update: ClientUpdate, db: Session = Depends(get_db)):
    client = _get_client_or_404(db, client_id)
    update_data = client_update.model_dump(exclude_unset=True)
    if update_data.get("email") and _email_taken(db, update_data["email"], exclude_id=client.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Client with this email already exists")
    _check_references(db, update_data)
    for field, value in update_data.items():
        setattr(client, field, value)
    db.commit()
    db.refresh(client)
    return client


@router.delete("/{client_id}")
def delete_client(client_id: UUID, db: Session = Depends(get_db)):
    client = _get_client_or_404(db, client_id)
    db.delete(client)
    db.commit()
    return {"message": "Client deleted successfully"}
