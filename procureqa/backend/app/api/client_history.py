"""
Client enquiry history routes
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Client, ClientHistory
from app.schemas import ClientHistoryCreate, ClientHistoryResponse

router = APIRouter()


@router.post("/add", response_model=ClientHistoryResponse, status_code=status.HTTP_201_CREATED)
def add_client_history(entry: ClientHistoryCreate, db: Session = Depends(get_db)):
    if not db.query(Client.id).filter(Client.id == entry.client_id).first():
        raise HTTPException(status_code=404, detail="Client not found")
    history = ClientHistory(client_id=entry.client_id, enquiry_status=entry.enquiry_status)
    db.add(history)
    db.commit()
    db.refresh(history)
    return history


@router.get("/{client_id}", response_model=List[ClientHistoryResponse])
def get_client_history(client_id: UUID, db: Session = Depends(get_db)):
    """Status trail for one client, oldest first"""
    if not db.query(Client.id).filter(Client.id == client_id).first():
        raise HTTPException(status_code=404, detail="Client not found")
    return (
        db.query(ClientHistory)
        .filter(ClientHistory.client_id == client_id)
        .order_by(ClientHistory.created_at.asc())
        .all()
    )
