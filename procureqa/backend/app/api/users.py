"""
Admin panel user management and login
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import User
from app.schemas import LoginRequest, TokenResponse, UserCreate, UserResponse, UserUpdate
from app.utils.auth_internal import (
    create_access_token,
    hash_password,
    validate_email,
    validate_new_password,
    validate_phone_number,
    validate_role,
    validate_username,
    verify_password,
)
from app.utils.display_time import with_display_dates
from app.utils.pagination import page_offset, paginated_response

logger = logging.getLogger(__name__)
router = APIRouter()

SORTABLE_FIELDS = {
    "username": User.username,
    "email": User.email,
    "role": User.role,
    "createdAt": User.created_at,
    "created_at": User.created_at,
}

# Field name -> rule; each rule returns an error message or None
FIELD_RULES = {
    "username": validate_username,
    "email": validate_email,
    "password": validate_new_password,
    "role": validate_role,
    "phone_number": validate_phone_number,
}


def _check_fields(data: dict) -> None:
    for field, rule in FIELD_RULES.items():
        if field in data:
            error = rule(data[field])
            if error:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)


def _check_unique(db: Session, email: Optional[str], username: Optional[str], exclude_id: Optional[UUID] = None) -> None:
    if email:
        query = db.query(User.id).filter(func.lower(User.email) == func.lower(email))
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        if query.first():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is already registered")
    if username:
        query = db.query(User.id).filter(func.lower(User.username) == func.lower(username))
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        if query.first():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username is already taken")


def _get_user_or_404(db: Session, user_id: UUID) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("/users", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def signup(user: UserCreate, db: Session = Depends(get_db)):
    """
    Create an admin panel user and return an access token.

    Username: 3-20 letters/digits. Password: 8-15 chars with upper, lower,
    digit and special. Role: Admin or Sales. Phone: +974 XXXXXXXX.
    """
    data = user.model_dump()
    data["email"] = data["email"].strip().lower()
    _check_fields(data)
    _check_unique(db, data["email"], data["username"])

    db_user = User(
        username=data["username"],
        email=data["email"],
        password_hash=hash_password(data["password"]),
        role=data["role"],
        phone_number=data["phone_number"],
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"✅ User {db_user.username} registered as {db_user.role}")
    return TokenResponse(
        access_token=create_access_token(db_user.id, db_user.role),
        user=UserResponse.model_validate(db_user),
    )


@router.get("/users")
def list_users(
    email: Optional[str] = Query(None, description="Filter by email (substring)"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="field:asc|desc"),
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, alias="perPage"),
    db: Session = Depends(get_db),
):
    query = db.query(User)
    if email:
        query = query.filter(func.lower(User.email).like(f"%{email.strip().lower()}%"))

    order = User.created_at.desc()
    if sort_by:
        field, _, direction = sort_by.partition(":")
        column = SORTABLE_FIELDS.get(field)
        if column is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Cannot sort by {field}")
        order = column.desc() if direction.lower() == "desc" else column.asc()

    total = query.count()
    users = query.order_by(order).offset(page_offset(page, per_page)).limit(per_page).all()
    data = [with_display_dates(UserResponse.model_validate(u).model_dump()) for u in users]
    return paginated_response("Users fetched", data, total, page, per_page)


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(user_id: UUID, user_update: UserUpdate, db: Session = Depends(get_db)):
    user = _get_user_or_404(db, user_id)
    data = {k: v for k, v in user_update.model_dump(exclude_unset=True).items() if v is not None}
    if "email" in data:
        data["email"] = data["email"].strip().lower()
    _check_fields(data)
    _check_unique(db, data.get("email"), data.get("username"), exclude_id=user.id)

    password = data.pop("password", None)
    if password:
        user.password_hash = hash_password(password)
    for field, value in data.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


@router.delete("/users/{user_id}")
def delete_user(user_id: UUID, db: Session = Depends(get_db)):
    user = _get_user_or_404(db, user_id)
    db.delete(user)
    db.commit()
    return {"message": "User deleted successfully"}


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(func.lower(User.email) == func.lower(credentials.email.strip())).first()
    if not user or not verify_password(credentials.password, user.password_hash):
        logger.warning(f"Failed login for {credentials.email}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email or password")
    return TokenResponse(
        access_token=create_access_token(user.id, user.role),
        user=UserResponse.model_validate(user),
    )
