"""Admin endpoints: user management and the audit trail."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from garden_club.audit import client_ip
from garden_club.auth import require_admin
from garden_club.database import get_db
from garden_club.models import AuditLog, User
from garden_club.schemas import (
    AuditLogOut,
    MessageResponse,
    UserCreate,
    UserEnvelope,
    UserListEnvelope,
    UserUpdate,
)
from garden_club.services import users

router = APIRouter(prefix="/api/admin", tags=["admin"])


# ── Users ─────────────────────────────────────────────────────

@router.get("/users", response_model=UserListEnvelope)
def list_users(db: Session = Depends(get_db), _: User = Depends(require_admin)):
    return {"users": users.list_users(db)}


@router.post("/users", response_model=UserEnvelope, status_code=201)
def create_user(
    request: Request,
    payload: UserCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return {"user": users.create_user(db, admin, payload, ip=client_ip(request))}


@router.get("/users/{user_id}", response_model=UserEnvelope)
def get_user(user_id: UUID, db: Session = Depends(get_db), _: User = Depends(require_admin)):
    return {"user": users.get_user(db, user_id)}


@router.put("/users/{user_id}", response_model=UserEnvelope)
def update_user(
    request: Request,
    user_id: UUID,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return {"user": users.update_user(db, admin, user_id, payload, ip=client_ip(request))}


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    request: Request,
    user_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    users.delete_user(db, admin, user_id, ip=client_ip(request))
    return {"message": "User deleted successfully"}


# ── Audit ─────────────────────────────────────────────────────

@router.get("/audit", response_model=list[AuditLogOut])
def list_audit(
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    return db.query(AuditLog).order_by(AuditLog.time.desc()).limit(limit).all()
