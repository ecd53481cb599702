"""Check-in endpoints."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from garden_club.auth import get_current_user, get_optional_user
from garden_club.database import get_db
from garden_club.models import User
from garden_club.schemas import CheckInCreate, CheckInEnvelope, CheckInListEnvelope
from garden_club.services import check_ins

router = APIRouter(prefix="/api/check-in", tags=["check-in"])


@router.get("", response_model=CheckInListEnvelope)
def list_check_ins(
    plant_id: Optional[UUID] = Query(default=None, alias="plantId"),
    user_id: Optional[UUID] = Query(default=None, alias="userId"),
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    if user is None:
        return {"check_ins": []}
    return {"check_ins": check_ins.list_check_ins(db, plant_id=plant_id, user_id=user_id, limit=limit)}


@router.post("", response_model=CheckInEnvelope, status_code=201)
def create_check_in(
    payload: CheckInCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    check_in = check_ins.record_check_in(db, user, payload.plant_id, payload.notes, payload.image_url)
    return {"check_in": check_in}
