"""Plant care assignment endpoints."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from garden_club.audit import client_ip
from garden_club.auth import get_current_user, get_optional_user, require_admin
from garden_club.database import get_db
from garden_club.models import User
from garden_club.schemas import (
    MessageResponse,
    PlantCareEnvelope,
    PlantCareOut,
    PlantCareWithUserOut,
    PlantCareWrite,
)
from garden_club.services import assignments

router = APIRouter(prefix="/api/plant-care", tags=["plant-care"])


@router.get("")
def list_plant_care(
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    """Admins get every assignment with member summaries; members only their own."""
    rows = assignments.list_assignments(db, user)
    schema = PlantCareWithUserOut if user is not None and user.is_admin else PlantCareOut
    return {"plantCare": [schema.model_validate(row) for row in rows]}


@router.post("", response_model=PlantCareEnvelope, status_code=201)
def create_plant_care(
    request: Request,
    payload: PlantCareWrite,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return {"plant_care": assignments.create_assignment(db, admin, payload, ip=client_ip(request))}


@router.get("/{assignment_id}", response_model=PlantCareEnvelope)
def get_plant_care(
    assignment_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return {"plant_care": assignments.get_assignment(db, user, assignment_id)}


@router.put("/{assignment_id}", response_model=PlantCareEnvelope)
def update_plant_care(
    request: Request,
    assignment_id: UUID,
    payload: PlantCareWrite,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    assignment = assignments.update_assignment(db, admin, assignment_id, payload, ip=client_ip(request))
    return {"plant_care": assignment}


@router.delete("/{assignment_id}", response_model=MessageResponse)
def delete_plant_care(
    request: Request,
    assignment_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    assignments.delete_assignment(db, admin, assignment_id, ip=client_ip(request))
    return {"message": "Plant care assignment deleted successfully"}
