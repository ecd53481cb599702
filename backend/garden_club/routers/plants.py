"""Plant endpoints: public reads, admin writes."""
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from garden_club.audit import client_ip
from garden_club.auth import require_admin
from garden_club.database import get_db
from garden_club.models import User
from garden_club.schemas import (
    MessageResponse,
    PlantDetailEnvelope,
    PlantEnvelope,
    PlantListEnvelope,
    PlantWrite,
)
from garden_club.services import plants

router = APIRouter(prefix="/api/plants", tags=["plants"])


@router.get("", response_model=PlantListEnvelope)
def list_plants(db: Session = Depends(get_db)):
    return {"plants": plants.list_plants(db)}


@router.post("", response_model=PlantEnvelope, status_code=201)
def create_plant(
    request: Request,
    payload: PlantWrite,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return {"plant": plants.create_plant(db, admin, payload, ip=client_ip(request))}


@router.get("/{plant_id}", response_model=PlantDetailEnvelope)
def get_plant(plant_id: UUID, db: Session = Depends(get_db)):
    """Plant with its check-in history, newest first."""
    return {"plant": plants.get_plant(db, plant_id, with_check_ins=True)}


@router.put("/{plant_id}", response_model=PlantEnvelope)
def update_plant(
    request: Request,
    plant_id: UUID,
    payload: PlantWrite,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return {"plant": plants.update_plant(db, admin, plant_id, payload, ip=client_ip(request))}


@router.delete("/{plant_id}", response_model=MessageResponse)
def delete_plant(
    request: Request,
    plant_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    plants.delete_plant(db, admin, plant_id, ip=client_ip(request))
    return {"message": "Plant deleted successfully"}
