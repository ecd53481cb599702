"""Plant records."""
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload, selectinload

from garden_club.audit import entity_to_dict, log_action
from garden_club.errors import NotFound, ValidationError
from garden_club.models import CheckIn, Plant, User
from garden_club.schemas import PlantWrite


def normalize_text(value: Optional[str]) -> Optional[str]:
    """Trim incoming string data; blank strings become None."""
    if value is None:
        return None
    return value.strip() or None


def _apply(plant: Plant, data: PlantWrite) -> None:
    name = normalize_text(data.name)
    if not name:
        raise ValidationError("Plant name is required")
    plant.name = name
    plant.description = normalize_text(data.description)
    plant.image_url = normalize_text(data.image_url)
    plant.water_amount = normalize_text(data.water_amount)
    plant.water_schedule = normalize_text(data.water_schedule)
    plant.care_notes = normalize_text(data.care_notes)


def list_plants(db: Session) -> List[Plant]:
    return db.query(Plant).order_by(Plant.name).all()


def get_plant(db: Session, plant_id: UUID, with_check_ins: bool = False) -> Plant:
    q = db.query(Plant)
    if with_check_ins:
        q = q.options(selectinload(Plant.check_ins).joinedload(CheckIn.user))
    plant = q.filter(Plant.id == plant_id).first()
    if not plant:
        raise NotFound("Plant not found")
    return plant


def create_plant(db: Session, admin: User, data: PlantWrite, ip: Optional[str] = None) -> Plant:
    plant = Plant()
    _apply(plant, data)
    db.add(plant)
    db.flush()
    log_action(db, admin, "create_plant", "plant", plant.id, after=entity_to_dict(plant), ip=ip)
    db.commit()
    db.refresh(plant)
    return plant


def update_plant(db: Session, admin: User, plant_id: UUID, data: PlantWrite, ip: Optional[str] = None) -> Plant:
    plant = get_plant(db, plant_id)
    before = entity_to_dict(plant)
    _apply(plant, data)
    db.flush()
    log_action(db, admin, "update_plant", "plant", plant.id, before, entity_to_dict(plant), ip=ip)
    db.commit()
    db.refresh(plant)
    return plant


def delete_plant(db: Session, admin: User, plant_id: UUID, ip: Optional[str] = None) -> None:
    """Deleting a plant also removes its assignments and check-ins."""
    plant = get_plant(db, plant_id)
    before = entity_to_dict(plant)
    db.delete(plant)
    log_action(db, admin, "delete_plant", "plant", plant_id, before=before, ip=ip)
    db.commit()
