"""
Plant care assignments: who looks after which plant, and when.

An assignment is active on a calendar day ``d`` when
``start_date <= d`` and (``end_date`` is null or ``end_date >= d``).
Instants are mapped to a day in the club timezone before comparing.
Overlapping assignments for the same member and plant are allowed; lookups
that need a single one take the most recently created.
"""
import logging
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session, joinedload

from garden_club.audit import entity_to_dict, log_action
from garden_club.auth import can_modify, ensure_admin
from garden_club.clock import local_date, utcnow
from garden_club.errors import Forbidden, NotFound, ValidationError
from garden_club.models import DEFAULT_TASK_TYPE, Plant, PlantCare, User
from garden_club.schemas import PlantCareWrite

logger = logging.getLogger(__name__)


def is_active(assignment: PlantCare, on: date | datetime) -> bool:
    day = local_date(on)
    if assignment.start_date > day:
        return False
    return assignment.end_date is None or assignment.end_date >= day


def _active_filter(query: Query, day: date) -> Query:
    return query.filter(
        PlantCare.start_date <= day,
        or_(PlantCare.end_date.is_(None), PlantCare.end_date >= day),
    )


def _with_relations(query: Query) -> Query:
    return query.options(joinedload(PlantCare.plant), joinedload(PlantCare.user))


def _validate(db: Session, data: PlantCareWrite) -> None:
    if data.end_date is not None and data.end_date < data.start_date:
        raise ValidationError("endDate must not be before startDate")
    if db.get(User, data.user_id) is None:
        raise NotFound("User not found")
    if db.get(Plant, data.plant_id) is None:
        raise NotFound("Plant not found")


def _load(db: Session, assignment_id: UUID) -> PlantCare:
    assignment = (
        _with_relations(db.query(PlantCare))
        .filter(PlantCare.id == assignment_id)
        .first()
    )
    if not assignment:
        raise NotFound("Plant care assignment not found")
    return assignment


def create_assignment(
    db: Session,
    actor: Optional[User],
    data: PlantCareWrite,
    ip: Optional[str] = None,
) -> PlantCare:
    ensure_admin(actor)
    _validate(db, data)

    assignment = PlantCare(
        user_id=data.user_id,
        plant_id=data.plant_id,
        start_date=data.start_date,
        end_date=data.end_date,
        task_type=data.task_type or DEFAULT_TASK_TYPE,
        notes=data.notes,
    )
    db.add(assignment)
    db.flush()
    log_action(
        db, actor, "create_assignment", "plant_care", assignment.id,
        after=entity_to_dict(assignment), ip=ip,
    )
    db.commit()
    logger.info("Assignment %s created: user=%s plant=%s", assignment.id, data.user_id, data.plant_id)
    return _load(db, assignment.id)


def update_assignment(
    db: Session,
    actor: Optional[User],
    assignment_id: UUID,
    data: PlantCareWrite,
    ip: Optional[str] = None,
) -> PlantCare:
    ensure_admin(actor)
    assignment = db.get(PlantCare, assignment_id)
    if not assignment:
        raise NotFound("Plant care assignment not found")
    _validate(db, data)

    before = entity_to_dict(assignment)
    assignment.user_id = data.user_id
    assignment.plant_id = data.plant_id
    assignment.start_date = data.start_date
    assignment.end_date = data.end_date
    assignment.task_type = data.task_type or DEFAULT_TASK_TYPE
    assignment.notes = data.notes
    db.flush()
    log_action(
        db, actor, "update_assignment", "plant_care", assignment.id,
        before, entity_to_dict(assignment), ip=ip,
    )
    db.commit()
    db.expire(assignment)
    return _load(db, assignment_id)


def delete_assignment(db: Session, actor: Optional[User], assignment_id: UUID, ip: Optional[str] = None) -> None:
    ensure_admin(actor)
    assignment = db.get(PlantCare, assignment_id)
    if not assignment:
        raise NotFound("Plant care assignment not found")

    before = entity_to_dict(assignment)
    db.delete(assignment)
    log_action(db, actor, "delete_assignment", "plant_care", assignment_id, before=before, ip=ip)
    db.commit()
    logger.info("Assignment %s deleted", assignment_id)


def get_assignment(db: Session, actor: Optional[User], assignment_id: UUID) -> PlantCare:
    assignment = _load(db, assignment_id)
    if not can_modify(actor, assignment.user_id):
        raise Forbidden("You can only view your own assignments")
    return assignment


def list_assignments(db: Session, actor: Optional[User]) -> List[PlantCare]:
    """Admins see every assignment; members only their own; anonymous callers nothing."""
    if actor is None:
        return []
    query = _with_relations(db.query(PlantCare))
    if not actor.is_admin:
        query = query.filter(PlantCare.user_id == actor.id)
    return query.order_by(PlantCare.start_date.desc(), PlantCare.created_at.desc()).all()


def find_active_assignment(
    db: Session,
    user_id: UUID,
    plant_id: UUID,
    at: date | datetime | None = None,
) -> Optional[PlantCare]:
    day = local_date(at or utcnow())
    query = db.query(PlantCare).filter(PlantCare.user_id == user_id, PlantCare.plant_id == plant_id)
    return (
        _active_filter(query, day)
        .order_by(PlantCare.created_at.desc(), PlantCare.id.desc())
        .first()
    )


def active_assignments(db: Session, on: date) -> List[PlantCare]:
    """All assignments active on ``on``, with member and plant loaded."""
    query = _with_relations(db.query(PlantCare))
    return _active_filter(query, on).order_by(PlantCare.created_at).all()
