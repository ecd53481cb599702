"""Check-in recording: an append-only log of care events."""
import logging
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from garden_club.clock import day_window, utcnow
from garden_club.errors import Forbidden, NotFound
from garden_club.models import CheckIn, Plant, User
from garden_club.services.assignments import find_active_assignment

logger = logging.getLogger(__name__)


def _load(db: Session, check_in_id: UUID) -> CheckIn:
    return (
        db.query(CheckIn)
        .options(joinedload(CheckIn.user), joinedload(CheckIn.plant))
        .filter(CheckIn.id == check_in_id)
        .one()
    )


def record_check_in(
    db: Session,
    actor: User,
    plant_id: UUID,
    notes: Optional[str] = None,
    image_url: Optional[str] = None,
) -> CheckIn:
    if db.get(Plant, plant_id) is None:
        raise NotFound("Plant not found")

    if not actor.is_admin and find_active_assignment(db, actor.id, plant_id, utcnow()) is None:
        raise Forbidden("You are not assigned to care for this plant")

    check_in = CheckIn(user_id=actor.id, plant_id=plant_id, notes=notes, image_url=image_url)
    db.add(check_in)
    db.commit()
    logger.info("Check-in %s recorded: user=%s plant=%s", check_in.id, actor.id, plant_id)
    return _load(db, check_in.id)


def list_check_ins(
    db: Session,
    plant_id: Optional[UUID] = None,
    user_id: Optional[UUID] = None,
    limit: Optional[int] = None,
) -> List[CheckIn]:
    q = db.query(CheckIn).options(joinedload(CheckIn.user), joinedload(CheckIn.plant))
    if plant_id:
        q = q.filter(CheckIn.plant_id == plant_id)
    if user_id:
        q = q.filter(CheckIn.user_id == user_id)
    q = q.order_by(CheckIn.created_at.desc())
    if limit:
        q = q.limit(limit)
    return q.all()


def checked_in_between(db: Session, user_id: UUID, plant_id: UUID, start: datetime, end: datetime) -> bool:
    """Whether a check-in exists for (user, plant) with ``start <= created_at < end``."""
    row = (
        db.query(CheckIn.id)
        .filter(
            CheckIn.user_id == user_id,
            CheckIn.plant_id == plant_id,
            CheckIn.created_at >= start,
            CheckIn.created_at < end,
        )
        .first()
    )
    return row is not None


def checked_in_on(db: Session, user_id: UUID, plant_id: UUID, day: date) -> bool:
    start, end = day_window(day)
    return checked_in_between(db, user_id, plant_id, start, end)
