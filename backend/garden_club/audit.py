"""Audit logging utilities."""
from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID

from fastapi import Request
from sqlalchemy.orm import Session

from garden_club.models import AuditLog, User


def client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def log_action(
    db: Session,
    actor: Optional[User],
    action: str,
    resource_type: str,
    resource_id: Any,
    before: Optional[dict] = None,
    after: Optional[dict] = None,
    ip: Optional[str] = None,
) -> AuditLog:
    """Add an audit entry to the current transaction.

    Args:
        db: Database session (the caller commits)
        actor: Acting user (None for system actions)
        action: e.g. 'create_assignment', 'delete_user'
        resource_type: 'plant_care', 'user', 'plant', 'site_content', ...
        resource_id: Id or key of the resource
        before: State before change (None for creates)
        after: State after change (None for deletes)
    """
    entry = AuditLog(
        actor_user_id=actor.id if actor else None,
        actor_type="USER" if actor else "SYSTEM",
        action=action,
        resource_type=resource_type,
        resource_id=str(resource_id),
        ip=ip,
        details={"before": before, "after": after},
    )
    db.add(entry)
    return entry


def entity_to_dict(entity: Any) -> dict:
    """Convert an SQLAlchemy entity to a JSON-safe dict for logging."""
    result = {}
    for column in entity.__table__.columns:
        if column.name == "password_hash":
            continue
        value = getattr(entity, column.name)
        if isinstance(value, (datetime, date)):
            value = value.isoformat()
        elif isinstance(value, UUID):
            value = str(value)
        elif hasattr(value, "value"):
            value = value.value
        result[column.name] = value
    return result
