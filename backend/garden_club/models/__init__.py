"""All SQLAlchemy models – re-exported for Alembic and app use."""

from garden_club.models.user import User, RefreshToken, Role
from garden_club.models.plant import Plant, PlantCare, CheckIn, DEFAULT_TASK_TYPE
from garden_club.models.activity import ActivityPost, ActivityLike
from garden_club.models.content import SiteContent, AuditLog

__all__ = [
    "User", "RefreshToken", "Role",
    "Plant", "PlantCare", "CheckIn", "DEFAULT_TASK_TYPE",
    "ActivityPost", "ActivityLike",
    "SiteContent", "AuditLog",
]
