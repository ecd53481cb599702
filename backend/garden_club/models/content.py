"""Editable site copy and the audit trail of admin actions."""
import uuid

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text, Uuid, func

from garden_club.database import Base


class SiteContent(Base):
    __tablename__ = "site_content"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    key = Column(String(100), unique=True, nullable=False, index=True)
    title = Column(String(300), nullable=True)
    content = Column(Text, nullable=True)  # sometimes JSON-encoded structured copy
    image_url = Column(String(1000), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class AuditLog(Base):
    __tablename__ = "audit_log"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    time = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    actor_user_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    actor_type = Column(String(20), nullable=False, default="USER")  # USER / SYSTEM
    action = Column(String(100), nullable=False)
    resource_type = Column(String(50), nullable=True)
    resource_id = Column(String(100), nullable=True)
    ip = Column(String(50), nullable=True)
    details = Column(JSON, nullable=True)
