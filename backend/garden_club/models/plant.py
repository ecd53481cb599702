"""Plant records and the care data attached to them: assignments and check-ins."""
import uuid

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Text, Uuid, func
from sqlalchemy.orm import relationship

from garden_club.clock import utcnow
from garden_club.database import Base

DEFAULT_TASK_TYPE = "Watering"


class Plant(Base):
    __tablename__ = "plant"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    image_url = Column(String(1000), nullable=True)
    water_amount = Column(String(200), nullable=True)
    water_schedule = Column(String(200), nullable=True)
    care_notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    assignments = relationship("PlantCare", back_populates="plant", cascade="all, delete-orphan", passive_deletes=True)
    check_ins = relationship(
        "CheckIn",
        back_populates="plant",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CheckIn.created_at.desc()",
    )


class PlantCare(Base):
    """A member's responsibility for a plant over an inclusive date range."""

    __tablename__ = "plant_care"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    plant_id = Column(Uuid, ForeignKey("plant.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=True)  # null = ongoing
    task_type = Column(String(100), nullable=False, default=DEFAULT_TASK_TYPE)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User", back_populates="assignments")
    plant = relationship("Plant", back_populates="assignments")


class CheckIn(Base):
    __tablename__ = "check_in"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    plant_id = Column(Uuid, ForeignKey("plant.id", ondelete="CASCADE"), nullable=False, index=True)
    notes = Column(Text, nullable=True)
    image_url = Column(String(1000), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    user = relationship("User", back_populates="check_ins")
    plant = relationship("Plant", back_populates="check_ins")
