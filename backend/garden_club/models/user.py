"""User & RefreshToken models with club roles."""
import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, Uuid, func
from sqlalchemy.orm import relationship

from garden_club.database import Base


class Role(str, enum.Enum):
    MEMBER = "MEMBER"
    ADMIN = "ADMIN"
    GUEST = "GUEST"


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(
            Role,
            name="user_role",
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
        ),
        nullable=False,
        default=Role.MEMBER,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")
    assignments = relationship("PlantCare", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    check_ins = relationship("CheckIn", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class RefreshToken(Base):
    __tablename__ = "refresh_token"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String(255), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="refresh_tokens")
