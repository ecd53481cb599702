"""Activity feed posts and the likes attached to them."""
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from garden_club.clock import utcnow
from garden_club.database import Base


class ActivityPost(Base):
    __tablename__ = "activity_post"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    text = Column(Text, nullable=False)
    image_url = Column(String(1000), nullable=True)
    # cached len(liked_by); only services.activity writes it
    likes = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    user_name = Column(String(200), nullable=True)

    like_rows = relationship(
        "ActivityLike",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ActivityLike.created_at",
    )

    @property
    def liked_by(self) -> list[str]:
        return [str(like.user_id) for like in self.like_rows]


class ActivityLike(Base):
    __tablename__ = "activity_like"
    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_activity_like_post_user"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id = Column(Uuid, ForeignKey("activity_post.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    post = relationship("ActivityPost", back_populates="like_rows")
