"""Activity feed: posts and like toggling.

The database is the only source of truth for posts. ``likes`` is a cached
count of the post's like rows and is rewritten from them on every toggle.
"""
import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from garden_club.auth import can_modify
from garden_club.errors import Conflict, Forbidden, NotFound, ValidationError
from garden_club.models import ActivityLike, ActivityPost, User

logger = logging.getLogger(__name__)


def _count_likes(db: Session, post_id: UUID) -> int:
    return db.query(func.count(ActivityLike.id)).filter(ActivityLike.post_id == post_id).scalar() or 0


def recount_likes(db: Session, post_ids) -> None:
    """Re-derive ``likes`` for the given posts inside the caller's transaction."""
    for post_id in set(post_ids):
        post = db.get(ActivityPost, post_id)
        if post is not None:
            post.likes = _count_likes(db, post_id)


def list_posts(db: Session) -> List[ActivityPost]:
    return (
        db.query(ActivityPost)
        .options(selectinload(ActivityPost.like_rows))
        .order_by(ActivityPost.created_at.desc())
        .all()
    )


def get_post(db: Session, post_id: UUID) -> ActivityPost:
    post = db.get(ActivityPost, post_id)
    if not post:
        raise NotFound("Post not found")
    return post


def create_post(db: Session, actor: User, text: Optional[str], image_url: Optional[str] = None) -> ActivityPost:
    text = (text or "").strip()
    if not text:
        raise ValidationError("Text is required")

    post = ActivityPost(
        text=text,
        image_url=image_url or None,
        likes=0,
        user_id=actor.id,
        user_name=actor.name,
    )
    db.add(post)
    db.commit()
    return post


def toggle_like(db: Session, post_id: UUID, user_id: UUID) -> Tuple[ActivityPost, bool]:
    """Like the post, or unlike it if ``user_id`` already liked it.

    The post row is locked for the whole read-modify-write so concurrent
    toggles on one post serialize.
    """
    post = (
        db.query(ActivityPost)
        .filter(ActivityPost.id == post_id)
        .with_for_update()
        .first()
    )
    if not post:
        raise NotFound("Post not found")

    existing = (
        db.query(ActivityLike)
        .filter(ActivityLike.post_id == post_id, ActivityLike.user_id == user_id)
        .first()
    )
    if existing:
        db.delete(existing)
        liked = False
    else:
        db.add(ActivityLike(post_id=post_id, user_id=user_id))
        liked = True

    try:
        db.flush()
        post.likes = _count_likes(db, post_id)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Like was changed concurrently, please retry")

    db.expire(post)
    return post, liked


def delete_post(db: Session, actor: User, post_id: UUID) -> None:
    post = get_post(db, post_id)
    if not can_modify(actor, post.user_id):
        raise Forbidden("You can only delete your own posts")
    db.delete(post)
    db.commit()
    logger.info("Post %s deleted by %s", post_id, actor.id)
