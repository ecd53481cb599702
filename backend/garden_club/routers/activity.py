"""Activity feed endpoints."""
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from garden_club.auth import get_current_user
from garden_club.config import get_settings
from garden_club.database import get_db
from garden_club.models import User
from garden_club.ratelimit import limiter
from garden_club.schemas import LikeResponse, PostCreate, PostEnvelope, PostListEnvelope, SuccessResponse
from garden_club.services import activity

settings = get_settings()

router = APIRouter(prefix="/api/activity", tags=["activity"])


@router.get("", response_model=PostListEnvelope)
def list_posts(db: Session = Depends(get_db)):
    """All posts, newest first (public)."""
    return {"posts": activity.list_posts(db)}


@router.post("", response_model=PostEnvelope, status_code=201)
@limiter.limit(settings.post_rate_limit)
def create_post(
    request: Request,
    payload: PostCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return {"post": activity.create_post(db, user, payload.text, payload.image_url)}


@router.post("/{post_id}/like", response_model=LikeResponse)
def toggle_like(
    post_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    post, liked = activity.toggle_like(db, post_id, user.id)
    return {"post": post, "liked": liked}


@router.delete("/{post_id}", response_model=SuccessResponse)
def delete_post(
    post_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    activity.delete_post(db, user, post_id)
    return {"success": True}
