"""Photo upload endpoint: presigned PUT URL for check-in, post and plant photos."""
from fastapi import APIRouter, Depends

from garden_club.auth import get_current_user
from garden_club.config import get_settings
from garden_club.errors import Forbidden, ValidationError
from garden_club.models import User
from garden_club.schemas import PresignRequest, PresignResponse
from garden_club.storage import photo_key, presign_photo_upload, public_url

settings = get_settings()

router = APIRouter(prefix="/api/uploads", tags=["uploads"])


@router.post("/presign", response_model=PresignResponse)
def presign_upload(payload: PresignRequest, user: User = Depends(get_current_user)):
    if payload.size_bytes > settings.photo_max_bytes:
        raise ValidationError(f"Photo must be at most {settings.photo_max_bytes // (1024 * 1024)} MB")
    if payload.purpose == "plant" and not user.is_admin:
        raise Forbidden("Admin access required")

    key = photo_key(payload.purpose, user.id, payload.content_type)
    return PresignResponse(
        upload_url=presign_photo_upload(key, payload.content_type),
        image_url=public_url(key),
        storage_key=key,
    )
