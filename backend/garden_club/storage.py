"""Photo storage on S3/MinIO: clients upload directly with presigned PUT URLs."""
from functools import lru_cache
from uuid import uuid4

import boto3

from garden_club.config import get_settings

settings = get_settings()

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


@lru_cache(maxsize=1)
def get_s3_client():
    endpoint = settings.s3_endpoint or None
    if settings.s3_provider == "aws":
        endpoint = None

    return boto3.client(
        "s3",
        endpoint_url=endpoint,
        region_name=settings.s3_region,
        aws_access_key_id=settings.s3_access_key_id,
        aws_secret_access_key=settings.s3_secret_access_key,
    )


def photo_key(purpose: str, user_id, content_type: str) -> str:
    return f"photos/{purpose}/{user_id}/{uuid4().hex}.{_EXTENSIONS[content_type]}"


def public_url(key: str) -> str:
    return f"{settings.photo_base_url}/{key}"


def presign_photo_upload(key: str, content_type: str, expires_in: int = 900) -> str:
    client = get_s3_client()
    return client.generate_presigned_url(
        "put_object",
        Params={"Bucket": settings.s3_bucket, "Key": key, "ContentType": content_type},
        ExpiresIn=expires_in,
    )
