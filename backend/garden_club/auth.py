"""Authentication & authorization utilities: password hashing, JWT, role gates."""
import hmac
from datetime import datetime, timedelta, timezone
from hashlib import sha256
from typing import Optional
from uuid import UUID, uuid4

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from garden_club.config import get_settings
from garden_club.database import get_db
from garden_club.errors import Forbidden, Unauthorized
from garden_club.models import RefreshToken, Role, User

settings = get_settings()
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
security = HTTPBearer(auto_error=False)


# ── Password helpers ──────────────────────────────────────────
def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


# ── Token helpers ─────────────────────────────────────────────
def _token_hash(token: str) -> str:
    return sha256(token.encode()).hexdigest()


def create_access_token(user: User) -> str:
    payload = {
        "sub": str(user.id),
        "role": user.role.value,
        "name": user.name,
        "email": user.email,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_access_expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm="HS256")


def create_refresh_token(db: Session, user: User) -> str:
    raw_token = uuid4().hex + uuid4().hex  # 64-char random string
    rt = RefreshToken(
        user_id=user.id,
        token_hash=_token_hash(raw_token),
        expires_at=datetime.now(timezone.utc) + timedelta(days=settings.jwt_refresh_expire_days),
    )
    db.add(rt)
    db.commit()
    return raw_token


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def rotate_refresh_token(db: Session, raw_token: str) -> tuple[User, str]:
    """Validate existing refresh token, revoke it, and issue new one. Returns (user, new_raw_token)."""
    rt = (
        db.query(RefreshToken)
        .filter(RefreshToken.token_hash == _token_hash(raw_token), RefreshToken.revoked_at.is_(None))
        .first()
    )
    if not rt or _aware(rt.expires_at) < datetime.now(timezone.utc):
        raise Unauthorized("Invalid or expired refresh token")

    user = db.get(User, rt.user_id)
    if not user:
        raise Unauthorized("User not found")

    rt.revoked_at = datetime.now(timezone.utc)
    db.commit()

    return user, create_refresh_token(db, user)


def revoke_refresh_token(db: Session, raw_token: str) -> None:
    rt = (
        db.query(RefreshToken)
        .filter(RefreshToken.token_hash == _token_hash(raw_token), RefreshToken.revoked_at.is_(None))
        .first()
    )
    if rt:
        rt.revoked_at = datetime.now(timezone.utc)
        db.commit()


# ── Dependency: current user from JWT ─────────────────────────
def _decode_access_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=["HS256"])
    except JWTError:
        return None


def _user_from_credentials(db: Session, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[User]:
    if not credentials:
        return None
    payload = _decode_access_token(credentials.credentials)
    if not payload or "sub" not in payload:
        return None
    try:
        user_id = UUID(payload["sub"])
    except ValueError:
        return None
    return db.get(User, user_id)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    if not credentials:
        raise Unauthorized("Not authenticated")
    user = _user_from_credentials(db, credentials)
    if not user:
        raise Unauthorized("Invalid token")
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Same as get_current_user, but anonymous callers get None instead of a 401."""
    return _user_from_credentials(db, credentials)


# ── Role-based dependencies ──────────────────────────────────
async def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != Role.ADMIN:
        raise Forbidden("Admin access required")
    return user


def can_modify(actor: Optional[User], owner_id) -> bool:
    """Admins may touch anything; everyone else only what they own."""
    if actor is None:
        return False
    if actor.role == Role.ADMIN:
        return True
    return owner_id is not None and str(owner_id) == str(actor.id)


def ensure_admin(actor: Optional[User]) -> None:
    if actor is None:
        raise Unauthorized()
    if actor.role != Role.ADMIN:
        raise Forbidden("Admin access required")


# ── Cron trigger auth (shared secret, separate from user JWT) ─
def require_cron_secret(
    authorization: Optional[str] = Header(default=None),
    x_cron_secret: Optional[str] = Header(default=None),
) -> None:
    prefix = "Bearer "
    token = x_cron_secret
    if not token and authorization:
        token = authorization[len(prefix):].strip() if authorization.startswith(prefix) else authorization
    if not token:
        raise Unauthorized("Missing cron secret")
    if not hmac.compare_digest(token.encode(), settings.cron_secret.encode()):
        raise Unauthorized("Invalid cron secret")
