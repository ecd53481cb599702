"""Account registration and administration."""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from garden_club.audit import entity_to_dict, log_action
from garden_club.auth import hash_password, verify_password
from garden_club.errors import NotFound, ValidationError
from garden_club.models import ActivityLike, Role, User
from garden_club.schemas import PasswordChange, ProfileUpdate, RegisterRequest, UserCreate, UserUpdate
from garden_club.services.activity import recount_likes

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.email) == normalize_email(email)).first()


def get_user(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at.desc()).all()


def register(db: Session, data: RegisterRequest) -> User:
    """Self-service signup; always creates a MEMBER."""
    if find_by_email(db, data.email):
        raise ValidationError("User with this email already exists")
    user = User(
        name=data.name,
        email=normalize_email(data.email),
        password_hash=hash_password(data.password),
        role=Role.MEMBER,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def create_user(db: Session, admin: User, data: UserCreate, ip: Optional[str] = None) -> User:
    if find_by_email(db, data.email):
        raise ValidationError("User with this email already exists")
    user = User(
        name=data.name.strip(),
        email=normalize_email(data.email),
        password_hash=hash_password(data.password),
        role=Role(data.role),
    )
    db.add(user)
    db.flush()
    log_action(db, admin, "create_user", "user", user.id, after=entity_to_dict(user), ip=ip)
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, admin: User, user_id: UUID, data: UserUpdate, ip: Optional[str] = None) -> User:
    user = get_user(db, user_id)
    before = entity_to_dict(user)

    if data.email is not None:
        existing = find_by_email(db, data.email)
        if existing and existing.id != user.id:
            raise ValidationError("Email is already in use")
        user.email = normalize_email(data.email)
    if data.name is not None:
        if not data.name.strip():
            raise ValidationError("Name must not be empty")
        user.name = data.name.strip()
    if data.role is not None:
        user.role = Role(data.role)
    if data.password is not None:
        user.password_hash = hash_password(data.password)

    db.flush()
    log_action(db, admin, "update_user", "user", user.id, before, entity_to_dict(user), ip=ip)
    db.commit()
    db.refresh(user)
    return user


def update_profile(db: Session, user: User, data: ProfileUpdate) -> User:
    """Members edit their own name and email."""
    name = data.name.strip()
    if not name:
        raise ValidationError("Name must not be empty")
    existing = find_by_email(db, data.email)
    if existing and existing.id != user.id:
        raise ValidationError("Email is already in use")

    user.name = name
    user.email = normalize_email(data.email)
    db.commit()
    db.refresh(user)
    return user


def change_password(db: Session, user: User, data: PasswordChange) -> None:
    if not verify_password(data.current_password, user.password_hash):
        raise ValidationError("Current password is incorrect")
    user.password_hash = hash_password(data.new_password)
    db.commit()
    logger.info("Password changed for user %s", user.id)


def delete_user(db: Session, admin: User, user_id: UUID, ip: Optional[str] = None) -> None:
    """Delete an account with its assignments, check-ins and likes.

    Posts written by the user stay in the feed with the author id cleared.
    """
    if str(user_id) == str(admin.id):
        raise ValidationError("You cannot delete your own account")
    user = get_user(db, user_id)

    liked_post_ids = [
        row.post_id for row in db.query(ActivityLike.post_id).filter(ActivityLike.user_id == user_id)
    ]
    before = entity_to_dict(user)
    db.query(ActivityLike).filter(ActivityLike.user_id == user_id).delete(synchronize_session=False)
    db.delete(user)
    db.flush()
    recount_likes(db, liked_post_ids)
    log_action(db, admin, "delete_user", "user", user_id, before=before, ip=ip)
    db.commit()
    logger.info("User %s deleted by %s", user_id, admin.id)


def set_role_by_email(db: Session, email: str, role: Role) -> User:
    user = find_by_email(db, email)
    if not user:
        raise NotFound(f"User {email} not found, register the account first")
    user.role = role
    log_action(db, None, "set_role", "user", user.id, after={"role": role.value})
    db.commit()
    return user
