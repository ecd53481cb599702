"""Admin-editable site copy, stored one document per key."""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from garden_club.audit import entity_to_dict, log_action
from garden_club.errors import NotFound, ValidationError
from garden_club.models import SiteContent, User
from garden_club.schemas import SiteContentWrite

logger = logging.getLogger(__name__)

DEFAULT_CONTENT = [
    {
        "key": "home_hero",
        "title": "Growing Together, Blooming Knowledge",
        "content": "Welcome to our In-Class Gardening Club platform. Track plant care, share your "
                   "gardening journey, and learn together in our green community.",
        "image_url": "https://images.unsplash.com/photo-1585320806297-9794b3e4eeae?auto=format&fit=crop&w=2342&q=80",
    },
    {
        "key": "features_title",
        "title": "How Our Club Works",
        "content": "A simple and effective way to manage plant care in our community",
    },
    {
        "key": "benefits_title",
        "title": "Benefits of Our Platform",
        "content": "Why our gardening club platform makes plant care easier and more enjoyable",
    },
    {
        "key": "cta_section",
        "title": "Ready to Join Our Gardening Community?",
        "content": "Sign up today and start your plant care journey with our in-class gardening club.",
    },
    {
        "key": "about_hero",
        "title": "About Our In-Class Gardening Club",
        "content": "Welcome to the heart of our green community! The In-Class Gardening Club is dedicated "
                   "to fostering a love for nature, teaching valuable plant care skills, and building a "
                   "collaborative environment among students.",
        "image_url": "https://images.unsplash.com/photo-1518837695005-2083293ca604?auto=format&fit=crop&w=2340&q=80",
    },
    {
        "key": "about_content",
        "title": "Our Mission and Values",
        "content": "We believe that by nurturing plants, we also nurture responsibility, patience, and a "
                   "deeper connection to the natural world.",
    },
    {
        "key": "contact_info",
        "title": "Get in Touch",
        "content": "Email: info@gardeningclub.com\nPhone: +1 (234) 567-890\n"
                   "Address: 123 Green Street, Classroom 4B, School City, SC 12345",
    },
    {
        "key": "privacy_content",
        "title": "Privacy Policy",
        "content": "Your privacy is important to us. This policy explains how we collect, use, and protect "
                   "your personal information within the In-Class Gardening Club platform.",
    },
]


def seed_defaults(db: Session) -> int:
    """Insert the default documents into an empty table. Returns how many were added."""
    if db.query(SiteContent.id).first() is not None:
        return 0
    for item in DEFAULT_CONTENT:
        db.add(SiteContent(**item))
    db.commit()
    logger.info("Default site content initialized (%d documents)", len(DEFAULT_CONTENT))
    return len(DEFAULT_CONTENT)


def list_content(db: Session) -> List[SiteContent]:
    seed_defaults(db)
    return db.query(SiteContent).order_by(SiteContent.key).all()


def get_content(db: Session, key: str) -> SiteContent:
    content = db.query(SiteContent).filter(SiteContent.key == key).first()
    if not content:
        raise NotFound("Content not found")
    return content


def upsert_content(
    db: Session,
    admin: User,
    data: SiteContentWrite,
    key: Optional[str] = None,
    ip: Optional[str] = None,
) -> SiteContent:
    """Create the document for ``key`` or replace its title, content and image."""
    key = (key or data.key or "").strip()
    if not key:
        raise ValidationError("Content key is required")

    content = db.query(SiteContent).filter(SiteContent.key == key).first()
    before = entity_to_dict(content) if content else None
    if content is None:
        content = SiteContent(key=key)
        db.add(content)
    content.title = data.title
    content.content = data.content
    content.image_url = data.image_url

    db.flush()
    log_action(
        db, admin, "upsert_site_content", "site_content", key,
        before, entity_to_dict(content), ip=ip,
    )
    db.commit()
    db.refresh(content)
    return content
