"""Activity feed posts and like toggling."""
import uuid

import pytest

from conftest import auth_headers
from garden_club.auth import can_modify
from garden_club.errors import NotFound, ValidationError
from garden_club.models import ActivityLike, ActivityPost, Role, User
from garden_club.services import activity


@pytest.fixture
def post(db, member):
    return activity.create_post(db, member, "First sprouts!")


def test_can_modify_rules():
    owner = User(id=uuid.uuid4(), role=Role.MEMBER)
    other = User(id=uuid.uuid4(), role=Role.MEMBER)
    admin = User(id=uuid.uuid4(), role=Role.ADMIN)

    assert can_modify(owner, owner.id)
    assert can_modify(owner, str(owner.id))
    assert not can_modify(other, owner.id)
    assert can_modify(admin, owner.id)
    assert not can_modify(None, owner.id)
    assert not can_modify(owner, None)


def test_create_post_trims_and_stamps_author(db, member):
    post = activity.create_post(db, member, "  Tomatoes are red  ", "")

    assert post.text == "Tomatoes are red"
    assert post.image_url is None
    assert post.likes == 0
    assert post.user_id == member.id
    assert post.user_name == "Alex"


def test_create_post_rejects_blank_text(db, member):
    with pytest.raises(ValidationError):
        activity.create_post(db, member, "   ")


def test_toggle_twice_restores_state(db, member, make_user, post):
    sam = make_user(name="Sam")

    liked_post, liked = activity.toggle_like(db, post.id, sam.id)
    assert liked is True
    assert liked_post.likes == 1
    assert liked_post.liked_by == [str(sam.id)]

    unliked_post, liked = activity.toggle_like(db, post.id, sam.id)
    assert liked is False
    assert unliked_post.likes == 0
    assert unliked_post.liked_by == []
    assert db.query(ActivityLike).count() == 0


def test_likes_match_liked_by(db, make_user, post):
    users = [make_user() for _ in range(3)]
    for user in users:
        activity.toggle_like(db, post.id, user.id)
    activity.toggle_like(db, post.id, users[0].id)

    db.expire_all()
    fresh = db.get(ActivityPost, post.id)
    assert fresh.likes == len(fresh.liked_by) == 2
    assert str(users[0].id) not in fresh.liked_by


def test_toggle_unknown_post_is_not_found(db, member):
    with pytest.raises(NotFound):
        activity.toggle_like(db, uuid.uuid4(), member.id)


# ── HTTP ──────────────────────────────────────────────────────

def test_feed_is_public_and_newest_first(client, db, member):
    older = activity.create_post(db, member, "older")
    newer = activity.create_post(db, member, "newer")
    newer.created_at = older.created_at.replace(year=older.created_at.year + 1)
    db.commit()

    resp = client.get("/api/activity")

    assert resp.status_code == 200
    posts = resp.json()["posts"]
    assert [p["text"] for p in posts] == ["newer", "older"]
    assert posts[0]["likedBy"] == []


def test_posting_requires_login(client):
    assert client.post("/api/activity", json={"text": "hello"}).status_code == 401


def test_post_with_empty_text_is_rejected(client, member):
    resp = client.post("/api/activity", json={"text": ""}, headers=auth_headers(member))
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Text is required"}


def test_post_created_with_author(client, member):
    resp = client.post(
        "/api/activity",
        json={"text": "Harvested the radishes", "imageUrl": "https://cdn.test/r.jpg"},
        headers=auth_headers(member),
    )
    assert resp.status_code == 201
    body = resp.json()["post"]
    assert body["userName"] == "Alex"
    assert body["userId"] == str(member.id)
    assert body["likes"] == 0
    assert body["imageUrl"] == "https://cdn.test/r.jpg"


def test_like_endpoint_toggles(client, make_user, post):
    sam = make_user(name="Sam")

    first = client.post(f"/api/activity/{post.id}/like", headers=auth_headers(sam))
    assert first.status_code == 200
    assert first.json()["liked"] is True
    assert first.json()["post"]["likes"] == 1
    assert first.json()["post"]["likedBy"] == [str(sam.id)]

    second = client.post(f"/api/activity/{post.id}/like", headers=auth_headers(sam)).json()
    assert second["liked"] is False
    assert second["post"]["likes"] == 0


def test_like_requires_login_and_existing_post(client, member, post):
    assert client.post(f"/api/activity/{post.id}/like").status_code == 401
    missing = client.post(f"/api/activity/{uuid.uuid4()}/like", headers=auth_headers(member))
    assert missing.status_code == 404


def test_only_author_or_admin_deletes(client, db, admin, make_user, member):
    stranger = make_user(name="Sam")
    mine = activity.create_post(db, member, "mine")
    other = activity.create_post(db, member, "moderated")

    denied = client.delete(f"/api/activity/{mine.id}", headers=auth_headers(stranger))
    assert denied.status_code == 403

    own = client.delete(f"/api/activity/{mine.id}", headers=auth_headers(member))
    assert own.status_code == 200
    assert own.json() == {"success": True}

    moderated = client.delete(f"/api/activity/{other.id}", headers=auth_headers(admin))
    assert moderated.status_code == 200

    db.expire_all()
    assert db.query(ActivityPost).count() == 0


def test_deleting_post_removes_its_likes(client, db, member, make_user, post):
    activity.toggle_like(db, post.id, make_user().id)

    assert client.delete(f"/api/activity/{post.id}", headers=auth_headers(member)).status_code == 200
    db.expire_all()
    assert db.query(ActivityLike).count() == 0
