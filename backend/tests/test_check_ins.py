"""Check-in recording and listing."""
import uuid
from datetime import timedelta

from conftest import at, auth_headers
from garden_club.models import CheckIn
from garden_club.services.check_ins import checked_in_on


def test_unassigned_member_is_forbidden(client, db, member, plant):
    resp = client.post("/api/check-in", json={"plantId": str(plant.id)}, headers=auth_headers(member))

    assert resp.status_code == 403
    assert resp.json() == {"detail": "You are not assigned to care for this plant"}
    assert db.query(CheckIn).count() == 0


def test_assigned_member_checks_in(client, member, plant, make_assignment, today):
    make_assignment(member, plant, today - timedelta(days=1))

    resp = client.post(
        "/api/check-in",
        json={"plantId": str(plant.id), "notes": "Watered 200 ml", "imageUrl": "https://cdn.test/p.jpg"},
        headers=auth_headers(member),
    )

    assert resp.status_code == 201, resp.text
    body = resp.json()["checkIn"]
    assert body["userId"] == str(member.id)
    assert body["notes"] == "Watered 200 ml"
    assert body["imageUrl"] == "https://cdn.test/p.jpg"
    assert body["user"]["name"] == "Alex"
    assert body["plant"]["name"] == "Basil"


def test_expired_assignment_is_forbidden(client, member, plant, make_assignment, today):
    make_assignment(member, plant, today - timedelta(days=10), today - timedelta(days=1))

    resp = client.post("/api/check-in", json={"plantId": str(plant.id)}, headers=auth_headers(member))
    assert resp.status_code == 403


def test_assignment_for_another_plant_is_forbidden(client, member, plant, make_plant, make_assignment, today):
    make_assignment(member, make_plant("Mint"), today)

    resp = client.post("/api/check-in", json={"plantId": str(plant.id)}, headers=auth_headers(member))
    assert resp.status_code == 403


def test_admin_checks_in_without_assignment(client, admin, plant):
    resp = client.post("/api/check-in", json={"plantId": str(plant.id)}, headers=auth_headers(admin))
    assert resp.status_code == 201
    assert resp.json()["checkIn"]["userId"] == str(admin.id)


def test_unknown_plant_is_not_found(client, admin):
    resp = client.post("/api/check-in", json={"plantId": str(uuid.uuid4())}, headers=auth_headers(admin))
    assert resp.status_code == 404


def test_check_in_requires_login(client, plant):
    resp = client.post("/api/check-in", json={"plantId": str(plant.id)})
    assert resp.status_code == 401


def test_several_check_ins_per_day_are_kept(client, db, member, plant, make_assignment, today):
    make_assignment(member, plant, today)
    for _ in range(2):
        resp = client.post("/api/check-in", json={"plantId": str(plant.id)}, headers=auth_headers(member))
        assert resp.status_code == 201

    assert db.query(CheckIn).count() == 2
    assert checked_in_on(db, member.id, plant.id, today)


def test_anonymous_listing_is_empty(client, member, plant, make_check_in, today):
    make_check_in(member, plant, at(today, 0))

    resp = client.get("/api/check-in")
    assert resp.status_code == 200
    assert resp.json() == {"checkIns": []}


def test_listing_filters_and_orders_newest_first(client, member, make_user, plant, make_plant, make_check_in, today):
    sam = make_user(name="Sam")
    mint = make_plant("Mint")
    first = make_check_in(member, plant, at(today - timedelta(days=2), 9), notes="first")
    second = make_check_in(member, plant, at(today - timedelta(days=1), 9), notes="second")
    make_check_in(sam, plant, at(today - timedelta(days=1), 10))
    make_check_in(member, mint, at(today - timedelta(days=1), 11))

    resp = client.get(
        "/api/check-in",
        params={"plantId": str(plant.id), "userId": str(member.id)},
        headers=auth_headers(member),
    )

    assert resp.status_code == 200
    assert [c["id"] for c in resp.json()["checkIns"]] == [str(second.id), str(first.id)]

    limited = client.get("/api/check-in", params={"limit": 1}, headers=auth_headers(member)).json()
    assert len(limited["checkIns"]) == 1


def test_checked_in_on_uses_the_calendar_day(db, member, plant, make_check_in, today):
    make_check_in(member, plant, at(today - timedelta(days=1), 23, 59))

    assert checked_in_on(db, member.id, plant.id, today - timedelta(days=1))
    assert not checked_in_on(db, member.id, plant.id, today)
