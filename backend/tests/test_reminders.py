"""Daily reminder run: skip rules, tomorrow notices and failure isolation."""
from datetime import date, timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from conftest import at, cron_headers
from garden_club.config import Settings, get_settings
from garden_club.services.email import reminder_subject, render_reminder
from garden_club.services.reminders import run_reminders


D = date(2026, 5, 4)


def test_no_check_in_sends_today_reminder(db, mailer, member, plant, make_assignment):
    assignment = make_assignment(member, plant, D - timedelta(days=3))

    result = run_reminders(db, mailer, today=D)

    assert result.today_reminders == 1
    assert result.skipped == 0
    assert result.reminded_assignment_ids == [str(assignment.id)]
    assert "Reminder: Watering Basil Today" in mailer.subjects_for(member.email)


def test_check_in_today_skips_today_reminder(db, mailer, member, plant, make_assignment, make_check_in):
    assignment = make_assignment(member, plant, D - timedelta(days=3))
    make_check_in(member, plant, at(D, 9))

    result = run_reminders(db, mailer, today=D)

    assert result.today_reminders == 0
    assert result.skipped == 1
    assert result.skipped_assignment_ids == [str(assignment.id)]
    assert "Reminder: Watering Basil Today" not in mailer.subjects_for(member.email)


def test_tomorrow_reminder_ignores_todays_check_in(db, mailer, member, plant, make_assignment, make_check_in):
    make_assignment(member, plant, D - timedelta(days=3))
    make_check_in(member, plant, at(D, 9))

    result = run_reminders(db, mailer, today=D)

    assert result.tomorrow_reminders == 1
    assert mailer.subjects_for(member.email) == ["Reminder: Watering Basil Tomorrow"]


def test_check_in_yesterday_does_not_count(db, mailer, member, plant, make_assignment, make_check_in):
    make_assignment(member, plant, D - timedelta(days=3))
    make_check_in(member, plant, at(D - timedelta(days=1), 23, 59))

    result = run_reminders(db, mailer, today=D)

    assert result.today_reminders == 1
    assert result.skipped == 0


def test_check_in_by_another_member_does_not_count(db, mailer, member, make_user, plant, make_assignment, make_check_in):
    make_assignment(member, plant, D)
    make_check_in(make_user(name="Sam"), plant, at(D, 8))

    result = run_reminders(db, mailer, today=D)

    assert result.today_reminders == 1


def test_assignment_starting_tomorrow_only_gets_tomorrow_notice(db, mailer, member, plant, make_assignment):
    make_assignment(member, plant, D + timedelta(days=1))

    result = run_reminders(db, mailer, today=D)

    assert result.today_reminders == 0
    assert result.tomorrow_reminders == 1
    assert mailer.subjects_for(member.email) == ["Reminder: Watering Basil Tomorrow"]


def test_assignment_ending_today_only_gets_today_notice(db, mailer, member, plant, make_assignment):
    make_assignment(member, plant, D - timedelta(days=7), D, task_type="Pruning")

    result = run_reminders(db, mailer, today=D)

    assert result.today_reminders == 1
    assert result.tomorrow_reminders == 0
    assert mailer.subjects_for(member.email) == ["Reminder: Pruning Basil Today"]


def test_future_and_ended_assignments_are_ignored(db, mailer, member, plant, make_assignment):
    make_assignment(member, plant, D + timedelta(days=2))
    make_assignment(member, plant, D - timedelta(days=10), D - timedelta(days=1))

    result = run_reminders(db, mailer, today=D)

    assert (result.today_reminders, result.tomorrow_reminders, result.skipped) == (0, 0, 0)
    assert mailer.sent == []


def test_one_failure_does_not_stop_the_run(db, mailer, make_user, plant, make_assignment):
    broken = make_user(name="Broken", email="broken@school.test")
    bounced = make_user(name="Bounced", email="bounced@school.test")
    fine = make_user(name="Fine", email="fine@school.test")
    for user in (broken, bounced, fine):
        make_assignment(user, plant, D)
    mailer.raise_for.add(broken.email)
    mailer.fail_for.add(bounced.email)

    result = run_reminders(db, mailer, today=D)

    assert result.today_reminders == 3
    assert result.tomorrow_reminders == 3
    assert result.failed == 4
    assert {f["email"] for f in result.failures} == {broken.email, bounced.email}
    assert len(mailer.subjects_for(fine.email)) == 2


def test_reminder_html_escapes_names():
    settings = Settings(club_name="Green & Co", app_base_url="https://garden.test/")
    body = render_reminder("<b>Alex</b>", "Basil <script>", "Watering", True, settings=settings)

    assert "<b>Alex</b>" not in body
    assert "&lt;b&gt;Alex&lt;/b&gt;" in body
    assert "Basil &lt;script&gt;" in body
    assert "Green &amp; Co" in body
    assert "https://garden.test/dashboard" in body


def test_reminder_subject_wording():
    assert reminder_subject("Basil", "Watering", True) == "Reminder: Watering Basil Today"
    assert reminder_subject("Mint", "Pruning", False) == "Reminder: Pruning Mint Tomorrow"


# ── Cron endpoint ─────────────────────────────────────────────

def test_cron_endpoint_requires_secret(client):
    assert client.post("/api/cron/send-reminders").status_code == 401
    wrong = {"Authorization": "Bearer nope"}
    assert client.post("/api/cron/send-reminders", headers=wrong).status_code == 401


def test_cron_endpoint_accepts_secret_header(client):
    resp = client.get("/api/cron/send-reminders", headers={"X-Cron-Secret": "test-cron-secret"})
    assert resp.status_code == 200


def test_cron_endpoint_reports_counts(client, mailer, member, make_user, plant, make_assignment, make_check_in, today):
    done = make_user(name="Done", email="done@school.test")
    make_assignment(member, plant, today - timedelta(days=1))
    make_assignment(done, plant, today - timedelta(days=1))
    make_check_in(done, plant, at(today, 0, 1))

    resp = client.post("/api/cron/send-reminders", headers=cron_headers())

    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "todayReminders": 1,
        "tomorrowReminders": 2,
        "skipped": 1,
        "failed": 0,
    }
    assert len(mailer.sent) == 3


def test_cron_endpoint_rejects_non_ascii_secret(client):
    resp = client.post("/api/cron/send-reminders", headers={"X-Cron-Secret": b"caf\xe9"})
    assert resp.status_code == 401
    assert resp.json() == {"detail": "Invalid cron secret"}


def test_default_cron_secret_rejected_in_production():
    with pytest.raises(PydanticValidationError):
        Settings(app_env="production", jwt_secret_key="x" * 40, cron_secret="change-me-cron-secret")

    settings = Settings(app_env="production", jwt_secret_key="x" * 40, cron_secret="s3cret-for-the-garden")
    assert settings.cron_secret == "s3cret-for-the-garden"


# ── Club timezone ─────────────────────────────────────────────

def test_check_in_window_follows_club_timezone(monkeypatch, db, mailer, member, plant, make_assignment, make_check_in):
    monkeypatch.setattr(get_settings(), "club_timezone", "America/New_York")
    make_assignment(member, plant, D - timedelta(days=1))
    # 02:00 UTC on the next day is 22:00 on D in New York
    make_check_in(member, plant, at(D + timedelta(days=1), 2))

    result = run_reminders(db, mailer, today=D)

    assert result.skipped == 1
    assert result.today_reminders == 0


def test_late_evening_check_in_belongs_to_previous_local_day(
    monkeypatch, db, mailer, member, plant, make_assignment, make_check_in
):
    monkeypatch.setattr(get_settings(), "club_timezone", "America/New_York")
    make_assignment(member, plant, D - timedelta(days=1))
    # 03:00 UTC on D is 23:00 on D-1 in New York
    make_check_in(member, plant, at(D, 3))

    result = run_reminders(db, mailer, today=D)

    assert result.skipped == 0
    assert result.today_reminders == 1
