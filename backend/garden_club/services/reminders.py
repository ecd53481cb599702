"""
Daily care reminders.

One linear pass per run:
- every assignment active today gets a "due today" reminder unless the
  member already has a check-in for that plant inside today's window;
- every assignment active tomorrow gets a "due tomorrow" reminder.

Send failures are collected per recipient and never abort the run. Nothing
is retried within a run; tomorrow's run finds the same missing check-in.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from garden_club.clock import club_today
from garden_club.models import PlantCare
from garden_club.services.assignments import active_assignments
from garden_club.services.check_ins import checked_in_on
from garden_club.services.email import Mailer, send_reminder_email

logger = logging.getLogger(__name__)


@dataclass
class ReminderRunResult:
    """Outcome of one reminder run; the counts are attempted sends."""
    today: date
    today_reminders: int = 0
    tomorrow_reminders: int = 0
    skipped: int = 0
    failures: List[Dict[str, str]] = field(default_factory=list)
    skipped_assignment_ids: List[str] = field(default_factory=list)
    reminded_assignment_ids: List[str] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)


def _remind(mailer: Mailer, assignment: PlantCare, is_today: bool, result: ReminderRunResult) -> None:
    user = assignment.user
    try:
        outcome = send_reminder_email(
            mailer,
            user.email,
            user.name,
            assignment.plant.name,
            assignment.task_type,
            is_today,
        )
        error = None if outcome.success else (outcome.error or "send failed")
    except Exception as e:
        error = str(e) or e.__class__.__name__

    if error:
        logger.error(f"Reminder for assignment {assignment.id} to {user.email} failed: {error}")
        result.failures.append({
            "assignment_id": str(assignment.id),
            "email": user.email,
            "error": error,
        })


def run_reminders(db: Session, mailer: Mailer, today: Optional[date] = None) -> ReminderRunResult:
    today = today or club_today()
    tomorrow = today + timedelta(days=1)
    result = ReminderRunResult(today=today)

    for assignment in active_assignments(db, today):
        if checked_in_on(db, assignment.user_id, assignment.plant_id, today):
            result.skipped += 1
            result.skipped_assignment_ids.append(str(assignment.id))
            continue
        result.today_reminders += 1
        result.reminded_assignment_ids.append(str(assignment.id))
        _remind(mailer, assignment, True, result)

    for assignment in active_assignments(db, tomorrow):
        result.tomorrow_reminders += 1
        _remind(mailer, assignment, False, result)

    logger.info(
        "Reminder run for %s: %d today, %d tomorrow, %d skipped, %d failed",
        today, result.today_reminders, result.tomorrow_reminders, result.skipped, result.failed,
    )
    return result
