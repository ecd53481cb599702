"""Trigger endpoint for the daily reminder run (external cron)."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from garden_club.auth import require_cron_secret
from garden_club.database import get_db
from garden_club.schemas import ReminderRunResponse
from garden_club.services.email import Mailer, get_mailer
from garden_club.services.reminders import run_reminders

router = APIRouter(prefix="/api/cron", tags=["cron"], dependencies=[Depends(require_cron_secret)])


@router.api_route("/send-reminders", methods=["GET", "POST"], response_model=ReminderRunResponse)
def send_reminders(db: Session = Depends(get_db), mailer: Mailer = Depends(get_mailer)):
    result = run_reminders(db, mailer)
    return ReminderRunResponse(
        success=True,
        today_reminders=result.today_reminders,
        tomorrow_reminders=result.tomorrow_reminders,
        skipped=result.skipped,
        failed=result.failed,
    )
