"""
Scheduled Tasks for the garden club

Uses APScheduler to send the daily care reminders.
"""
import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from garden_club.config import get_settings
from garden_club.database import SessionLocal
from garden_club.services.email import get_mailer
from garden_club.services.reminders import run_reminders

logger = logging.getLogger(__name__)

# Create scheduler instance
scheduler = AsyncIOScheduler()


def run_reminder_job():
    """Execute one reminder run in its own session."""
    logger.info("Starting scheduled reminder job...")

    db = SessionLocal()
    try:
        result = run_reminders(db, get_mailer())
        logger.info(
            f"Reminder job complete. {result.today_reminders} today, "
            f"{result.tomorrow_reminders} tomorrow, {result.failed} failed."
        )
    except Exception as e:
        logger.error(f"Reminder job failed: {e}")
    finally:
        db.close()


def start_scheduler():
    """Start the APScheduler with the daily reminder job."""
    settings = get_settings()
    if not settings.reminder_scheduler_enabled:
        logger.info("Reminder scheduler disabled")
        return
    if not scheduler.running:
        scheduler.add_job(
            run_reminder_job,
            trigger=CronTrigger(
                hour=settings.reminder_hour,
                minute=settings.reminder_minute,
                timezone=settings.club_timezone,
            ),
            id="care_reminders",
            name="Daily care reminders",
            replace_existing=True,
        )
        scheduler.start()
        logger.info(
            "Scheduler started with reminder job (daily at %02d:%02d %s)",
            settings.reminder_hour, settings.reminder_minute, settings.club_timezone,
        )


def stop_scheduler():
    """Stop the APScheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")


@asynccontextmanager
async def scheduler_lifespan(app):
    """Lifespan context manager for FastAPI to start/stop scheduler."""
    start_scheduler()
    yield
    stop_scheduler()
