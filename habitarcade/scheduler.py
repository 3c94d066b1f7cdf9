"""
Background scheduler for automatic habit maintenance
Handles:
- Hourly auto-fill of missed habit days (when enabled in settings)
"""

import logging
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from habitarcade.database import SessionLocal
from habitarcade.constants import AUTO_FILL_SCHEDULE_MINUTE
from habitarcade.repositories.settings_repository import SettingsRepository
from habitarcade.services.auto_fill_service import AutoFillService

logger = logging.getLogger("habitarcade.scheduler")


def run_auto_fill():
    """Auto-fill missed days for all active habits if enabled"""
    db: Session = SessionLocal()
    try:
        settings = SettingsRepository.get(db)

        # Only proceed if auto_fill is enabled
        if not settings.auto_fill_enabled:
            return

        result = AutoFillService(db).fill_all(status=settings.auto_fill_status)
        logger.info(
            f"Scheduled auto-fill: {result['filled']} entries, "
            f"{result['habits_processed']} habits, "
            f"{len(result['failed_habit_ids'])} failed"
        )

    except Exception as e:
        logger.error(f"Error in run_auto_fill: {e}")
    finally:
        db.close()


# Create scheduler instance
scheduler = BackgroundScheduler()


def start_scheduler():
    """Start the background scheduler"""
    logger.info("Starting HabitArcade background scheduler")

    # Past days only change when the effective date rolls over,
    # so hourly is enough for any day boundary hour
    scheduler.add_job(
        run_auto_fill,
        CronTrigger(minute=AUTO_FILL_SCHEDULE_MINUTE),
        id='run_auto_fill',
        replace_existing=True
    )

    scheduler.start()
    logger.info("Background scheduler started successfully")


def stop_scheduler():
    """Stop the background scheduler"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Background scheduler stopped")
