"""
Background scheduler.
Handles:
- Automatic daily quest generation shortly after midnight (configured timezone)

Disabled unless QUESTFORGE_AUTO_DAILY_QUESTS is set. The generator is
idempotent, so a missed or repeated run is harmless.
"""
import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from questforge.database import SessionLocal
from questforge.services.daily_quest_service import DailyQuestService
from questforge.constants import (
    AUTO_DAILY_QUESTS_ENABLED, TIMEZONE,
    DAILY_QUESTS_CRON_HOUR, DAILY_QUESTS_CRON_MINUTE
)

logger = logging.getLogger("questforge.scheduler")

scheduler = AsyncIOScheduler(timezone=TIMEZONE)


async def run_daily_quest_generation():
    """Job: generate today's quests"""
    db = SessionLocal()
    try:
        result = DailyQuestService(db).generate_daily_quests()
        if result.generated:
            logger.info(f"Auto-generated {result.count} daily quests for {result.date}")
        else:
            logger.info(f"Daily quest generation skipped: {result.reason}")
    except Exception as e:
        logger.error(f"Scheduler Error (Daily Quests): {e}")
    finally:
        db.close()


def start_scheduler(enabled: bool = AUTO_DAILY_QUESTS_ENABLED):
    """Start the scheduler when automatic generation is enabled"""
    if not enabled:
        logger.info("Automatic daily quest generation disabled")
        return

    if not scheduler.running:
        scheduler.add_job(
            run_daily_quest_generation,
            CronTrigger(hour=DAILY_QUESTS_CRON_HOUR, minute=DAILY_QUESTS_CRON_MINUTE, timezone=TIMEZONE),
            id="daily_quests",
            replace_existing=True
        )
        scheduler.start()
        logger.info(f"Scheduler started: {[job.id for job in scheduler.get_jobs()]}")


def stop_scheduler():
    """Stop the scheduler"""
    if scheduler.running:
        scheduler.shutdown()
