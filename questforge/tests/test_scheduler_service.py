"""
Tests for the daily quest scheduler job.
"""
import asyncio
import logging

import pytest
from sqlalchemy.orm import sessionmaker

from questforge.models import Quest
from questforge.services import scheduler_service
from questforge.services.daily_quest_service import DailyQuestService


@pytest.fixture
def job_sessions(db_engine, monkeypatch):
    """Point the job at the test database"""
    factory = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    monkeypatch.setattr(scheduler_service, "SessionLocal", factory)
    return factory


class TestDailyQuestJob:
    """Tests for run_daily_quest_generation"""

    def test_generates_quests(self, initialized, job_sessions):
        asyncio.run(scheduler_service.run_daily_quest_generation())

        assert initialized.query(Quest).count() == 6

    def test_second_run_inserts_nothing(self, initialized, job_sessions):
        asyncio.run(scheduler_service.run_daily_quest_generation())
        asyncio.run(scheduler_service.run_daily_quest_generation())

        assert initialized.query(Quest).count() == 6

    def test_without_character_does_nothing(self, db_session, job_sessions):
        asyncio.run(scheduler_service.run_daily_quest_generation())

        assert db_session.query(Quest).count() == 0

    def test_errors_are_logged_not_raised(self, initialized, job_sessions, monkeypatch, caplog):
        def fail(self):
            raise RuntimeError("disk full")

        monkeypatch.setattr(DailyQuestService, "generate_daily_quests", fail)

        with caplog.at_level(logging.ERROR, logger="questforge.scheduler"):
            asyncio.run(scheduler_service.run_daily_quest_generation())

        assert "disk full" in caplog.text
        assert initialized.query(Quest).count() == 0


class TestStartScheduler:
    """Tests for start_scheduler"""

    def test_disabled_registers_nothing(self):
        scheduler_service.start_scheduler(False)

        assert scheduler_service.scheduler.running is False
        assert scheduler_service.scheduler.get_jobs() == []

    def test_enabled_registers_daily_job(self):
        async def start_and_inspect():
            scheduler_service.start_scheduler(True)
            try:
                return [job.id for job in scheduler_service.scheduler.get_jobs()]
            finally:
                scheduler_service.stop_scheduler()

        try:
            job_ids = asyncio.run(start_and_inspect())
        finally:
            scheduler_service.scheduler.remove_all_jobs()

        assert job_ids == ["daily_quests"]
        assert scheduler_service.scheduler.running is False
