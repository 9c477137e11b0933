"""
Shared fixtures: an in-memory database and a fixed clock.
"""
import os
import tempfile

# Keep the application module away from ./questforge.db and /var/log
os.environ.setdefault("QUESTFORGE_DATABASE_URL", "sqlite://")
os.environ.setdefault("QUESTFORGE_LOG_DIR", tempfile.mkdtemp(prefix="questforge-logs-"))

import pytest
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from questforge.database import Base, create_db_engine
from questforge import models  # noqa: F401
from questforge.services.date_service import DateService
from questforge.services.character_service import CharacterService


class FakeClock:
    """Mutable now() source for DateService"""

    def __init__(self, current: datetime):
        self.current = current

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs):
        self.current = self.current + timedelta(**kwargs)


@pytest.fixture
def db_engine():
    engine = create_db_engine("sqlite://", serialize_writes=False, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    # 10:00 in Asia/Shanghai
    return FakeClock(datetime(2026, 1, 30, 10, 0, 0, tzinfo=ZoneInfo("Asia/Shanghai")))


@pytest.fixture
def date_service(clock):
    return DateService("Asia/Shanghai", now_provider=clock)


@pytest.fixture
def today():
    return date(2026, 1, 30)


@pytest.fixture
def yesterday(today):
    return today - timedelta(days=1)


@pytest.fixture
def initialized(db_session, date_service):
    """Character, stats, streaks and achievements without seed quests"""
    CharacterService(db_session, date_service).initialize_character(seed_quests=False)
    return db_session
