"""
Daily quest generator.
Seeds today's recurring quests once per calendar day.
"""
import logging
from typing import Optional
from sqlalchemy.orm import Session

from questforge.database import unit_of_work
from questforge.models import Quest
from questforge.repositories.character_repository import CharacterRepository
from questforge.repositories.quest_repository import QuestRepository
from questforge.schemas import GenerateDailyQuestsResult
from questforge.services.date_service import DateService
from questforge.constants import (
    DAILY_QUEST_TEMPLATES, REASON_NO_CHARACTER, REASON_ALREADY_EXISTS
)

logger = logging.getLogger("questforge.daily")


class DailyQuestService:
    """Service for daily quest generation"""

    def __init__(self, db: Session, date_service: Optional[DateService] = None):
        self.db = db
        self.character_repo = CharacterRepository()
        self.quest_repo = QuestRepository()
        self.date_service = date_service or DateService()

    def generate_daily_quests(self) -> GenerateDailyQuestsResult:
        """
        Insert today's quest set from the templates.

        Safe to call repeatedly: when any non-boss quest already exists for
        today nothing is inserted. The existence check and the inserts share
        one serialized transaction.

        Returns:
            GenerateDailyQuestsResult (ok=False with reason "no_character"
            before initialization)
        """
        with unit_of_work(self.db):
            if not self.character_repo.get_singleton(self.db):
                return GenerateDailyQuestsResult(ok=False, reason=REASON_NO_CHARACTER)

            today = self.date_service.today()

            existing = self.quest_repo.count_for_date(self.db, today)
            if existing > 0:
                return GenerateDailyQuestsResult(
                    ok=True,
                    generated=False,
                    reason=REASON_ALREADY_EXISTS,
                    count=existing,
                    date=today
                )

            for template in DAILY_QUEST_TEMPLATES:
                self.quest_repo.create(self.db, Quest(
                    name=template["name"],
                    stat=template["stat"],
                    xp_reward=template["xp_reward"],
                    description=template["description"],
                    completed=False,
                    is_boss=False,
                    is_penalty=False,
                    date=today
                ))

        logger.info(f"Generated {len(DAILY_QUEST_TEMPLATES)} daily quests for {today}")
        return GenerateDailyQuestsResult(
            ok=True,
            generated=True,
            count=len(DAILY_QUEST_TEMPLATES),
            date=today
        )
