"""
Achievement service.
Unlocks are one-way: once unlocked_at is set it is never cleared.
"""
import logging
from typing import Optional
from sqlalchemy.orm import Session

from questforge.database import unit_of_work
from questforge.exceptions import AchievementNotFoundException
from questforge.models import Achievement
from questforge.repositories.achievement_repository import AchievementRepository
from questforge.schemas import (
    AchievementCreate, AchievementUpdate, AchievementResult, AchievementResponse
)
from questforge.services.date_service import DateService
from questforge.constants import REASON_ALREADY_EXISTS

logger = logging.getLogger("questforge.achievements")


class AchievementService:
    """Service for achievements"""

    def __init__(self, db: Session, date_service: Optional[DateService] = None):
        self.db = db
        self.achievement_repo = AchievementRepository()
        self.date_service = date_service or DateService()

    def unlock(self, key: str) -> bool:
        """
        Unlock an achievement inside the caller's unit of work.

        Returns:
            True only on the false -> true transition
        """
        achievement = self.achievement_repo.get_by_key(self.db, key)
        if not achievement or achievement.unlocked:
            return False

        achievement.unlocked = True
        achievement.unlocked_at = self.date_service.now_iso()
        self.db.flush()
        logger.info(f"Achievement unlocked: {key}")
        return True

    def add_achievement(self, request: AchievementCreate) -> AchievementResult:
        """Register a new locked achievement (idempotent by key)"""
        with unit_of_work(self.db):
            if self.achievement_repo.get_by_key(self.db, request.key):
                return AchievementResult(created=False, reason=REASON_ALREADY_EXISTS)

            self.achievement_repo.create(self.db, Achievement(
                key=request.key,
                name=request.name,
                icon=request.icon,
                unlocked=False
            ))
        return AchievementResult(created=True)

    def update_achievement(self, key: str, request: AchievementUpdate) -> AchievementResponse:
        """
        Change an achievement's presentation fields.
        Unlock state is not editable here.

        Raises:
            AchievementNotFoundException
        """
        with unit_of_work(self.db):
            achievement = self.achievement_repo.get_by_key(self.db, key)
            if not achievement:
                raise AchievementNotFoundException(key)

            if request.name is not None:
                achievement.name = request.name
            if request.icon is not None:
                achievement.icon = request.icon
            if request.condition is not None:
                achievement.condition = request.condition
            self.db.flush()
            response = AchievementResponse.model_validate(achievement)
        return response
