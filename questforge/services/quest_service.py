"""
Quest completion service.
Turns quest completions into XP, streak and achievement updates, and
manages the boss-fight lifecycle. Every public method is one unit of work.
"""
import logging
from typing import List, NamedTuple, Optional, Tuple
from sqlalchemy.orm import Session

from questforge.database import unit_of_work
from questforge.exceptions import QuestNotFoundException, BossNotFoundException
from questforge.models import Quest
from questforge.repositories.quest_repository import QuestRepository
from questforge.repositories.streak_repository import StreakRepository
from questforge.schemas import (
    CompleteQuestResult, LogQuestRequest, LogQuestResult,
    AddQuestRequest, AddQuestResult, QuestDescriptionUpdate, QuestResponse,
    BossFightRequest, BossFightResult, BossProgressUpdate
)
from questforge.services.achievement_service import AchievementService
from questforge.services.character_service import CharacterService
from questforge.services.date_service import DateService
from questforge.services.stat_service import StatService
from questforge.constants import (
    STREAK_DAILY, ACHIEVEMENT_FIRST_QUEST, REASON_ALREADY_EXISTS
)

logger = logging.getLogger("questforge.quests")


class CompletionEffects(NamedTuple):
    """Bookkeeping a completion pathway performs besides awarding XP"""
    advance_daily_streak: bool
    unlock_first_quest: bool


# Completing a known quest counts toward the daily streak and first-quest
# achievement; logging a completion by name only awards XP.
COMPLETE_BY_ID_EFFECTS = CompletionEffects(advance_daily_streak=True, unlock_first_quest=True)
LOG_BY_NAME_EFFECTS = CompletionEffects(advance_daily_streak=False, unlock_first_quest=False)


def signed_xp(xp_reward: int, is_penalty: bool) -> int:
    """XP amount a completion applies: penalties always subtract"""
    return -abs(xp_reward) if is_penalty else xp_reward


class QuestService:
    """Service for quest completion and boss fights"""

    def __init__(self, db: Session, date_service: Optional[DateService] = None):
        self.db = db
        self.date_service = date_service or DateService()
        self.quest_repo = QuestRepository()
        self.streak_repo = StreakRepository()
        self.character_service = CharacterService(db, self.date_service)
        self.stat_service = StatService(db, self.date_service)
        self.achievement_service = AchievementService(db, self.date_service)

    def list_quests(self) -> List[Quest]:
        """All quests, newest date first"""
        return self.quest_repo.get_all(self.db)

    def complete_quest(self, quest_id: int) -> CompleteQuestResult:
        """
        Complete a stored quest and award its XP.

        Completing an already completed quest changes nothing and reports
        already_completed=True.

        Args:
            quest_id: Quest to complete

        Returns:
            CompleteQuestResult

        Raises:
            CharacterNotInitializedException: Before initialize_character
            QuestNotFoundException: If the quest does not exist
        """
        with unit_of_work(self.db):
            self.character_service.require_character("complete quest")

            quest = self.quest_repo.get_by_id(self.db, quest_id)
            if not quest:
                raise QuestNotFoundException(quest_id)

            if quest.completed:
                logger.info(f"Quest {quest_id} already completed, skipping")
                return CompleteQuestResult(quest_id=quest_id, already_completed=True)

            quest.completed = True
            quest.completed_at = self.date_service.now_iso()
            self.quest_repo.update(self.db, quest)

            xp_result = self.stat_service.apply_delta(
                quest.stat, signed_xp(quest.xp_reward, quest.is_penalty)
            )
            streak_count, unlocked = self._apply_completion_effects(COMPLETE_BY_ID_EFFECTS)

        logger.info(f"Quest {quest_id} completed: {xp_result.amount:+d} {xp_result.stat_id}")
        return CompleteQuestResult(
            quest_id=quest_id,
            xp_result=xp_result,
            streak_count=streak_count,
            unlocked_achievements=unlocked
        )

    def log_completed_quest(self, request: LogQuestRequest) -> LogQuestResult:
        """
        Record a completion by quest name for today.

        Reuses today's open instance with the same name when there is one
        (its stat, reward and penalty flag are overwritten with the logged
        values), otherwise inserts a completed quest. A second log of the same name on
        the same day is reported as a duplicate and awards nothing.

        Raises:
            CharacterNotInitializedException: Before initialize_character
        """
        with unit_of_work(self.db):
            self.character_service.require_character("log quest")
            today = self.date_service.today()
            now = self.date_service.now_iso()

            quest = self.quest_repo.find_for_date(self.db, request.name, today)

            if quest and quest.completed:
                logger.info(f"Duplicate log for '{request.name}' on {today}")
                return LogQuestResult(quest_id=quest.id, duplicate=True)

            created = quest is None
            if quest:
                # The row records what was awarded
                quest.stat = request.stat
                quest.xp_reward = request.xp_reward
                quest.is_penalty = request.is_penalty
                quest.completed = True
                quest.completed_at = now
                if request.note is not None:
                    quest.note = request.note
                if request.description is not None:
                    quest.description = request.description
                if request.lore is not None:
                    quest.lore = request.lore
                self.quest_repo.update(self.db, quest)
            else:
                quest = self.quest_repo.create(self.db, Quest(
                    name=request.name,
                    stat=request.stat,
                    xp_reward=request.xp_reward,
                    is_penalty=request.is_penalty,
                    is_boss=False,
                    completed=True,
                    completed_at=now,
                    date=today,
                    description=request.description,
                    lore=request.lore,
                    note=request.note
                ))

            xp_result = self.stat_service.apply_delta(
                request.stat, signed_xp(request.xp_reward, request.is_penalty)
            )
            self._apply_completion_effects(LOG_BY_NAME_EFFECTS)
            quest_id = quest.id

        logger.info(f"Logged '{request.name}' ({'new' if created else 'existing'}): {xp_result.amount:+d} {request.stat}")
        return LogQuestResult(quest_id=quest_id, created=created, xp_result=xp_result)

    def _apply_completion_effects(self, effects: CompletionEffects) -> Tuple[Optional[int], List[str]]:
        """
        Streak and achievement bookkeeping for one completion event.

        Returns:
            (daily streak count or None, keys of newly unlocked achievements)
        """
        streak_count = None
        unlocked = []

        if effects.advance_daily_streak:
            streak = self.streak_repo.get_by_type(self.db, STREAK_DAILY)
            if streak:
                streak.count += 1
                streak.last_updated = self.date_service.today()
                self.db.flush()
                streak_count = streak.count

        if effects.unlock_first_quest:
            if self.achievement_service.unlock(ACHIEVEMENT_FIRST_QUEST):
                unlocked.append(ACHIEVEMENT_FIRST_QUEST)

        return streak_count, unlocked

    def add_quest_today(self, request: AddQuestRequest) -> AddQuestResult:
        """Add an open quest for today unless one with that name exists"""
        with unit_of_work(self.db):
            self.character_service.require_character("add quest")
            today = self.date_service.today()

            existing = self.quest_repo.find_for_date(self.db, request.name, today)
            if existing:
                return AddQuestResult(quest_id=existing.id, created=False, reason=REASON_ALREADY_EXISTS)

            quest = self.quest_repo.create(self.db, Quest(
                name=request.name,
                stat=request.stat,
                xp_reward=request.xp_reward,
                is_penalty=request.is_penalty,
                description=request.description,
                is_boss=False,
                completed=False,
                date=today
            ))
            quest_id = quest.id
        return AddQuestResult(quest_id=quest_id, created=True)

    def update_quest_description(self, quest_id: int, update: QuestDescriptionUpdate) -> QuestResponse:
        """
        Replace a quest's description.

        Raises:
            QuestNotFoundException
        """
        with unit_of_work(self.db):
            quest = self.quest_repo.get_by_id(self.db, quest_id)
            if not quest:
                raise QuestNotFoundException(quest_id)

            quest.description = update.description
            self.quest_repo.update(self.db, quest)
            response = QuestResponse.model_validate(quest)
        return response

    # ===== BOSS FIGHTS =====

    def upsert_boss_fight(self, request: BossFightRequest) -> BossFightResult:
        """
        Start a new boss fight, retiring any active one first.

        Retired bosses are marked completed without awarding XP, so exactly
        one boss is active afterwards.
        """
        with unit_of_work(self.db):
            self.character_service.require_character("start boss fight")
            today = self.date_service.today()
            now = self.date_service.now_iso()

            retired_ids = []
            for boss in self.quest_repo.get_active_bosses(self.db):
                boss.completed = True
                boss.completed_at = now
                retired_ids.append(boss.id)
            self.db.flush()

            boss = self.quest_repo.create(self.db, Quest(
                name=request.name,
                stat=request.stat,
                xp_reward=request.xp_reward,
                is_boss=True,
                is_penalty=False,
                completed=False,
                date=today,
                deadline=request.deadline or self.date_service.end_of_day_iso(today),
                description=request.description,
                lore=request.lore,
                current_value=request.current_value,
                target_value=request.target_value
            ))
            boss_id = boss.id

        if retired_ids:
            logger.info(f"Retired boss fights {retired_ids} in favour of '{request.name}'")
        logger.info(f"Boss fight started: '{request.name}' (id={boss_id})")
        return BossFightResult(quest_id=boss_id, retired_boss_ids=retired_ids)

    def update_boss_progress(self, update: BossProgressUpdate) -> QuestResponse:
        """
        Set the progress counter of the active boss fight.

        Raises:
            BossNotFoundException: If no boss fight is active
        """
        with unit_of_work(self.db):
            boss = self.quest_repo.get_active_boss(self.db)
            if not boss:
                raise BossNotFoundException()

            boss.current_value = update.current_value
            self.quest_repo.update(self.db, boss)
            response = QuestResponse.model_validate(boss)
        return response
