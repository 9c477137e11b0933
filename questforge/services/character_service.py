"""
Character service.
Owns the Character singleton: initialization, the cached overall-level
aggregate and the read-only dashboard snapshot.
"""
import logging
from typing import Optional
from sqlalchemy.orm import Session

from questforge.database import unit_of_work
from questforge.exceptions import CharacterNotInitializedException
from questforge.models import Character, Stat, Streak, Quest, Achievement
from questforge.repositories.character_repository import CharacterRepository
from questforge.repositories.stat_repository import StatRepository
from questforge.repositories.streak_repository import StreakRepository
from questforge.repositories.quest_repository import QuestRepository
from questforge.repositories.achievement_repository import AchievementRepository
from questforge.schemas import (
    InitializeResult, DashboardSnapshot, CharacterResponse, StatResponse,
    StreakResponse, QuestResponse, AchievementResponse
)
from questforge.services.bonus_service import BonusService
from questforge.services.date_service import DateService
from questforge.services import leveling
from questforge.constants import (
    STAT_ORDER, STAT_NAMES, STREAK_SEEDS, ACHIEVEMENT_SEEDS,
    INITIAL_QUEST_SEEDS, INITIAL_BOSS_SEED,
    DEFAULT_CHARACTER_NAME, DEFAULT_CHARACTER_CLASS,
    REASON_ALREADY_INITIALIZED
)

logger = logging.getLogger("questforge.character")


class CharacterService:
    """Service for the character aggregate"""

    def __init__(self, db: Session, date_service: Optional[DateService] = None):
        self.db = db
        self.character_repo = CharacterRepository()
        self.stat_repo = StatRepository()
        self.streak_repo = StreakRepository()
        self.quest_repo = QuestRepository()
        self.achievement_repo = AchievementRepository()
        self.date_service = date_service or DateService()

    def require_character(self, operation: str) -> Character:
        """
        Get the character or fail if the system is not initialized.

        Raises:
            CharacterNotInitializedException
        """
        character = self.character_repo.get_singleton(self.db)
        if not character:
            raise CharacterNotInitializedException(operation)
        return character

    def recompute(self) -> int:
        """
        Recompute the cached overall level from all stats' lifetime XP.

        Runs inside the caller's unit of work as the last step of every
        XP-affecting operation. Without a character nothing is written.

        Returns:
            Overall level (1 if there is no character)
        """
        character = self.character_repo.get_singleton(self.db)
        if not character:
            return 1

        total_xp = self.stat_repo.get_total_xp(self.db)
        progress = leveling.character_level_from_total(total_xp)

        if progress.level != character.overall_level:
            logger.info(f"Overall level {character.overall_level} -> {progress.level} (total XP {total_xp})")

        character.overall_level = progress.level
        character.overall_total_xp = total_xp
        character.last_updated = self.date_service.now_iso()
        self.db.flush()
        return progress.level

    def initialize_character(self, seed_quests: bool = True) -> InitializeResult:
        """
        Create the character, its stats, streaks and achievements.

        No-op when a character already exists.

        Args:
            seed_quests: Also insert the initial quest batch and boss fight

        Returns:
            InitializeResult
        """
        with unit_of_work(self.db):
            if self.character_repo.get_singleton(self.db):
                return InitializeResult(seeded=False, reason=REASON_ALREADY_INITIALIZED)

            now = self.date_service.now_iso()
            today = self.date_service.today()

            self.character_repo.create(self.db, Character(
                name=DEFAULT_CHARACTER_NAME,
                char_class=DEFAULT_CHARACTER_CLASS,
                overall_level=1,
                overall_total_xp=0,
                last_updated=now
            ))

            for stat_id in STAT_ORDER:
                self.stat_repo.create(self.db, Stat(
                    stat_id=stat_id,
                    name=STAT_NAMES[stat_id],
                    level=1,
                    xp=0,
                    total_xp=0
                ))

            for streak_type, label in STREAK_SEEDS:
                self.streak_repo.create(self.db, Streak(type=streak_type, label=label, count=0))

            for key, name, icon in ACHIEVEMENT_SEEDS:
                self.achievement_repo.create(self.db, Achievement(
                    key=key, name=name, icon=icon, unlocked=False
                ))

            if seed_quests:
                for seed in INITIAL_QUEST_SEEDS:
                    self.quest_repo.create(self.db, Quest(**seed, completed=False, date=today))

                self.quest_repo.create(self.db, Quest(
                    **INITIAL_BOSS_SEED,
                    completed=False,
                    date=today,
                    is_boss=True,
                    deadline=self.date_service.end_of_day_iso(today)
                ))

        logger.info(f"Character initialized on {today} (seed_quests={seed_quests})")
        return InitializeResult(seeded=True)

    def get_dashboard_snapshot(self) -> DashboardSnapshot:
        """
        Read-only aggregate view of the whole progression state.

        Equipment and ability bonuses are added on top of computed stat
        values here and never written back to the stat records.
        """
        today = self.date_service.today()
        character = self.character_repo.get_singleton(self.db)
        bonuses = BonusService(self.db).get_stat_bonuses()

        stats = sorted(
            self.stat_repo.get_all(self.db),
            key=lambda s: STAT_ORDER.index(s.stat_id) if s.stat_id in STAT_ORDER else len(STAT_ORDER)
        )
        stat_views = [
            StatResponse(
                stat_id=stat.stat_id,
                name=stat.name,
                level=stat.level,
                xp=stat.xp,
                total_xp=stat.total_xp,
                next_level_xp=leveling.stat_xp_to_next(stat.level),
                bonus=bonuses.get(stat.stat_id, 0),
                power=leveling.stat_power(stat.total_xp, bonuses.get(stat.stat_id, 0))
            )
            for stat in stats
        ]

        total_xp = sum(stat.total_xp for stat in stats)
        progress = leveling.character_level_from_total(total_xp)

        quests_today = self.quest_repo.get_for_date(self.db, today)
        active_boss = self.quest_repo.get_active_boss(self.db)

        return DashboardSnapshot(
            character=CharacterResponse.model_validate(character) if character else None,
            stats=stat_views,
            streaks=[StreakResponse.model_validate(s) for s in self.streak_repo.get_all(self.db)],
            quests_today=[QuestResponse.model_validate(q) for q in quests_today],
            completed_today=[QuestResponse.model_validate(q) for q in quests_today if q.completed],
            active_boss=QuestResponse.model_validate(active_boss) if active_boss else None,
            achievements=[AchievementResponse.model_validate(a) for a in self.achievement_repo.get_all(self.db)],
            overall_level=progress.level,
            overall_total_xp=total_xp,
            xp_in_level=progress.xp_in_level,
            xp_for_next_level=progress.xp_for_next_level,
            stat_bonuses=bonuses,
            today=today
        )
