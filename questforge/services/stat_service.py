"""
Stat ledger service.
The only writer of stat XP and level. Every change ends with a character
recompute inside the same unit of work.
"""
import logging
from typing import Optional
from sqlalchemy.orm import Session

from questforge.database import unit_of_work
from questforge.exceptions import StatNotFoundException, ValidationException
from questforge.repositories.stat_repository import StatRepository
from questforge.schemas import XpResult, SetStatRequest, SetStatResult
from questforge.services.character_service import CharacterService
from questforge.services.date_service import DateService
from questforge.services import leveling
from questforge.constants import MAX_XP_AMOUNT

logger = logging.getLogger("questforge.stats")


class StatService:
    """Service for stat XP bookkeeping"""

    def __init__(self, db: Session, date_service: Optional[DateService] = None):
        self.db = db
        self.stat_repo = StatRepository()
        self.character_service = CharacterService(db, date_service)

    def apply_delta(self, stat_id: str, amount: int) -> XpResult:
        """
        Apply a signed XP amount to one stat.

        Does not commit: callers run it inside their own unit of work.
        Only positive amounts count toward the lifetime total, so penalties
        never lower the overall level.

        Args:
            stat_id: One of INT, DISC, STR, SOC, CRE
            amount: Signed XP amount

        Returns:
            XpResult with the stat's new state and the recomputed overall level

        Raises:
            StatNotFoundException: If the stat record is missing
            ValidationException: If the amount exceeds MAX_XP_AMOUNT either way
        """
        if abs(amount) > MAX_XP_AMOUNT:
            raise ValidationException("amount", f"must be between -{MAX_XP_AMOUNT} and {MAX_XP_AMOUNT}")

        stat = self.stat_repo.get_by_stat_id(self.db, stat_id)
        if not stat:
            raise StatNotFoundException(stat_id)

        progress = leveling.apply_stat_delta(stat.level, stat.xp, amount)

        if progress.leveled_up:
            logger.info(f"{stat_id} leveled up {stat.level} -> {progress.level}")
        elif progress.leveled_down:
            logger.info(f"{stat_id} demoted {stat.level} -> {progress.level}")

        stat.level = progress.level
        stat.xp = progress.xp
        stat.total_xp += max(amount, 0)
        self.db.flush()

        overall_level = self.character_service.recompute()

        return XpResult(
            stat_id=stat_id,
            amount=amount,
            level=stat.level,
            xp=stat.xp,
            total_xp=stat.total_xp,
            next_level_xp=progress.next_level_xp,
            leveled_up=progress.leveled_up,
            leveled_down=progress.leveled_down,
            overall_level=overall_level
        )

    def award_xp(self, stat_id: str, amount: int) -> XpResult:
        """Award (or with a negative amount, deduct) XP as its own transaction"""
        with unit_of_work(self.db):
            self.character_service.require_character("award XP")
            return self.apply_delta(stat_id, amount)

    def set_stat_xp(self, stat_id: str, request: SetStatRequest) -> SetStatResult:
        """
        Overwrite a stat's level and XP directly (migration/correction).

        Raises:
            StatNotFoundException: If the stat record is missing
            ValidationException: If xp would overflow the level
        """
        if request.xp >= leveling.stat_xp_to_next(request.level):
            raise ValidationException(
                "xp", f"must be below {leveling.stat_xp_to_next(request.level)} at level {request.level}"
            )

        with unit_of_work(self.db):
            self.character_service.require_character("set stat XP")
            stat = self.stat_repo.get_by_stat_id(self.db, stat_id)
            if not stat:
                raise StatNotFoundException(stat_id)

            stat.level = request.level
            stat.xp = request.xp
            stat.total_xp = request.total_xp
            self.db.flush()

            overall_level = self.character_service.recompute()

        logger.info(f"{stat_id} corrected to level {request.level}, xp {request.xp}, total {request.total_xp}")
        return SetStatResult(
            stat_id=stat_id,
            level=request.level,
            xp=request.xp,
            total_xp=request.total_xp,
            overall_level=overall_level
        )
