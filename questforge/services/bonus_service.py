"""
Stat bonus service.
Sums flat stat bonuses from equipment and passive abilities.
"""
import json
import logging
from typing import Dict, Optional
from sqlalchemy.orm import Session

from questforge.repositories.bonus_repository import BonusRepository
from questforge.constants import STAT_ORDER

logger = logging.getLogger("questforge.bonuses")


class BonusService:
    """Service for equipment/ability stat bonuses"""

    def __init__(self, db: Session):
        self.db = db
        self.bonus_repo = BonusRepository()

    def get_stat_bonuses(self) -> Dict[str, int]:
        """
        Total bonus per stat from all equipped items and passive abilities.

        Returns:
            Mapping with every stat identifier (0 when no bonus)
        """
        totals = {stat_id: 0 for stat_id in STAT_ORDER}

        sources = self.bonus_repo.get_equipment(self.db) + self.bonus_repo.get_passive_abilities(self.db)
        for source in sources:
            for stat_id, value in self._parse_bonuses(source.name, source.stat_bonuses).items():
                totals[stat_id] += value

        return totals

    def _parse_bonuses(self, source_name: str, raw: Optional[str]) -> Dict[str, int]:
        """Parse a stat_bonuses JSON column, skipping malformed entries"""
        if not raw:
            return {}

        try:
            entries = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring malformed stat_bonuses on {source_name!r}")
            return {}

        if not isinstance(entries, list):
            return {}

        bonuses: Dict[str, int] = {}
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            stat_id = entry.get("stat")
            value = entry.get("value")
            if stat_id in STAT_ORDER and isinstance(value, int):
                bonuses[stat_id] = bonuses.get(stat_id, 0) + value
        return bonuses
