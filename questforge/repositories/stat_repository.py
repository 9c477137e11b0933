"""
Stat repository - Data access layer for Stat model.
Stats are keyed by their fixed identifier (INT, DISC, STR, SOC, CRE).
"""
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from questforge.models import Stat


class StatRepository:
    """Repository for Stat data access"""

    @staticmethod
    def get_by_stat_id(db: Session, stat_id: str) -> Optional[Stat]:
        """Get stat by its identifier"""
        return db.query(Stat).filter(Stat.stat_id == stat_id).one_or_none()

    @staticmethod
    def get_all(db: Session) -> List[Stat]:
        """Get all stat records"""
        return db.query(Stat).all()

    @staticmethod
    def get_total_xp(db: Session) -> int:
        """Sum of lifetime XP across all stats"""
        return db.query(func.coalesce(func.sum(Stat.total_xp), 0)).scalar()

    @staticmethod
    def create(db: Session, stat: Stat) -> Stat:
        """Add a stat to the current unit of work"""
        db.add(stat)
        db.flush()
        return stat
