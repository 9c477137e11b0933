"""
Streak repository - Data access layer for Streak model.
One record per streak type.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from questforge.models import Streak


class StreakRepository:
    """Repository for Streak data access"""

    @staticmethod
    def get_by_type(db: Session, streak_type: str) -> Optional[Streak]:
        """Get streak by type (daily, gym, deep_work, reading)"""
        return db.query(Streak).filter(Streak.type == streak_type).one_or_none()

    @staticmethod
    def get_all(db: Session) -> List[Streak]:
        """Get all streaks in creation order"""
        return db.query(Streak).order_by(Streak.id).all()

    @staticmethod
    def create(db: Session, streak: Streak) -> Streak:
        """Add a streak to the current unit of work"""
        db.add(streak)
        db.flush()
        return streak
