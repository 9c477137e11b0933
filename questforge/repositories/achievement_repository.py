"""
Achievement repository - Data access layer for Achievement model.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from questforge.models import Achievement


class AchievementRepository:
    """Repository for Achievement data access"""

    @staticmethod
    def get_by_key(db: Session, key: str) -> Optional[Achievement]:
        """Get achievement by its unique key"""
        return db.query(Achievement).filter(Achievement.key == key).one_or_none()

    @staticmethod
    def get_all(db: Session) -> List[Achievement]:
        """Get all achievements in creation order"""
        return db.query(Achievement).order_by(Achievement.id).all()

    @staticmethod
    def create(db: Session, achievement: Achievement) -> Achievement:
        """Add an achievement to the current unit of work"""
        db.add(achievement)
        db.flush()
        return achievement
