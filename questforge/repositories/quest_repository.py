"""
Quest repository - Data access layer for Quest model.
Handles all database queries related to quests and boss fights.
"""
from datetime import date
from typing import List, Optional
from sqlalchemy import and_
from sqlalchemy.orm import Session

from questforge.models import Quest


class QuestRepository:
    """Repository for Quest data access"""

    @staticmethod
    def get_by_id(db: Session, quest_id: int) -> Optional[Quest]:
        """Get quest by ID"""
        return db.query(Quest).filter(Quest.id == quest_id).first()

    @staticmethod
    def get_all(db: Session) -> List[Quest]:
        """Get all quests, newest date first"""
        return db.query(Quest).order_by(Quest.date.desc(), Quest.id.desc()).all()

    @staticmethod
    def find_for_date(db: Session, name: str, target_date: date) -> Optional[Quest]:
        """Find the non-boss quest instance with this name on a date"""
        return db.query(Quest).filter(
            and_(
                Quest.name == name,
                Quest.date == target_date,
                Quest.is_boss == False
            )
        ).order_by(Quest.id).first()

    @staticmethod
    def get_for_date(db: Session, target_date: date) -> List[Quest]:
        """Get all non-boss quests for a date"""
        return db.query(Quest).filter(
            and_(
                Quest.date == target_date,
                Quest.is_boss == False
            )
        ).order_by(Quest.id).all()

    @staticmethod
    def count_for_date(db: Session, target_date: date) -> int:
        """Count non-boss quests for a date"""
        return db.query(Quest).filter(
            and_(
                Quest.date == target_date,
                Quest.is_boss == False
            )
        ).count()

    @staticmethod
    def get_active_bosses(db: Session) -> List[Quest]:
        """Get all uncompleted boss fights"""
        return db.query(Quest).filter(
            and_(
                Quest.is_boss == True,
                Quest.completed == False
            )
        ).order_by(Quest.id).all()

    @staticmethod
    def get_active_boss(db: Session) -> Optional[Quest]:
        """Get the current boss fight, if any"""
        return db.query(Quest).filter(
            and_(
                Quest.is_boss == True,
                Quest.completed == False
            )
        ).order_by(Quest.id.desc()).first()

    @staticmethod
    def create(db: Session, quest: Quest) -> Quest:
        """Add a quest to the current unit of work"""
        db.add(quest)
        db.flush()
        return quest

    @staticmethod
    def update(db: Session, quest: Quest) -> Quest:
        """Flush pending changes on a quest"""
        db.flush()
        return quest
