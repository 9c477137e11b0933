"""
Bonus repository - Read-only access to equipment and abilities.
Both are managed outside the engine; only their stat bonuses are read.
"""
from typing import List
from sqlalchemy.orm import Session

from questforge.models import Equipment, Ability


class BonusRepository:
    """Repository for stat bonus sources"""

    @staticmethod
    def get_equipment(db: Session) -> List[Equipment]:
        """Get all equipped items"""
        return db.query(Equipment).order_by(Equipment.id).all()

    @staticmethod
    def get_passive_abilities(db: Session) -> List[Ability]:
        """Get abilities whose bonuses always apply"""
        return db.query(Ability).filter(Ability.is_passive == True).order_by(Ability.id).all()
