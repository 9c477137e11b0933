"""
Character repository - Data access layer for the Character singleton.
"""
from typing import Optional
from sqlalchemy.orm import Session

from questforge.models import Character


class CharacterRepository:
    """Repository for Character data access"""

    @staticmethod
    def get_singleton(db: Session) -> Optional[Character]:
        """
        Get the character, or None if the system is not initialized.

        Raises:
            MultipleResultsFound: if the single-character invariant is broken
        """
        return db.query(Character).one_or_none()

    @staticmethod
    def create(db: Session, character: Character) -> Character:
        """Add the character to the current unit of work"""
        db.add(character)
        db.flush()
        return character
