"""
Custom exceptions for the progression engine.
Provides specific exception types so callers can tell faults apart.
"""


class QuestForgeException(Exception):
    """Base exception for the application"""
    pass


class NotFoundException(QuestForgeException):
    """Raised when a referenced record does not exist"""
    pass


class QuestNotFoundException(NotFoundException):
    """Raised when a quest is not found"""
    def __init__(self, quest_id: int):
        self.quest_id = quest_id
        super().__init__(f"Quest with ID {quest_id} not found")


class StatNotFoundException(NotFoundException):
    """Raised when a stat record is missing (data-integrity bug after init)"""
    def __init__(self, stat_id: str):
        self.stat_id = stat_id
        super().__init__(f"Stat {stat_id} not found")


class AchievementNotFoundException(NotFoundException):
    """Raised when an achievement key is not found"""
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Achievement {key} not found")


class BossNotFoundException(NotFoundException):
    """Raised when no boss fight is currently active"""
    def __init__(self):
        super().__init__("No active boss fight")


class CharacterNotInitializedException(QuestForgeException):
    """Raised when quest/XP operations run before the character exists"""
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Character not initialized: cannot {operation}")


class ValidationException(QuestForgeException):
    """Raised when data validation fails"""
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error for {field}: {message}")
