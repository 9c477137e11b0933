"""QuestForge - gamified productivity progression engine."""

__version__ = "1.0.0"
