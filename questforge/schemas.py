from pydantic import BaseModel, Field
import datetime
from datetime import date
from typing import Dict, List, Optional

from questforge.constants import MAX_XP_AMOUNT, MAX_TOTAL_XP

STAT_PATTERN = r"^(INT|DISC|STR|SOC|CRE)$"


# ===== LEVELING =====

class StatProgress(BaseModel):
    """Per-stat curve outcome for one award"""
    level: int
    xp: int
    next_level_xp: int
    leveled_up: bool = False
    leveled_down: bool = False


class CharacterProgress(BaseModel):
    """Character curve outcome for a lifetime XP total"""
    level: int
    xp_in_level: int
    xp_for_next_level: int


# ===== STATS =====

class AwardXpRequest(BaseModel):
    amount: int = Field(..., ge=-MAX_XP_AMOUNT, le=MAX_XP_AMOUNT)  # Signed: negative values are penalties


class SetStatRequest(BaseModel):
    level: int = Field(..., ge=1)
    xp: int = Field(..., ge=0)
    total_xp: int = Field(..., ge=0, le=MAX_TOTAL_XP)


class XpResult(BaseModel):
    stat_id: str
    amount: int
    level: int
    xp: int
    total_xp: int
    next_level_xp: int
    leveled_up: bool = False
    leveled_down: bool = False
    overall_level: int


class SetStatResult(BaseModel):
    ok: bool = True
    stat_id: str
    level: int
    xp: int
    total_xp: int
    overall_level: int


class StatResponse(BaseModel):
    stat_id: str
    name: str
    level: int
    xp: int
    total_xp: int
    next_level_xp: int = 0
    bonus: int = 0  # Equipment/ability bonus, never persisted
    power: int = 0  # floor(sqrt(total_xp) * 3) + bonus

    class Config:
        from_attributes = True


# ===== QUESTS =====

class LogQuestRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    stat: str = Field(..., pattern=STAT_PATTERN)
    xp_reward: int = Field(..., ge=0, le=MAX_XP_AMOUNT)
    is_penalty: bool = False
    description: Optional[str] = Field(None, max_length=2000)
    lore: Optional[str] = Field(None, max_length=2000)
    note: Optional[str] = Field(None, max_length=2000)  # Proof of completion


class AddQuestRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    stat: str = Field(..., pattern=STAT_PATTERN)
    xp_reward: int = Field(..., ge=0, le=MAX_XP_AMOUNT)
    is_penalty: bool = False
    description: Optional[str] = Field(None, max_length=2000)


class QuestDescriptionUpdate(BaseModel):
    description: str = Field(..., max_length=2000)


class QuestResponse(BaseModel):
    id: int
    name: str
    stat: str
    xp_reward: int
    is_penalty: bool
    is_boss: bool
    completed: bool
    date: date
    completed_at: Optional[str] = None
    description: Optional[str] = None
    lore: Optional[str] = None
    note: Optional[str] = None
    deadline: Optional[str] = None
    current_value: Optional[int] = None
    target_value: Optional[int] = None

    class Config:
        from_attributes = True


class CompleteQuestResult(BaseModel):
    ok: bool = True
    quest_id: int
    already_completed: bool = False
    xp_result: Optional[XpResult] = None
    streak_count: Optional[int] = None
    unlocked_achievements: List[str] = []


class LogQuestResult(BaseModel):
    ok: bool = True
    quest_id: int
    duplicate: bool = False
    created: bool = False
    xp_result: Optional[XpResult] = None


class AddQuestResult(BaseModel):
    ok: bool = True
    quest_id: int
    created: bool
    reason: Optional[str] = None


class GenerateDailyQuestsResult(BaseModel):
    ok: bool
    generated: bool = False
    reason: Optional[str] = None
    count: int = 0
    date: Optional[datetime.date] = None


# ===== BOSS FIGHTS =====

class BossFightRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    stat: str = Field(..., pattern=STAT_PATTERN)
    xp_reward: int = Field(..., ge=0, le=MAX_XP_AMOUNT)
    deadline: Optional[str] = None  # ISO-8601
    description: Optional[str] = Field(None, max_length=2000)
    lore: Optional[str] = Field(None, max_length=2000)
    current_value: Optional[int] = Field(None, ge=0)
    target_value: Optional[int] = Field(None, ge=0)


class BossProgressUpdate(BaseModel):
    current_value: int = Field(..., ge=0)


class BossFightResult(BaseModel):
    ok: bool = True
    quest_id: int
    retired_boss_ids: List[int] = []


# ===== CHARACTER =====

class InitializeResult(BaseModel):
    ok: bool = True
    seeded: bool
    reason: Optional[str] = None


class CharacterResponse(BaseModel):
    name: str
    char_class: str
    overall_level: int
    overall_total_xp: int
    last_updated: str

    class Config:
        from_attributes = True


class StreakResponse(BaseModel):
    type: str
    label: str
    count: int
    last_updated: Optional[date] = None

    class Config:
        from_attributes = True


# ===== ACHIEVEMENTS =====

class AchievementCreate(BaseModel):
    key: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    icon: str = Field(..., min_length=1, max_length=20)


class AchievementUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    icon: Optional[str] = Field(None, min_length=1, max_length=20)
    condition: Optional[str] = Field(None, max_length=500)


class AchievementResult(BaseModel):
    ok: bool = True
    created: bool = False
    reason: Optional[str] = None


class AchievementResponse(BaseModel):
    key: str
    name: str
    icon: str
    condition: Optional[str] = None
    unlocked: bool
    unlocked_at: Optional[str] = None

    class Config:
        from_attributes = True


# ===== DASHBOARD =====

class DashboardSnapshot(BaseModel):
    character: Optional[CharacterResponse] = None
    stats: List[StatResponse] = []
    streaks: List[StreakResponse] = []
    quests_today: List[QuestResponse] = []
    completed_today: List[QuestResponse] = []
    active_boss: Optional[QuestResponse] = None
    achievements: List[AchievementResponse] = []
    overall_level: int = 1
    overall_total_xp: int = 0
    xp_in_level: int = 0
    xp_for_next_level: int = 0
    stat_bonuses: Dict[str, int] = {}
    today: date
