from sqlalchemy import Column, Integer, String, Boolean, Date, ForeignKey

from questforge.database import Base


class Character(Base):
    __tablename__ = "character"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    char_class = Column("class", String, nullable=False)

    # Cached aggregate, recomputed after every XP change
    overall_level = Column(Integer, default=1, nullable=False)
    overall_total_xp = Column(Integer, default=0, nullable=False)
    last_updated = Column(String, nullable=False)  # ISO-8601 timestamp


class Stat(Base):
    __tablename__ = "stats"

    id = Column(Integer, primary_key=True, index=True)
    stat_id = Column(String, nullable=False, unique=True, index=True)  # INT, DISC, STR, SOC, CRE
    name = Column(String, nullable=False)
    level = Column(Integer, default=1, nullable=False)
    xp = Column(Integer, default=0, nullable=False)        # Progress within current level
    total_xp = Column(Integer, default=0, nullable=False)  # Lifetime earned, never reduced


class Streak(Base):
    __tablename__ = "streaks"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String, nullable=False, unique=True, index=True)  # daily, gym, deep_work, reading
    label = Column(String, nullable=False)
    count = Column(Integer, default=0, nullable=False)
    last_updated = Column(Date, nullable=True)


class Quest(Base):
    __tablename__ = "quests"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    stat = Column(String, ForeignKey("stats.stat_id"), nullable=False)
    xp_reward = Column(Integer, default=0, nullable=False)
    is_penalty = Column(Boolean, default=False, nullable=False)  # Completing subtracts XP
    is_boss = Column(Boolean, default=False, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    date = Column(Date, nullable=False, index=True)  # Calendar day the instance belongs to
    completed_at = Column(String, nullable=True)     # ISO-8601 timestamp

    # Narrative / proof
    description = Column(String, nullable=True)
    lore = Column(String, nullable=True)
    note = Column(String, nullable=True)

    # Boss-specific fields
    deadline = Column(String, nullable=True)  # ISO-8601 timestamp
    current_value = Column(Integer, nullable=True)
    target_value = Column(Integer, nullable=True)


class Achievement(Base):
    __tablename__ = "achievements"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String, nullable=False, unique=True, index=True)
    name = Column(String, nullable=False)
    icon = Column(String, nullable=False)
    condition = Column(String, nullable=True)
    unlocked = Column(Boolean, default=False, nullable=False)
    unlocked_at = Column(String, nullable=True)  # ISO-8601 timestamp, set once


class Equipment(Base):
    """Equipped item. Managed outside the engine; read for stat bonuses only."""
    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True, index=True)
    slot = Column(String, nullable=False, unique=True)  # main_hand, head, ...
    name = Column(String, nullable=False)
    icon = Column(String, nullable=True)
    stat_bonuses = Column(String, nullable=True)  # JSON: [{"stat": "STR", "value": 3}]


class Ability(Base):
    """Learned ability. Managed outside the engine; passive bonuses are read only."""
    __tablename__ = "abilities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    icon = Column(String, nullable=True)
    is_passive = Column(Boolean, default=True, nullable=False)
    stat_bonuses = Column(String, nullable=True)  # JSON: [{"stat": "INT", "value": 2}]
