"""
Application constants and environment-driven defaults.
"""
import os

# ===== ENVIRONMENT =====

DEFAULT_DATABASE_URL = "sqlite:///./questforge.db"
DEFAULT_TIMEZONE = "Asia/Shanghai"

DATABASE_URL = os.getenv("QUESTFORGE_DATABASE_URL", DEFAULT_DATABASE_URL)
TIMEZONE = os.getenv("QUESTFORGE_TIMEZONE", DEFAULT_TIMEZONE)

DEFAULT_LOG_DIRECTORY_PROD = "/var/log/questforge"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"

AUTO_DAILY_QUESTS_ENABLED = os.getenv("QUESTFORGE_AUTO_DAILY_QUESTS", "false").lower() in ("1", "true", "yes")
DAILY_QUESTS_CRON_HOUR = 0
DAILY_QUESTS_CRON_MINUTE = 5

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("QUESTFORGE_CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

# ===== STATS =====

STAT_INT = "INT"
STAT_DISC = "DISC"
STAT_STR = "STR"
STAT_SOC = "SOC"
STAT_CRE = "CRE"

# Display order for dashboards
STAT_ORDER = (STAT_INT, STAT_DISC, STAT_STR, STAT_SOC, STAT_CRE)

STAT_NAMES = {
    STAT_INT: "Intelligence",
    STAT_DISC: "Discipline",
    STAT_STR: "Strength",
    STAT_SOC: "Social",
    STAT_CRE: "Creativity",
}

# ===== LEVEL CURVES =====

STAT_XP_PER_LEVEL = 100       # level N -> N+1 costs N * 100
CHARACTER_XP_PER_LEVEL = 500  # level N -> N+1 costs N * 500
STAT_POWER_FACTOR = 3         # power = floor(sqrt(total_xp) * 3)
MAX_XP_AMOUNT = 1_000_000   # per award, either sign
MAX_TOTAL_XP = 10 ** 12         # lifetime XP accepted by direct stat corrections

# ===== CHARACTER =====

DEFAULT_CHARACTER_NAME = "Player"
DEFAULT_CHARACTER_CLASS = "Founder"

# ===== STREAKS =====

STREAK_DAILY = "daily"
STREAK_GYM = "gym"
STREAK_DEEP_WORK = "deep_work"
STREAK_READING = "reading"

STREAK_SEEDS = [
    (STREAK_DAILY, "Daily"),
    (STREAK_GYM, "Gym"),
    (STREAK_DEEP_WORK, "Deep Work"),
    (STREAK_READING, "Reading"),
]

# ===== ACHIEVEMENTS =====

ACHIEVEMENT_FIRST_QUEST = "first_quest"

ACHIEVEMENT_SEEDS = [
    (ACHIEVEMENT_FIRST_QUEST, "First Blood", "🗡️"),
    ("discipline_10", "Iron Routine", "⛓️"),
    ("strength_5", "Body Forged", "🏋️"),
    ("social_5", "Networked", "🤝"),
    ("creator_5", "Spark Ignited", "✨"),
    ("int_5", "Mind Palace", "🧠"),
    ("boss_clear", "Boss Slayer", "👑"),
    ("week_streak", "Seven-Day Chain", "🔥"),
    ("unicornslayer", "Unicorn", "🦄"),
]

# ===== QUEST TEMPLATES =====

# Regenerated each day by the daily quest generator
DAILY_QUEST_TEMPLATES = [
    {
        "name": "Plan your top 3 priorities",
        "stat": STAT_DISC,
        "xp_reward": 20,
        "description": "Write down the three things that matter most today. The shorter the list, the sharper the execution.",
    },
    {
        "name": "60 minutes deep work sprint",
        "stat": STAT_INT,
        "xp_reward": 35,
        "description": "Sixty uninterrupted minutes of focused work. Notifications off, get into flow.",
    },
    {
        "name": "Workout / movement session",
        "stat": STAT_STR,
        "xp_reward": 30,
        "description": "Any form of training counts: gym, running, swimming. Just move.",
    },
    {
        "name": "Meaningful outreach or connection",
        "stat": STAT_SOC,
        "xp_reward": 25,
        "description": "Reach out to someone worth knowing: collaborate, ask, or share.",
    },
    {
        "name": "Create something publishable",
        "stat": STAT_CRE,
        "xp_reward": 40,
        "description": "Make one thing you could ship publicly: code, a feature, a piece of content.",
    },
    {
        "name": "Push a commit",
        "stat": STAT_CRE,
        "xp_reward": 30,
        "description": "Push at least one commit to a repository. Code is progress.",
    },
]

# Seeded once by initialize_character
INITIAL_QUEST_SEEDS = [
    {"name": "Plan your top 3 priorities", "stat": STAT_DISC, "xp_reward": 20},
    {"name": "60 minutes deep work sprint", "stat": STAT_INT, "xp_reward": 35},
    {"name": "Workout / movement session", "stat": STAT_STR, "xp_reward": 30},
    {"name": "Meaningful outreach", "stat": STAT_SOC, "xp_reward": 25},
    {"name": "Create something publishable", "stat": STAT_CRE, "xp_reward": 40},
]

INITIAL_BOSS_SEED = {
    "name": "Boss Fight: Ship Weekly Milestone",
    "stat": STAT_DISC,
    "xp_reward": 150,
}

# ===== RESULT REASONS =====

REASON_ALREADY_INITIALIZED = "already_initialized"
REASON_ALREADY_EXISTS = "already_exists"
REASON_NO_CHARACTER = "no_character"
