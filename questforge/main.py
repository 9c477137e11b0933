from fastapi import FastAPI, Depends, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List
import logging
import os
from pathlib import Path

from questforge.database import engine, get_db, Base
from questforge import models  # noqa: F401  (registers tables with Base)
from questforge.schemas import (
    AwardXpRequest, XpResult, SetStatRequest, SetStatResult,
    LogQuestRequest, LogQuestResult, AddQuestRequest, AddQuestResult,
    QuestDescriptionUpdate, QuestResponse, CompleteQuestResult,
    GenerateDailyQuestsResult, BossFightRequest, BossFightResult, BossProgressUpdate,
    InitializeResult, DashboardSnapshot,
    AchievementCreate, AchievementUpdate, AchievementResult, AchievementResponse
)
from questforge.exceptions import (
    NotFoundException, CharacterNotInitializedException, ValidationException
)
from questforge.services.date_service import DateService
from questforge.services.character_service import CharacterService
from questforge.services.stat_service import StatService
from questforge.services.quest_service import QuestService
from questforge.services.daily_quest_service import DailyQuestService
from questforge.services.achievement_service import AchievementService
from questforge.services.scheduler_service import start_scheduler, stop_scheduler
from questforge.constants import (
    DEFAULT_LOG_DIRECTORY_PROD, DEFAULT_LOG_DIRECTORY_DEV,
    CORS_ALLOWED_ORIGINS, REASON_NO_CHARACTER
)

LOG_DIR = os.getenv("QUESTFORGE_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("QUESTFORGE_LOG_FILE", "app.log")

try:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE
except PermissionError:
    # Fallback to local directory if no permissions for /var/log
    LOG_DIR = DEFAULT_LOG_DIRECTORY_DEV
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger("questforge")

Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="QuestForge API",
    description="Turns completed real-world quests into stat XP, levels, streaks and achievements",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Single process-wide clock: every handler agrees on "today"
date_service = DateService()


def get_date_service() -> DateService:
    return date_service


@app.exception_handler(NotFoundException)
async def not_found_handler(request: Request, exc: NotFoundException):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"ok": False, "code": "NOT_FOUND", "message": str(exc)}
    )


@app.exception_handler(CharacterNotInitializedException)
async def not_initialized_handler(request: Request, exc: CharacterNotInitializedException):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"ok": False, "code": "NOT_INITIALIZED", "reason": REASON_NO_CHARACTER, "message": str(exc)}
    )


@app.exception_handler(ValidationException)
async def validation_handler(request: Request, exc: ValidationException):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"ok": False, "code": "VALIDATION_ERROR", "field": exc.field, "message": str(exc)}
    )


@app.on_event("startup")
async def startup_event():
    logger.info(f"QuestForge API started (timezone {date_service.timezone_name}). Logging to: {log_path}")
    start_scheduler()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down QuestForge API")
    stop_scheduler()


@app.get("/")
async def root():
    return {"message": "QuestForge API", "status": "active"}


# ===== CHARACTER ENDPOINTS =====

@app.post("/api/character/init", response_model=InitializeResult)
def initialize_character(
    seed_quests: bool = True,
    db: Session = Depends(get_db),
    clock: DateService = Depends(get_date_service)
):
    """Create the character, stats, streaks and achievements (no-op if present)"""
    return CharacterService(db, clock).initialize_character(seed_quests)


@app.get("/api/dashboard", response_model=DashboardSnapshot)
def get_dashboard(
    db: Session = Depends(get_db),
    clock: DateService = Depends(get_date_service)
):
    """Read-only progression snapshot"""
    return CharacterService(db, clock).get_dashboard_snapshot()


# ===== STAT ENDPOINTS =====

@app.post("/api/stats/{stat_id}/xp", response_model=XpResult)
def award_xp(
    stat_id: str,
    award: AwardXpRequest,
    db: Session = Depends(get_db),
    clock: DateService = Depends(get_date_service)
):
    """Award (or deduct) XP on a stat"""
    return StatService(db, clock).award_xp(stat_id, award.amount)


@app.put("/api/stats/{stat_id}", response_model=SetStatResult)
def set_stat_xp(
    stat_id: str,
    request: SetStatRequest,
    db: Session = Depends(get_db),
    clock: DateService = Depends(get_date_service)
):
    """Overwrite a stat's level and XP (correction)"""
    return StatService(db, clock).set_stat_xp(stat_id, request)


# ===== QUEST ENDPOINTS =====

@app.get("/api/quests", response_model=List[QuestResponse])
def get_quests(
    db: Session = Depends(get_db),
    clock: DateService = Depends(get_date_service)
):
    """All quests, newest first"""
    return QuestService(db, clock).list_quests()


@app.post("/api/quests/today", response_model=AddQuestResult)
def add_quest_today(
    request: AddQuestRequest,
    db: Session = Depends(get_db),
    clock: DateService = Depends(get_date_service)
):
    """Add an open quest for today"""
    return QuestService(db, clock).add_quest_today(request)


@app.post("/api/quests/log", response_model=LogQuestResult)
def log_completed_quest(
    request: LogQuestRequest,
    db: Session = Depends(get_db),
    clock: DateService = Depends(get_date_service)
):
    """Log a completed quest by name for today"""
    return QuestService(db, clock).log_completed_quest(request)


@app.post("/api/quests/daily", response_model=GenerateDailyQuestsResult)
def generate_daily_quests(
    db: Session = Depends(get_db),
    clock: DateService = Depends(get_date_service)
):
    """Generate today's quest set (idempotent)"""
    return DailyQuestService(db, clock).generate_daily_quests()


@app.post("/api/quests/{quest_id}/complete", response_model=CompleteQuestResult)
def complete_quest(
    quest_id: int,
    db: Session = Depends(get_db),
    clock: DateService = Depends(get_date_service)
):
    """Complete a stored quest"""
    return QuestService(db, clock).complete_quest(quest_id)


@app.put("/api/quests/{quest_id}/description", response_model=QuestResponse)
def update_quest_description(
    quest_id: int,
    update: QuestDescriptionUpdate,
    db: Session = Depends(get_db),
    clock: DateService = Depends(get_date_service)
):
    """Replace a quest's description"""
    return QuestService(db, clock).update_quest_description(quest_id, update)


# ===== BOSS ENDPOINTS =====

@app.post("/api/boss", response_model=BossFightResult, status_code=status.HTTP_201_CREATED)
def upsert_boss_fight(
    request: BossFightRequest,
    db: Session = Depends(get_db),
    clock: DateService = Depends(get_date_service)
):
    """Start a boss fight, retiring the active one"""
    return QuestService(db, clock).upsert_boss_fight(request)


@app.put("/api/boss/progress", response_model=QuestResponse)
def update_boss_progress(
    update: BossProgressUpdate,
    db: Session = Depends(get_db),
    clock: DateService = Depends(get_date_service)
):
    """Update the active boss fight's progress counter"""
    return QuestService(db, clock).update_boss_progress(update)


# ===== ACHIEVEMENT ENDPOINTS =====

@app.post("/api/achievements", response_model=AchievementResult)
def add_achievement(
    request: AchievementCreate,
    db: Session = Depends(get_db),
    clock: DateService = Depends(get_date_service)
):
    """Register a new achievement"""
    return AchievementService(db, clock).add_achievement(request)


@app.put("/api/achievements/{key}", response_model=AchievementResponse)
def update_achievement(
    key: str,
    request: AchievementUpdate,
    db: Session = Depends(get_db),
    clock: DateService = Depends(get_date_service)
):
    """Edit an achievement's name, icon or condition"""
    return AchievementService(db, clock).update_achievement(key, request)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("questforge.main:app", host="0.0.0.0", port=8000, reload=False)
