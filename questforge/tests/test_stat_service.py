"""
Tests for StatService.

Tests cover:
1. XP awards and penalties against the stat ledger
2. Lifetime totals and the recomputed overall level
3. Direct stat correction
"""
import pytest

from questforge.exceptions import (
    StatNotFoundException, CharacterNotInitializedException, ValidationException
)
from questforge.models import Stat, Character
from questforge.schemas import SetStatRequest
from questforge.services.stat_service import StatService


def get_stat(db, stat_id):
    return db.query(Stat).filter(Stat.stat_id == stat_id).one()


class TestAwardXp:
    """Tests for award_xp"""

    def test_award_levels_up_stat(self, initialized, date_service):
        service = StatService(initialized, date_service)

        result = service.award_xp("INT", 250)

        assert result.level == 2
        assert result.xp == 150
        assert result.total_xp == 250
        assert result.leveled_up is True

        stat = get_stat(initialized, "INT")
        assert (stat.level, stat.xp, stat.total_xp) == (2, 150, 250)

    def test_penalty_never_lowers_total_xp(self, initialized, date_service):
        service = StatService(initialized, date_service)

        service.award_xp("STR", 40)
        service.award_xp("STR", -25)
        service.award_xp("STR", 70)
        result = service.award_xp("STR", -1000)

        assert result.total_xp == 110
        assert result.level == 1
        assert result.xp == 0

    def test_overall_level_follows_total_xp(self, initialized, date_service):
        service = StatService(initialized, date_service)

        service.award_xp("INT", 300)
        result = service.award_xp("CRE", 200)

        assert result.overall_level == 2
        character = initialized.query(Character).one()
        assert character.overall_total_xp == 500
        assert character.overall_level == 2

    def test_penalty_does_not_reduce_overall_level(self, initialized, date_service):
        service = StatService(initialized, date_service)

        service.award_xp("DISC", 500)
        result = service.award_xp("DISC", -400)

        assert result.overall_level == 2

    def test_unknown_stat_raises(self, initialized, date_service):
        service = StatService(initialized, date_service)

        with pytest.raises(StatNotFoundException):
            service.award_xp("LUCK", 10)

    def test_oversized_amount_rejected(self, initialized, date_service):
        service = StatService(initialized, date_service)

        with pytest.raises(ValidationException):
            service.award_xp("INT", 2 ** 62)
        with pytest.raises(ValidationException):
            service.award_xp("INT", -(2 ** 62))

        stat = get_stat(initialized, "INT")
        assert (stat.level, stat.xp, stat.total_xp) == (1, 0, 0)

    def test_largest_allowed_amount(self, initialized, date_service):
        result = StatService(initialized, date_service).award_xp("INT", 1_000_000)

        assert result.total_xp == 1_000_000
        assert 0 <= result.xp < result.level * 100

    def test_requires_character(self, db_session, date_service):
        service = StatService(db_session, date_service)

        with pytest.raises(CharacterNotInitializedException):
            service.award_xp("INT", 10)


class TestSetStatXp:
    """Tests for set_stat_xp"""

    def test_overwrites_stat_and_recomputes(self, initialized, date_service):
        service = StatService(initialized, date_service)

        result = service.set_stat_xp("SOC", SetStatRequest(level=3, xp=50, total_xp=1500))

        assert result.overall_level == 3
        stat = get_stat(initialized, "SOC")
        assert (stat.level, stat.xp, stat.total_xp) == (3, 50, 1500)

    def test_rejects_xp_overflowing_level(self, initialized, date_service):
        service = StatService(initialized, date_service)

        with pytest.raises(ValidationException):
            service.set_stat_xp("SOC", SetStatRequest(level=2, xp=200, total_xp=300))

        stat = get_stat(initialized, "SOC")
        assert (stat.level, stat.xp) == (1, 0)
