"""
Date calculation service.
Owns the single canonical notion of "today": the calendar date in the
configured timezone, never the caller's local time.
"""
from datetime import datetime, date, time
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from questforge.constants import TIMEZONE


class DateService:
    """Clock bound to one timezone"""

    def __init__(
        self,
        timezone_name: str = TIMEZONE,
        now_provider: Optional[Callable[[], datetime]] = None
    ):
        """
        Args:
            timezone_name: IANA timezone that decides day boundaries
            now_provider: Returns the current instant. Naive values are taken
                as UTC. Defaults to the system clock.
        """
        self.timezone_name = timezone_name
        self.tz = ZoneInfo(timezone_name)
        self._now_provider = now_provider

    def now(self) -> datetime:
        """Current time as an aware datetime in the configured timezone"""
        if self._now_provider is None:
            return datetime.now(self.tz)

        current = self._now_provider()
        if current.tzinfo is None:
            current = current.replace(tzinfo=ZoneInfo("UTC"))
        return current.astimezone(self.tz)

    def today(self) -> date:
        """Calendar date in the configured timezone"""
        return self.now().date()

    def now_iso(self) -> str:
        """Current timestamp as ISO-8601 string"""
        return self.now().isoformat()

    def end_of_day_iso(self, target_date: Optional[date] = None) -> str:
        """
        Last second of a day as ISO-8601 string (used for boss deadlines).

        Args:
            target_date: Day to close, defaults to today
        """
        target_date = target_date or self.today()
        return datetime.combine(target_date, time(23, 59, 59), tzinfo=self.tz).isoformat()
