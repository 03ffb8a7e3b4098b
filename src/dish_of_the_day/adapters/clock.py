"""Calendar clock used for daily selection."""

from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from dish_of_the_day.services.selection import Clock


@dataclass
class SystemClock(Clock):
    """Reports today's date in a time zone, or server local time when unset."""

    timezone_name: str | None = None

    def today(self) -> str:
        """Return today's date as YYYY-MM-DD."""
        if self.timezone_name:
            return datetime.now(tz=ZoneInfo(self.timezone_name)).date().isoformat()
        return datetime.now().date().isoformat()
