from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from tuition.config import settings


APP_TIMEZONE = settings.app_timezone or 'Asia/Kolkata'
APP_ZONEINFO = ZoneInfo(APP_TIMEZONE)


class TimeProvider:
    def now(self) -> datetime:
        return datetime.now(APP_ZONEINFO)

    def today(self) -> date:
        return self.now().date()

    def naive_now(self) -> datetime:
        # Stored timestamps are naive local time; SQLite drops tzinfo anyway.
        return self.now().replace(tzinfo=None)


class FixedTimeProvider(TimeProvider):
    def __init__(self, moment: datetime) -> None:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=APP_ZONEINFO)
        self.moment = moment

    def now(self) -> datetime:
        return self.moment


default_time_provider = TimeProvider()
