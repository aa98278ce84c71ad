from datetime import datetime
from typing import Optional
from urllib.parse import quote
from zoneinfo import ZoneInfo
from sqlalchemy.ext.asyncio import AsyncSession
from weddinghub.core.config import settings
from weddinghub.schemas import CountdownOut, TimeLeftOut, WeddingInfoOut
from weddinghub.services.countdown import TimeLeft, parse_wedding_date, time_left, wedding_start
from weddinghub.services.settings_service import SettingsService, as_bool

DEFAULT_WEATHER_LOCATION = "Kirkwood,Eastern Cape,ZA"


def wedding_tz() -> ZoneInfo:
    return ZoneInfo(settings.WEDDING_TIMEZONE)


def weather_url(location: str) -> str:
    return f"https://www.accuweather.com/en/search-locations?query={quote(location)}"


class WeddingService:
    """Public, read-only view of the wedding: countdown and practical info."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings_service = SettingsService(session)

    async def countdown(self, now: Optional[datetime] = None) -> CountdownOut:
        day = await self.settings_service.wedding_date()
        return self._countdown_for(day, now)

    def _countdown_for(self, day, now: Optional[datetime]) -> CountdownOut:
        now = now or datetime.now(wedding_tz())
        remaining = time_left(wedding_start(day, wedding_tz()), now)
        return CountdownOut(wedding_date=day, time_left=TimeLeftOut(**remaining.as_dict()))

    async def info(self, now: Optional[datetime] = None) -> WeddingInfoOut:
        values = await self.settings_service.get_settings()
        day = parse_wedding_date(values.get("wedding_date"), settings.DEFAULT_WEDDING_DATE)
        countdown = self._countdown_for(day, now)
        location = (values.get("weather_location") or "").strip() or DEFAULT_WEATHER_LOCATION
        return WeddingInfoOut(
            wedding_date=countdown.wedding_date,
            time_left=countdown.time_left,
            form={
                "enable_dietary": as_bool(values.get("enable_dietary"), True),
                "song_request_required": as_bool(values.get("song_request_required"), True),
            },
            watermark_url=values.get("watermark_url"),
            venue_text=values.get("venue_text"),
            directions_text=values.get("directions_text"),
            directions_map_url=values.get("directions_map_url"),
            accommodation_text=values.get("accommodation_text"),
            notes_text=values.get("notes_text"),
            weather_location=location,
            weather_url=weather_url(location),
        )

    async def countdown_source(self):
        """
        Return a zero-argument callable computing the current countdown.

        The target date is read once; each call only looks at the clock.
        """
        target = wedding_start(await self.settings_service.wedding_date(), wedding_tz())

        def compute() -> TimeLeft:
            return time_left(target, datetime.now(wedding_tz()))

        return compute
