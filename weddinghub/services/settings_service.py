"""Wedding settings: the key/value configuration edited from the dashboard."""
from datetime import date
from typing import Dict, Iterable, Optional
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from weddinghub.core.config import settings
from weddinghub.core.logging import logger
from weddinghub.db.repositories import (
    read_settings as db_read_settings,
    write_settings as db_write_settings,
    list_settings as db_list_settings,
)
from weddinghub.schemas import RSVPFormConfig
from weddinghub.services.countdown import parse_wedding_date

KNOWN_SETTING_KEYS = (
    "wedding_date",
    "enable_dietary",
    "song_request_required",
    "watermark_url",
    "venue_text",
    "directions_text",
    "directions_map_url",
    "accommodation_text",
    "notes_text",
    "weather_location",
)

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def as_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    return default


class SettingsService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_settings(self, keys: Iterable[str] = KNOWN_SETTING_KEYS) -> Dict[str, Optional[str]]:
        """
        Read a subset of settings through the cache.

        A failed read is logged and treated as "nothing configured", so pages
        fall back to their defaults instead of failing.
        """
        try:
            return await db_read_settings(self.session, tuple(sorted(keys)))
        except SQLAlchemyError as e:
            logger.error(f"Failed to read wedding settings: {e}")
            return {}

    async def form_config(self) -> RSVPFormConfig:
        values = await self.get_settings(("enable_dietary", "song_request_required"))
        return RSVPFormConfig(
            enable_dietary=as_bool(values.get("enable_dietary"), True),
            song_request_required=as_bool(values.get("song_request_required"), True),
        )

    async def wedding_date(self) -> Optional[date]:
        values = await self.get_settings(("wedding_date",))
        return parse_wedding_date(values.get("wedding_date"), settings.DEFAULT_WEDDING_DATE)

    async def all_settings(self) -> Dict[str, Optional[str]]:
        """Every known key, None where unset. Bypasses the cache."""
        stored = await db_list_settings(self.session, KNOWN_SETTING_KEYS)
        return {key: stored.get(key) for key in KNOWN_SETTING_KEYS}

    async def update_settings(self, values: Dict[str, Optional[str]]) -> Dict[str, Optional[str]]:
        unknown = sorted(set(values) - set(KNOWN_SETTING_KEYS))
        if unknown:
            raise HTTPException(status_code=400, detail=f"Unknown setting(s): {', '.join(unknown)}")
        await db_write_settings(self.session, values)
        logger.info(f"Wedding settings updated: {', '.join(sorted(values))}")
        return await self.all_settings()
