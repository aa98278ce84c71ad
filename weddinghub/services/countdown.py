"""
Countdown to the wedding.

The remaining time is broken down the way a calendar reads it: whole months
first (respecting real month lengths), then whole days, then whole hours.
"""
import asyncio
from dataclasses import dataclass, asdict
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Awaitable, Callable, Dict, Optional

from dateutil.relativedelta import relativedelta

from weddinghub.core.logging import logger


@dataclass(frozen=True)
class TimeLeft:
    months: int = 0
    days: int = 0
    hours: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


ZERO = TimeLeft()


def parse_wedding_date(raw: Optional[str], fallback: str) -> Optional[date]:
    """
    Parse the ``wedding_date`` setting.

    Only the leading ``YYYY-MM-DD`` is read, so full timestamps are accepted.
    An unset or blank value falls back to ``fallback``; anything unparseable
    returns None.
    """
    value = (raw or "").strip() or fallback
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def wedding_start(day: Optional[date], tz: tzinfo) -> Optional[datetime]:
    """Midnight at the start of ``day`` in the wedding's timezone."""
    if day is None:
        return None
    return datetime.combine(day, time.min, tzinfo=tz)


def months_between(start: datetime, end: datetime) -> int:
    """Whole calendar months that fit between ``start`` and ``end``."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if start + relativedelta(months=months) > end:
        months -= 1
    return max(0, months)


def time_left(target: Optional[datetime], now: datetime) -> TimeLeft:
    """
    Months, days and hours from ``now`` until ``target``.

    Months are added to ``now`` with end-of-month clamping (Jan 29 + 1 month is
    Feb 28), so near the end of a long month the day count can briefly rise.

    Args:
        target: Start of the wedding, or None when the configured date is invalid
        now: Current time; must be timezone-aware if ``target`` is

    Returns:
        The floored breakdown, or all zeros once the target has passed
    """
    if target is None or target <= now:
        return ZERO

    if target.tzinfo is not None and now.tzinfo is not None:
        now = now.astimezone(target.tzinfo)

    months = months_between(now, target)
    after_months = now + relativedelta(months=months)
    days = max(0, (target - after_months).days)
    after_days = after_months + timedelta(days=days)
    hours = max(0, int((target - after_days).total_seconds() // 3600))
    return TimeLeft(months=months, days=days, hours=hours)


class CountdownTicker:
    """
    Pushes a freshly computed countdown on a fixed interval.

    The first value is pushed immediately on ``start()``. ``stop()`` cancels the
    underlying task; the ticker also stops by itself as soon as a push fails,
    which is what happens when the receiving websocket has gone away.
    """

    def __init__(
        self,
        compute: Callable[[], TimeLeft],
        push: Callable[[TimeLeft], Awaitable[None]],
        interval: float = 60,
    ):
        self.compute = compute
        self.push = push
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    async def _run(self) -> None:
        while True:
            try:
                await self.push(self.compute())
            except Exception as e:
                logger.debug(f"Countdown push failed, stopping ticker: {e}")
                return
            await asyncio.sleep(self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
