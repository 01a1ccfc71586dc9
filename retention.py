import logging
from datetime import datetime, timedelta, timezone
from operator import attrgetter
from typing import Callable, Iterable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retention_str(last_played: datetime, retention_date: datetime) -> str:
    """Turn the time left until `last_played` falls behind `retention_date` into a readable string."""
    if retention_date >= last_played:
        return "0"

    seconds = int((last_played - retention_date).total_seconds())
    for unit, unit_seconds in (("day", 86400), ("hour", 3600), ("minute", 60)):
        amount = seconds // unit_seconds
        if amount > 0:
            return f"{amount} {unit}{'s' if amount > 1 else ''}"
    return "0"


class RetentionFilter:
    """
    Keeps only the items whose last playback is older than the retention period.

    Without a retention period every item passes, which means watched items
    get deleted right away; this is logged as a warning. Favorites never pass.
    """

    def __init__(self, retention_period: Optional[timedelta], service: str):
        self.retention_period = retention_period
        self.service = service

    def retention_date(self, now: Optional[datetime] = None) -> Optional[datetime]:
        if self.retention_period is None:
            return None
        return (now or datetime.now(timezone.utc)) - self.retention_period

    def is_expired(self, last_played: Optional[datetime], now: Optional[datetime] = None) -> bool:
        """Strict check: an item played exactly at the retention date is kept."""
        retention_date = self.retention_date(now)
        if retention_date is None:
            return True
        if last_played is None:
            return False
        return last_played < retention_date

    def filter(
        self,
        items: Iterable[T],
        last_played: Callable[[T], Optional[datetime]] = attrgetter("last_played"),
        name: Callable[[T], str] = attrgetter("name"),
        favorite: Callable[[T], bool] = attrgetter("is_favorite"),
        now: Optional[datetime] = None,
    ) -> List[T]:
        items = list(items)
        candidates = []
        for item in items:
            if favorite(item):
                logger.debug(f'"{name(item)}" is marked as favorite, skipping')
                continue
            candidates.append(item)

        retention_date = self.retention_date(now)
        if retention_date is None:
            if candidates:
                logger.warning(
                    f"no retention period is set for {self.service}, "
                    f"will delete all watched items immediately"
                )
            return candidates

        expired = []
        for item in candidates:
            played = last_played(item)
            if played is None:
                logger.debug(f'"{name(item)}" has no last played date, skipping')
            elif self.is_expired(played, now):
                expired.append(item)
            else:
                logger.debug(
                    f'retention period for "{name(item)}" is not yet passed '
                    f"({retention_str(played, retention_date)} left), skipping"
                )
        return expired


def latest_played(dates: Iterable[Optional[datetime]]) -> Optional[datetime]:
    """Most recent timestamp, ignoring missing ones."""
    return max((d for d in dates if d is not None), default=None)
