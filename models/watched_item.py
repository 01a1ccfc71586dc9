import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional

# Jellyfin emits 7 fractional digits ("2024-03-01T20:15:42.1234567Z")
_FRACTION_RE = re.compile(r"\.(\d{6})\d+")


def parse_jellyfin_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a Jellyfin ISO-8601 timestamp into an aware UTC datetime."""
    if not value:
        return None

    value = _FRACTION_RE.sub(r".\1", value.strip())
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"

    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass(frozen=True)
class WatchedItem:
    """A movie, series or episode as reported by Jellyfin for one user."""

    name: str
    id: str
    provider_ids: Dict[str, str] = field(default_factory=dict)
    series_id: Optional[str] = None
    season_number: Optional[int] = None
    episode_number: Optional[int] = None
    last_played: Optional[datetime] = None
    played: bool = False
    is_favorite: bool = False

    @property
    def tmdb_id(self) -> Optional[str]:
        return self.provider_ids.get("Tmdb") or None

    @property
    def tvdb_id(self) -> Optional[str]:
        return self.provider_ids.get("Tvdb") or None

    @classmethod
    def from_jellyfin(cls, data: dict) -> "WatchedItem":
        user_data = data.get("UserData") or {}
        return cls(
            name=data.get("Name", ""),
            id=data["Id"],
            provider_ids=dict(data.get("ProviderIds") or {}),
            series_id=data.get("SeriesId"),
            season_number=data.get("ParentIndexNumber"),
            episode_number=data.get("IndexNumber"),
            last_played=parse_jellyfin_date(user_data.get("LastPlayedDate")),
            played=bool(user_data.get("Played", False)),
            is_favorite=bool(user_data.get("IsFavorite", False)),
        )
