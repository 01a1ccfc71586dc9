from dataclasses import dataclass, field
from typing import List, Optional

from .download import DownloadTransferRef, TorrentClientKind


@dataclass
class Tag:
    id: int
    label: str

    @classmethod
    def from_api(cls, data: dict) -> "Tag":
        return cls(id=data["id"], label=data["label"])


@dataclass
class Movie:
    """A movie entry in Radarr."""

    id: int
    title: str
    monitored: bool = False
    tags: List[int] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "Movie":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            monitored=bool(data.get("monitored", False)),
            tags=list(data.get("tags") or []),
        )


@dataclass
class SeasonStatistics:
    episode_file_count: int = 0
    total_episode_count: int = 0
    next_airing: Optional[str] = None


@dataclass
class Season:
    season_number: int = 0
    statistics: SeasonStatistics = field(default_factory=SeasonStatistics)

    @property
    def is_complete(self) -> bool:
        return self.statistics.episode_file_count >= self.statistics.total_episode_count

    @property
    def wont_air(self) -> bool:
        return self.statistics.next_airing is None

    @classmethod
    def from_api(cls, data: dict) -> "Season":
        stats = data.get("statistics") or {}
        return cls(
            season_number=data.get("seasonNumber", 0),
            statistics=SeasonStatistics(
                episode_file_count=stats.get("episodeFileCount", 0),
                total_episode_count=stats.get("totalEpisodeCount", 0),
                next_airing=stats.get("nextAiring"),
            ),
        )


@dataclass
class SeriesInfo:
    """A series entry in Sonarr. `seasons` is None when Sonarr did not return any."""

    id: int
    title: str
    tags: List[int] = field(default_factory=list)
    size_on_disk: int = 0
    seasons: Optional[List[Season]] = None

    @classmethod
    def from_api(cls, data: dict) -> "SeriesInfo":
        seasons = data.get("seasons")
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            tags=list(data.get("tags") or []),
            size_on_disk=(data.get("statistics") or {}).get("sizeOnDisk", 0),
            seasons=None if seasons is None else [Season.from_api(s) for s in seasons],
        )


@dataclass
class Episode:
    """An episode entry in Sonarr."""

    id: int
    season_number: int
    episode_number: int
    episode_file_id: Optional[int] = None
    monitored: bool = False

    @classmethod
    def from_api(cls, data: dict) -> "Episode":
        return cls(
            id=data["id"],
            season_number=data["seasonNumber"],
            episode_number=data["episodeNumber"],
            # Sonarr reports 0 when there is no file on disk
            episode_file_id=data.get("episodeFileId") or None,
            monitored=bool(data.get("monitored", False)),
        )

    def __str__(self) -> str:
        return f"S{self.season_number:02}E{self.episode_number:02}"


@dataclass(frozen=True)
class HistoryRecord:
    """A "grabbed" history record of Radarr or Sonarr."""

    library_id: Optional[int]
    download_id: Optional[str]
    download_client: Optional[str]
    event_type: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict, id_field: str) -> "HistoryRecord":
        extra = data.get("data") or {}
        return cls(
            library_id=data.get(id_field),
            download_id=data.get("downloadId"),
            download_client=extra.get("downloadClient") or extra.get("downloadClientName"),
            event_type=data.get("eventType"),
        )

    def download_ref(self) -> Optional[DownloadTransferRef]:
        kind = TorrentClientKind.parse(self.download_client)
        if kind is None or not self.download_id:
            return None
        return DownloadTransferRef(kind=kind, transfer_hash=self.download_id)
