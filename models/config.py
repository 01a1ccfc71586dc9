from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Optional


@dataclass
class JellyfinConfig:
    base_url: str
    api_key: str
    verify_ssl: bool = True


@dataclass
class RadarrConfig:
    base_url: str
    api_key: str
    retention_period: Optional[timedelta] = None
    tags_to_keep: List[str] = field(default_factory=list)
    unmonitor_watched: bool = False
    verify_ssl: bool = True


@dataclass
class SonarrConfig:
    base_url: str
    api_key: str
    retention_period: Optional[timedelta] = None
    tags_to_keep: List[str] = field(default_factory=list)
    unmonitor_watched: bool = False
    cleanup_mode: str = "series"  # series, episodes
    verify_ssl: bool = True


@dataclass
class QbittorrentConfig:
    base_url: str
    username: str
    password: str
    verify_ssl: bool = True


@dataclass
class DelugeConfig:
    base_url: str
    password: str
    verify_ssl: bool = True


@dataclass
class DownloadClientsConfig:
    qbittorrent: Optional[QbittorrentConfig] = None
    deluge: Optional[DelugeConfig] = None


@dataclass
class Config:
    username: str
    jellyfin: JellyfinConfig
    radarr: Optional[RadarrConfig] = None
    sonarr: Optional[SonarrConfig] = None
    download_clients: DownloadClientsConfig = field(default_factory=DownloadClientsConfig)
