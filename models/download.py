from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TorrentClientKind(Enum):
    """Download clients that can be cleaned up after a library deletion."""

    QBITTORRENT = "qBittorrent"
    DELUGE = "Deluge"

    @classmethod
    def parse(cls, name: Optional[str]) -> Optional["TorrentClientKind"]:
        """Match a download client name as stored by Radarr/Sonarr, ignoring case."""
        if not name:
            return None
        for kind in cls:
            if kind.value.lower() == name.strip().lower():
                return kind
        return None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DownloadTransferRef:
    kind: TorrentClientKind
    transfer_hash: str
