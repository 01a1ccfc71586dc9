from abc import ABC, abstractmethod
from typing import Iterable, List, Set


class TorrentClient(ABC):
    """Capability shared by all download clients: list and delete torrents by hash."""

    @staticmethod
    def normalize_hashes(hashes: Iterable[str]) -> Set[str]:
        """
        Radarr and Sonarr store download ids (torrent hashes) upper-cased while
        torrent clients expect lower-cased hex strings.
        """
        return {h.lower() for h in hashes}

    @abstractmethod
    def list_torrents(self, hashes: Iterable[str]) -> List[str]:
        """Return the names of the torrents with the given hashes."""

    @abstractmethod
    def delete_torrents(self, hashes: Iterable[str]) -> None:
        """Delete the torrents with the given hashes together with their files."""
