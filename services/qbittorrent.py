from typing import Iterable, List

from models.config import QbittorrentConfig

from .arr import REQUEST_TIMEOUT, build_session
from .torrent_client import TorrentClient


class QbittorrentClient(TorrentClient):
    """https://github.com/qbittorrent/qBittorrent/wiki/WebUI-API-(qBittorrent-4.1)"""

    def __init__(self, config: QbittorrentConfig):
        self.config = config
        self.base_url = f"{config.base_url.rstrip('/')}/api/v2"

        # Set up session, the SID cookie is kept by the session
        self.session = build_session(config.verify_ssl)
        self._authenticate()

    def _authenticate(self) -> None:
        response = self.session.post(
            f"{self.base_url}/auth/login",
            data={"username": self.config.username, "password": self.config.password},
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()

    def list_torrents(self, hashes: Iterable[str]) -> List[str]:
        response = self.session.get(
            f"{self.base_url}/torrents/info",
            params={"hashes": to_bar_separated_string(self.normalize_hashes(hashes))},
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        return [torrent["name"] for torrent in response.json()]

    def delete_torrents(self, hashes: Iterable[str]) -> None:
        response = self.session.post(
            f"{self.base_url}/torrents/delete",
            data={
                "hashes": to_bar_separated_string(self.normalize_hashes(hashes)),
                "deleteFiles": "true",
            },
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()


def to_bar_separated_string(hashes: Iterable[str]) -> str:
    values = sorted(hashes)
    if not values:
        # qBittorrent returns every torrent when no hash is given
        return "none"
    return "|".join(values)
