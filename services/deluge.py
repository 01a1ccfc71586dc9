import logging
from typing import Any, Iterable, List

from exceptions import DelugeError
from models.config import DelugeConfig

from .arr import REQUEST_TIMEOUT, build_session
from .torrent_client import TorrentClient

logger = logging.getLogger(__name__)


class DelugeClient(TorrentClient):
    """Client for the Deluge Web UI JSON-RPC API. The `_session_id` cookie is kept by the session."""

    def __init__(self, config: DelugeConfig):
        self.url = f"{config.base_url.rstrip('/')}/json"
        self.session = build_session(config.verify_ssl)
        self._request_id = 0

        self._call("auth.login", [config.password])

    def _call(self, method: str, params: list) -> Any:
        """
        Submit a request to the Deluge API and return its `result`.

        Raises DelugeError if the response carries a non-null `error` or its
        `result` is `false`.
        """
        self._request_id += 1
        response = self.session.post(
            self.url,
            json={"method": method, "params": params, "id": self._request_id},
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        data = response.json()

        if error := data.get("error"):
            raise DelugeError(
                f"failed to call Deluge api: {error.get('message')} (error code {error.get('code')})"
            )
        result = data.get("result")
        if result is False:
            raise DelugeError(f"Deluge API returned falsy response for {method}")
        return result

    def list_torrents(self, hashes: Iterable[str]) -> List[str]:
        result = self._call(
            "core.get_torrents_status",
            [{"id": sorted(self.normalize_hashes(hashes))}, ["name", "state"]],
        )
        if not result:
            return []
        return [torrent["name"] for torrent in result.values()]

    def delete_torrents(self, hashes: Iterable[str]) -> None:
        self._call("core.remove_torrents", [sorted(self.normalize_hashes(hashes)), True])
