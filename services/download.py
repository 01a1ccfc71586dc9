import logging
from typing import Dict, Optional, Set

from models.config import DownloadClientsConfig
from models.download import TorrentClientKind

from .deluge import DelugeClient
from .qbittorrent import QbittorrentClient
from .torrent_client import TorrentClient

logger = logging.getLogger(__name__)

HashesPerClient = Dict[TorrentClientKind, Set[str]]

CLIENT_REGISTRY = {
    TorrentClientKind.QBITTORRENT: ("qbittorrent", QbittorrentClient),
    TorrentClientKind.DELUGE: ("deluge", DelugeClient),
}


class DownloadService:
    """Talks to every download client defined in the config, keyed by client kind."""

    def __init__(self, clients: Dict[TorrentClientKind, TorrentClient]):
        self.clients = clients

    @classmethod
    def from_config(cls, config: DownloadClientsConfig) -> "DownloadService":
        clients = {}
        for kind, (attr, client_cls) in CLIENT_REGISTRY.items():
            client_config = getattr(config, attr)
            if client_config is not None:
                clients[kind] = client_cls(client_config)
                logger.debug(f"connected to download client {kind}")
        return cls(clients)

    def get_client(self, kind: TorrentClientKind) -> Optional[TorrentClient]:
        return self.clients.get(kind)

    def list(self, hashes: HashesPerClient) -> None:
        """Query each client for the given hashes and log the torrent names."""
        for kind, kind_hashes in hashes.items():
            client = self.get_client(kind)
            if client is None:
                logger.error(
                    f"unable to list torrents {sorted(kind_hashes)}, "
                    f'no client "{kind}" is configured'
                )
                continue

            names = client.list_torrents(kind_hashes)
            logger.info(f"found the following torrents for deletion in {kind}: {names}")

    def delete(self, hashes: HashesPerClient) -> None:
        """Delete torrents (and their files) by hash from each client."""
        for kind, kind_hashes in hashes.items():
            client = self.get_client(kind)
            if client is None:
                logger.error(
                    f"unable to delete torrents {sorted(kind_hashes)}, "
                    f'no client "{kind}" is configured'
                )
                continue

            names = client.list_torrents(kind_hashes)
            if not names:
                logger.debug(f'no torrents to delete for client "{kind}", skipping')
                continue

            client.delete_torrents(kind_hashes)
            logger.info(f'deleted torrents {names} from "{kind}"')
