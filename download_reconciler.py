import logging
from collections import Counter
from typing import Iterable

from services.arr import ArrService
from services.download import HashesPerClient

logger = logging.getLogger(__name__)


class DownloadReconciler:
    """Finds the torrents that brought deleted library entries in, grouped by download client."""

    def __init__(self, manager: ArrService):
        self.manager = manager

    def download_ids(self, library_ids: Iterable[int]) -> HashesPerClient:
        library_ids = set(library_ids)
        per_client_hashes: HashesPerClient = {}
        unsupported = Counter()

        for record in self.manager.history_records(library_ids):
            if record.event_type not in (None, "grabbed"):
                continue
            if record.library_id is not None and record.library_id not in library_ids:
                continue
            if not record.download_id:
                continue

            ref = record.download_ref()
            if ref is None:
                unsupported[record.download_client or "unknown"] += 1
                continue
            per_client_hashes.setdefault(ref.kind, set()).add(ref.transfer_hash)

        for client, count in unsupported.items():
            logger.warning(f'download client "{client}" is not supported, skipping {count} downloads')

        logger.debug(f"download ids per client: {per_client_hashes}")
        return per_client_hashes
