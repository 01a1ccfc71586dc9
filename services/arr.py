import logging
from typing import Iterable, List

import requests
import urllib3

from models.library import HistoryRecord, Tag

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30
HISTORY_PAGE_SIZE = 100
# `eventType` filter value of "grabbed" history records
GRABBED_EVENT_TYPE = 1


def build_session(verify_ssl: bool = True) -> requests.Session:
    session = requests.Session()
    if not verify_ssl:
        # Disable SSL warnings
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        session.verify = False
    return session


class ArrService:
    """Shared plumbing of the Radarr and Sonarr v3 APIs."""

    # query parameter and record field used to filter history by library id
    history_ids_param = ""
    history_id_field = ""

    def __init__(self, base_url: str, api_key: str, verify_ssl: bool = True):
        self.base_url = f"{base_url.rstrip('/')}/api/v3"

        self.session = build_session(verify_ssl)
        self.session.headers.update({"X-Api-Key": api_key})

    def _get(self, path: str, params=None):
        response = self.session.get(
            f"{self.base_url}/{path}", params=params, timeout=REQUEST_TIMEOUT
        )
        response.raise_for_status()
        return response.json()

    def _put(self, path: str, payload: dict):
        response = self.session.put(
            f"{self.base_url}/{path}", json=payload, timeout=REQUEST_TIMEOUT
        )
        response.raise_for_status()
        return response.json() if response.content else None

    def _delete(self, path: str, params=None) -> None:
        response = self.session.delete(
            f"{self.base_url}/{path}", params=params, timeout=REQUEST_TIMEOUT
        )
        response.raise_for_status()

    def tags(self) -> List[Tag]:
        return [Tag.from_api(tag) for tag in self._get("tag")]

    def history_records(self, library_ids: Iterable[int]) -> List[HistoryRecord]:
        """Get all "grabbed" history records for the given library ids, page by page."""
        ids = sorted(set(library_ids))
        if not ids:
            return []

        params = [(self.history_ids_param, library_id) for library_id in ids]
        params += [("eventType", GRABBED_EVENT_TYPE), ("pageSize", HISTORY_PAGE_SIZE)]

        records = []
        page = 1
        while True:
            history = self._get("history", params=params + [("page", page)])
            page_records = history.get("records") or []
            if not page_records:
                break

            records.extend(
                HistoryRecord.from_api(record, self.history_id_field) for record in page_records
            )

            total = history.get("totalRecords")
            if total is not None and page * HISTORY_PAGE_SIZE >= total:
                break
            page += 1

        logger.debug(f"found {len(records)} history records for ids {ids}")
        return records
