import logging
from typing import List, Optional, Sequence

from exceptions import UserNotFoundError
from models.config import JellyfinConfig
from models.watched_item import WatchedItem

from .arr import REQUEST_TIMEOUT, build_session

logger = logging.getLogger(__name__)


class ItemsFilter:
    """
    Query filter for the Jellyfin /Items endpoint.

    Built fluently and turned into query parameters with `params()`. List
    values are sent comma separated, unset values are left out.
    https://api.jellyfin.org/#tag/Items/operation/GetItems
    """

    def __init__(self):
        self.fields: Sequence[str] = ()
        self.include_item_types: Sequence[str] = ()
        self.ids: Sequence[str] = ()
        self.is_favorite: Optional[bool] = None
        self.is_played: Optional[bool] = None
        self.recursive: Optional[bool] = None
        self.user_id: Optional[str] = None

    @classmethod
    def watched(cls) -> "ItemsFilter":
        """Played, non favorite items, with provider ids attached."""
        return cls().with_recursive().with_played().with_favorite(False).with_fields(["ProviderIds"])

    def with_user_id(self, user_id: str) -> "ItemsFilter":
        self.user_id = user_id
        return self

    def with_played(self) -> "ItemsFilter":
        self.is_played = True
        return self

    def with_recursive(self) -> "ItemsFilter":
        self.recursive = True
        return self

    def with_favorite(self, value: bool) -> "ItemsFilter":
        self.is_favorite = value
        return self

    def with_item_types(self, types: Sequence[str]) -> "ItemsFilter":
        self.include_item_types = tuple(types)
        return self

    def with_fields(self, fields: Sequence[str]) -> "ItemsFilter":
        self.fields = tuple(fields)
        return self

    def with_ids(self, ids: Sequence[str]) -> "ItemsFilter":
        self.ids = tuple(ids)
        return self

    def params(self) -> dict:
        values = {
            "fields": ",".join(self.fields),
            "includeItemTypes": ",".join(self.include_item_types),
            "ids": ",".join(self.ids),
            "isFavorite": self.is_favorite,
            "isPlayed": self.is_played,
            "recursive": self.recursive,
            "userId": self.user_id,
        }

        params = {}
        for key, value in values.items():
            if value is None or value == "":
                continue
            params[key] = str(value).lower() if isinstance(value, bool) else value
        return params


class JellyfinService:
    def __init__(self, config: JellyfinConfig):
        self.base_url = config.base_url.rstrip("/")

        self.session = build_session(config.verify_ssl)
        self.session.headers.update(auth_headers(config.api_key))

    def _get(self, path: str, params=None):
        response = self.session.get(f"{self.base_url}/{path}", params=params, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json()

    def get_user_id(self, username: str) -> str:
        """Get a user id by its username. Raises UserNotFoundError when there is no such user."""
        for user in self._get("Users"):
            if user.get("Name") == username:
                return user["Id"]
        raise UserNotFoundError(username)

    def get_items(self, items_filter: ItemsFilter) -> List[WatchedItem]:
        data = self._get("Items", params=items_filter.params())
        items = [WatchedItem.from_jellyfin(item) for item in data.get("Items", [])]
        logger.debug(f"Jellyfin returned {len(items)} items")
        return items

    def watched_items(self, user_id: str, item_types: Sequence[str]) -> List[WatchedItem]:
        return self.get_items(
            ItemsFilter.watched().with_user_id(user_id).with_item_types(item_types)
        )


def auth_headers(api_key: str) -> dict:
    return {"Authorization": f"MediaBrowser Token={api_key}"}
