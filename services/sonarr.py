from typing import Iterable, List

from models.config import SonarrConfig
from models.library import Episode, SeriesInfo

from .arr import ArrService


class SonarrService(ArrService):
    history_ids_param = "seriesIds"
    history_id_field = "seriesId"

    def __init__(self, config: SonarrConfig):
        super().__init__(config.base_url, config.api_key, config.verify_ssl)
        self.config = config

    def series_by_tvdb_id(self, tvdb_id: str) -> List[SeriesInfo]:
        return [SeriesInfo.from_api(s) for s in self._get("series", params={"tvdbId": tvdb_id})]

    def delete_series(self, series_id: int, delete_files: bool = True) -> None:
        self._delete(f"series/{series_id}", params={"deleteFiles": str(delete_files).lower()})

    def episodes_by_series(self, series_id: int) -> List[Episode]:
        return [Episode.from_api(ep) for ep in self._get("episode", params={"seriesId": series_id})]

    def unmonitor_episodes(self, episode_ids: Iterable[int]) -> List[Episode]:
        response = self._put("episode/monitor", {"episodeIds": sorted(episode_ids), "monitored": False})
        return [Episode.from_api(ep) for ep in response or []]

    def unmonitor_episode(self, episode_id: int) -> None:
        self._put("episode/monitor", {"episodeIds": [episode_id], "monitored": False})

    def delete_episode_file(self, episode_file_id: int) -> None:
        self._delete(f"episodefile/{episode_file_id}")
