from typing import Iterable, List

from models.config import RadarrConfig
from models.library import Movie

from .arr import ArrService


class RadarrService(ArrService):
    history_ids_param = "movieIds"
    history_id_field = "movieId"

    def __init__(self, config: RadarrConfig):
        super().__init__(config.base_url, config.api_key, config.verify_ssl)
        self.config = config

    def movies_by_tmdb_id(self, tmdb_id: str) -> List[Movie]:
        return [Movie.from_api(movie) for movie in self._get("movie", params={"tmdbId": tmdb_id})]

    def delete_movie(self, movie_id: int, delete_files: bool = True) -> None:
        self._delete(f"movie/{movie_id}", params={"deleteFiles": str(delete_files).lower()})

    def unmonitor_movies(self, movie_ids: Iterable[int]) -> List[Movie]:
        """Bulk unmonitor movies, returning the updated entries."""
        response = self._put("movie/editor", {"movieIds": sorted(movie_ids), "monitored": False})
        return [Movie.from_api(movie) for movie in response or []]
