import logging
from dataclasses import dataclass, field
from typing import Dict, List

from concurrency import run_concurrently
from deletion import delete_in_parallel
from download_reconciler import DownloadReconciler
from models.config import RadarrConfig
from models.library import Movie
from models.watched_item import WatchedItem
from retention import RetentionFilter, latest_played
from services.download import DownloadService
from services.jellyfin import JellyfinService
from services.radarr import RadarrService
from tag_policy import TagPolicy

logger = logging.getLogger(__name__)

MOVIE_ITEM_TYPES = ["Movie", "Video"]


@dataclass
class WatchedMovie:
    """Watched Jellyfin movies sharing a TMDB id, with every Radarr entry for that id."""

    tmdb_id: str
    jellyfin_items: List[WatchedItem]
    movies: List[Movie] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.jellyfin_items[0].name

    @property
    def last_played(self):
        return latest_played(item.last_played for item in self.jellyfin_items)

    @property
    def is_favorite(self) -> bool:
        return any(item.is_favorite for item in self.jellyfin_items)


def group_by_tmdb_id(items: List[WatchedItem]) -> Dict[str, List[WatchedItem]]:
    """Group Jellyfin items by TMDB id. Items without one can not be matched and are skipped."""
    grouped = {}
    for item in items:
        if not item.tmdb_id:
            logger.warning(f'movie "{item.name}" has no TMDB id, skipping')
            continue
        grouped.setdefault(item.tmdb_id, []).append(item)
    return grouped


class MovieCleaner:
    """Removes movies watched in Jellyfin from Radarr and the download clients."""

    def __init__(
        self,
        config: RadarrConfig,
        jellyfin: JellyfinService,
        download_service: DownloadService,
        user_id: str,
        radarr: RadarrService = None,
    ):
        self.config = config
        self.jellyfin = jellyfin
        self.download_service = download_service
        self.user_id = user_id
        self.radarr = radarr or RadarrService(config)
        self.retention = RetentionFilter(config.retention_period, "Radarr")

    def clean_movies(self, force_delete: bool = False) -> None:
        """
        Execute the movie cleanup process.

        Args:
            force_delete: If False, only list what would be deleted
        """
        logger.info(f"Starting movie cleanup process... ({'LIVE RUN' if force_delete else 'DRY RUN'})")

        watched = self.watched_movies()
        if not watched:
            logger.info("no watched movies found in Jellyfin!")
            return

        if self.config.unmonitor_watched:
            self._unmonitor(watched, force_delete)

        tag_policy = TagPolicy.resolve(self.config.tags_to_keep, self.radarr.tags(), "Radarr")
        movies = self.movies_for_deletion(watched, tag_policy)
        if not movies:
            logger.info("no movies found for deletion in Radarr!")
            return

        movie_ids = {movie.id for movie in movies}
        titles = sorted({movie.title for movie in movies})
        download_ids = DownloadReconciler(self.radarr).download_ids(movie_ids)

        if force_delete:
            delete_in_parallel(movie_ids, self.radarr.delete_movie, desc="Deleting Movies")
            logger.info(f"successfully deleted movies from Radarr: {titles}")
            self.download_service.delete(download_ids)
        else:
            logger.info(
                f"no items will be deleted as no `--force-delete` flag is provided. "
                f"Listing them instead: {titles}"
            )
            self.download_service.list(download_ids)

    def watched_movies(self) -> List[WatchedMovie]:
        """Query Jellyfin for watched movies and find their Radarr entries, one lookup per TMDB id."""
        items = self.jellyfin.watched_items(self.user_id, MOVIE_ITEM_TYPES)
        grouped = group_by_tmdb_id(items)
        logger.info(f"Found {len(grouped)} watched movies to review from Jellyfin.")

        def lookup(entry) -> WatchedMovie:
            tmdb_id, jellyfin_items = entry
            return WatchedMovie(tmdb_id, jellyfin_items, self.radarr.movies_by_tmdb_id(tmdb_id))

        watched = run_concurrently(lookup, grouped.items(), desc="Matching Movies", unit="movies")

        for movie in watched:
            if not movie.movies:
                logger.debug(f'movie "{movie.name}" (TMDB {movie.tmdb_id}) not found in Radarr')
        return [movie for movie in watched if movie.movies]

    def movies_for_deletion(self, watched: List[WatchedMovie], tag_policy: TagPolicy) -> List[Movie]:
        movies = []
        for entry in self.retention.filter(watched):
            for movie in entry.movies:
                if tag_policy.is_protected(movie.tags):
                    logger.debug(f'movie "{movie.title}" has forbidden tags, skipping')
                    continue
                movies.append(movie)
        return movies

    def _unmonitor(self, watched: List[WatchedMovie], force_delete: bool) -> None:
        """Unmonitor watched movies that are still monitored. Only listed on a dry run."""
        monitored = {
            movie.id: movie.title for entry in watched for movie in entry.movies if movie.monitored
        }
        if not monitored:
            logger.debug("no monitored movies found for unmonitoring")
            return

        if not force_delete:
            titles = "\n".join(f"  - {title}" for title in sorted(monitored.values()))
            logger.info(f"movies that would be unmonitored in Radarr:\n{titles}")
            return

        updated = self.radarr.unmonitor_movies(set(monitored))
        titles = "\n".join(f"  - {movie.title}" for movie in updated)
        logger.info(f"unmonitored movies in Radarr:\n{titles}")
