import logging
from typing import List

from concurrency import run_concurrently
from deletion import delete_in_parallel
from download_reconciler import DownloadReconciler
from episode_matcher import matched_episodes
from models.config import SonarrConfig
from models.library import SeriesInfo
from retention import RetentionFilter
from services.download import DownloadService
from services.jellyfin import JellyfinService
from services.sonarr import SonarrService
from tag_policy import TagPolicy
from watched_shows import WatchedShow, watched_shows

logger = logging.getLogger(__name__)


def safe_to_delete(series: SeriesInfo, tag_policy: TagPolicy) -> bool:
    """
    Check if a whole series can be deleted.

    Every season has to be either fully downloaded or done airing. A series
    without season data is never deleted since nothing is known about it.
    """
    title = series.title

    if tag_policy.is_protected(series.tags):
        logger.debug(f"{title}: series has forbidden tags, skipping")
        return False
    if series.size_on_disk <= 0:
        logger.debug(f"{title}: series not present on disk, skipping")
        return False
    if series.seasons is None:
        logger.debug(f"{title}: missing `seasons` entry, skipping")
        return False
    if not series.seasons:
        logger.debug(f"{title}: series has no seasons, skipping")
        return False

    for season in series.seasons:
        if not (season.is_complete or season.wont_air):
            logger.debug(f"{title}: season {season.season_number} is still airing, skipping")
            return False
    return True


class SeriesCleaner:
    """Removes fully watched series from Sonarr and the download clients."""

    def __init__(
        self,
        config: SonarrConfig,
        jellyfin: JellyfinService,
        download_service: DownloadService,
        user_id: str,
        sonarr: SonarrService = None,
    ):
        self.config = config
        self.jellyfin = jellyfin
        self.download_service = download_service
        self.user_id = user_id
        self.sonarr = sonarr or SonarrService(config)
        self.retention = RetentionFilter(config.retention_period, "Sonarr")

    def clean_series(self, force_delete: bool = False) -> None:
        logger.info(f"Starting series cleanup process... ({'LIVE RUN' if force_delete else 'DRY RUN'})")

        shows = watched_shows(self.jellyfin, self.sonarr, self.user_id)
        if not shows:
            logger.info("no series with watched episodes found!")
            return

        if self.config.unmonitor_watched:
            self._unmonitor_watched_episodes(shows, force_delete)

        tag_policy = TagPolicy.resolve(self.config.tags_to_keep, self.sonarr.tags(), "Sonarr")
        series = self.series_for_deletion(shows, tag_policy)
        if not series:
            logger.info("no series found for deletion!")
            return

        series_ids = {s.id for s in series}
        titles = sorted({s.title for s in series})
        download_ids = DownloadReconciler(self.sonarr).download_ids(series_ids)

        if force_delete:
            delete_in_parallel(series_ids, self.sonarr.delete_series, desc="Deleting Series")
            logger.info(f"successfully deleted series: {titles}")
            self.download_service.delete(download_ids)
        else:
            logger.info(
                f"no items will be deleted as no `--force-delete` flag is provided. "
                f"Listing them instead: {titles}"
            )
            self.download_service.list(download_ids)

    def series_for_deletion(self, shows: List[WatchedShow], tag_policy: TagPolicy) -> List[SeriesInfo]:
        fully_watched = []
        for show in shows:
            if show.fully_watched:
                fully_watched.append(show)
            else:
                logger.debug(f'"{show.name}" is not fully watched yet, skipping')

        series = []
        for show in self.retention.filter(fully_watched):
            series.extend(s for s in show.sonarr_series if safe_to_delete(s, tag_policy))
        return series

    def _unmonitor_watched_episodes(self, shows: List[WatchedShow], force_delete: bool) -> None:
        """Unmonitor watched episodes that are still monitored. Only listed on a dry run."""
        pairs = [(show, series) for show in shows for series in show.sonarr_series]

        def monitored(pair):
            show, series = pair
            episodes = self.sonarr.episodes_by_series(series.id)
            return [
                (series.title, ep)
                for ep in matched_episodes(series, show.episodes, episodes)
                if ep.monitored
            ]

        results = run_concurrently(monitored, pairs, desc="Fetching Episodes", unit="series")
        titles_by_id = {ep.id: title for result in results for title, ep in result}
        if not titles_by_id:
            logger.debug("no monitored episodes found for unmonitoring")
            return

        if not force_delete:
            lines = "\n".join(f'  - "{title}" {ep}' for result in results for title, ep in result)
            logger.info(f"episodes that would be unmonitored:\n{lines}")
            return

        updated = self.sonarr.unmonitor_episodes(set(titles_by_id))
        lines = "\n".join(f'  - "{titles_by_id.get(ep.id, "")}" {ep}' for ep in updated)
        logger.info(f"unmonitored episodes:\n{lines}")
