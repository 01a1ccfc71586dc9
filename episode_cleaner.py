import logging
from typing import List

from concurrency import run_concurrently
from deletion import delete_episode_files
from episode_matcher import match_episodes
from exceptions import DeletionFailedError
from models.config import SonarrConfig
from models.deletion import DeletionReport, EpisodeFileDeletion
from retention import RetentionFilter
from services.jellyfin import JellyfinService
from services.sonarr import SonarrService
from tag_policy import TagPolicy
from watched_shows import WatchedShow, watched_shows

logger = logging.getLogger(__name__)


class EpisodeCleaner:
    """
    Removes watched episode files from Sonarr while keeping the series and its
    unwatched episodes.

    Download client torrents are left alone here, a single grab often holds a
    whole season of which only some episodes were watched.
    """

    def __init__(
        self,
        config: SonarrConfig,
        jellyfin: JellyfinService,
        user_id: str,
        sonarr: SonarrService = None,
    ):
        self.config = config
        self.jellyfin = jellyfin
        self.user_id = user_id
        self.sonarr = sonarr or SonarrService(config)
        self.retention = RetentionFilter(config.retention_period, "Sonarr")

    def clean_episodes(self, force_delete: bool = False) -> DeletionReport:
        """
        Delete watched episode files.

        Raises:
            DeletionFailedError: if any episode could not be unmonitored or deleted;
                the remaining episodes are still processed
        """
        logger.info(f"Starting episode cleanup process... ({'LIVE RUN' if force_delete else 'DRY RUN'})")

        shows = watched_shows(self.jellyfin, self.sonarr, self.user_id)
        if not shows:
            logger.info("no watched episodes found!")
            return DeletionReport(dry_run=not force_delete)

        files = self.episode_files_for_deletion(shows)
        if not files:
            logger.info("no episode files found for deletion!")
            return DeletionReport(dry_run=not force_delete)

        report = delete_episode_files(self.sonarr, files, force_delete)
        if not report.ok:
            raise DeletionFailedError(len(report.failed), report.total)
        return report

    def episode_files_for_deletion(self, shows: List[WatchedShow]) -> List[EpisodeFileDeletion]:
        tag_policy = TagPolicy.resolve(self.config.tags_to_keep, self.sonarr.tags(), "Sonarr")

        work = []
        for show in shows:
            if show.is_favorite:
                logger.debug(f'"{show.name}" is marked as favorite, skipping')
                continue

            episodes = self.retention.filter(show.episodes)
            if not episodes:
                continue

            for series in show.sonarr_series:
                if tag_policy.is_protected(series.tags):
                    logger.debug(f"series {series.title} has forbidden tags, skipping all episodes")
                    continue
                work.append((series, episodes))

        def match(entry) -> List[EpisodeFileDeletion]:
            series, episodes = entry
            return match_episodes(series, episodes, self.sonarr.episodes_by_series(series.id))

        results = run_concurrently(match, work, desc="Matching Episodes", unit="series")
        return [file for files in results for file in files]
