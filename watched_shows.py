import logging
from dataclasses import dataclass, field
from typing import Dict, List

from concurrency import run_concurrently
from models.library import SeriesInfo
from models.watched_item import WatchedItem
from retention import latest_played
from services.jellyfin import ItemsFilter, JellyfinService
from services.sonarr import SonarrService

logger = logging.getLogger(__name__)


@dataclass
class WatchedShow:
    """
    A TV show with its watched Jellyfin episodes and the matching Sonarr series.

    The show itself is not necessarily fully watched. Several Jellyfin series
    items (e.g. from different libraries) may share one TVDB id, and Sonarr
    may hold more than one series for it.
    """

    tvdb_id: str
    jellyfin_series: List[WatchedItem]
    episodes: List[WatchedItem]
    sonarr_series: List[SeriesInfo] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.jellyfin_series[0].name

    @property
    def last_played(self):
        # the series' own user data is not reliable, use its episodes instead
        return latest_played(ep.last_played for ep in self.episodes)

    @property
    def is_favorite(self) -> bool:
        return any(series.is_favorite for series in self.jellyfin_series)

    @property
    def fully_watched(self) -> bool:
        return all(series.played for series in self.jellyfin_series)


def watched_shows(jellyfin: JellyfinService, sonarr: SonarrService, user_id: str) -> List[WatchedShow]:
    """Find every show with watched episodes and look its TVDB id up in Sonarr."""
    episodes = jellyfin.get_items(
        ItemsFilter.watched()
        .with_user_id(user_id)
        .with_item_types(["Episode"])
        .with_fields(["ProviderIds", "SeriesId", "SeriesName"])
    )
    if not episodes:
        return []

    episodes_per_series: Dict[str, List[WatchedItem]] = {}
    for episode in episodes:
        if not episode.series_id:
            logger.warning(f'episode "{episode.name}" does not belong to any series, skipping')
            continue
        episodes_per_series.setdefault(episode.series_id, []).append(episode)

    if not episodes_per_series:
        return []

    # some of these series may not be fully watched yet
    series_items = jellyfin.get_items(
        ItemsFilter()
        .with_user_id(user_id)
        .with_ids(sorted(episodes_per_series))
        .with_item_types(["Series"])
        .with_fields(["ProviderIds"])
    )

    shows: Dict[str, WatchedShow] = {}
    for series in series_items:
        if not series.tvdb_id:
            logger.warning(f'series "{series.name}" has no TVDB id, skipping')
            continue
        show = shows.setdefault(series.tvdb_id, WatchedShow(series.tvdb_id, [], []))
        show.jellyfin_series.append(series)
        show.episodes.extend(episodes_per_series.get(series.id, []))

    logger.info(f"Found {len(shows)} shows with watched episodes in Jellyfin.")

    def lookup(show: WatchedShow) -> WatchedShow:
        show.sonarr_series = sonarr.series_by_tvdb_id(show.tvdb_id)
        if not show.sonarr_series:
            logger.warning(f'series "{show.name}" with TVDB id {show.tvdb_id} not found in Sonarr')
        return show

    results = run_concurrently(lookup, shows.values(), desc="Matching Series", unit="series")
    return [show for show in results if show.sonarr_series]
