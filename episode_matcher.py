"""
Matching of watched Jellyfin episodes to Sonarr episodes.

Jellyfin and Sonarr episode ids live in unrelated id spaces, so episodes are
matched by their (season, episode) numbers within an already matched series.

Known limitation: specials (season 0) and absolute numbering (common for
anime) may be numbered differently by the two systems and then either do not
match or match the wrong episode.
"""

import logging
from typing import Iterator, List, Optional, Tuple

from models.deletion import EpisodeFileDeletion
from models.library import Episode, SeriesInfo
from models.watched_item import WatchedItem

logger = logging.getLogger(__name__)


def episode_ordinals(item: WatchedItem, series_title: str) -> Optional[Tuple[int, int]]:
    season, episode = item.season_number, item.episode_number
    if season is None and episode is None:
        missing = "both season and episode numbers"
    elif season is None:
        missing = "season number"
    elif episode is None:
        missing = "episode number"
    else:
        return season, episode

    logger.warning(f'episode "{item.name}" from series {series_title} missing {missing}, skipping')
    return None


def find_episode(episodes: List[Episode], season: int, episode: int) -> Optional[Episode]:
    return next(
        (ep for ep in episodes if ep.season_number == season and ep.episode_number == episode),
        None,
    )


def matched_episodes(
    series: SeriesInfo, watched: List[WatchedItem], episodes: List[Episode]
) -> Iterator[Episode]:
    """Yield the Sonarr episodes of `series` that correspond to the watched Jellyfin episodes."""
    seen = set()
    for item in watched:
        ordinals = episode_ordinals(item, series.title)
        if ordinals is None:
            continue

        sonarr_episode = find_episode(episodes, *ordinals)
        if sonarr_episode is None:
            season, number = ordinals
            logger.debug(
                f"episode {series.title} S{season:02}E{number:02} not found in Sonarr, skipping"
            )
            continue
        if sonarr_episode.id in seen:
            continue

        seen.add(sonarr_episode.id)
        yield sonarr_episode


def match_episodes(
    series: SeriesInfo, watched: List[WatchedItem], episodes: List[Episode]
) -> List[EpisodeFileDeletion]:
    files = []
    for episode in matched_episodes(series, watched, episodes):
        if episode.episode_file_id is None:
            logger.debug(f"episode {series.title} {episode} has no file on disk in Sonarr, skipping")
            continue

        files.append(
            EpisodeFileDeletion(
                series_title=series.title,
                season=episode.season_number,
                episode=episode.episode_number,
                episode_id=episode.id,
                episode_file_id=episode.episode_file_id,
            )
        )
    return files
