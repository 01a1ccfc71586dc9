import argparse
import logging
import os
import sys

import requests

from episode_cleaner import EpisodeCleaner
from exceptions import SanitarrError
from log_settings import parse_log_settings, setup_logging
from models.config import Config
from movie_cleaner import MovieCleaner
from series_cleaner import SeriesCleaner
from services.config import ConfigManager
from services.download import DownloadService
from services.jellyfin import JellyfinService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sanitarr",
        description="Delete items watched in Jellyfin from Radarr, Sonarr and the download clients.",
    )
    parser.add_argument(
        "-d",
        "--force-delete",
        action="store_true",
        help="Perform actual deletion of files. Without it the run only lists what would be deleted",
    )
    parser.add_argument(
        "-l",
        "--log-level",
        type=parse_log_settings,
        default=os.environ.get("LOG_LEVEL", "info"),
        help='Log level, optionally with per-logger levels, e.g. "off,movie_cleaner=debug"',
    )
    parser.add_argument("-c", "--config", required=True, help="Path to the config file")
    return parser


def run(config: Config, force_delete: bool) -> None:
    jellyfin = JellyfinService(config.jellyfin)
    user_id = jellyfin.get_user_id(config.username)
    download_service = DownloadService.from_config(config.download_clients)

    if config.radarr:
        MovieCleaner(config.radarr, jellyfin, download_service, user_id).clean_movies(force_delete)

    if config.sonarr:
        if config.sonarr.cleanup_mode == "episodes":
            EpisodeCleaner(config.sonarr, jellyfin, user_id).clean_episodes(force_delete)
        else:
            SeriesCleaner(config.sonarr, jellyfin, download_service, user_id).clean_series(
                force_delete
            )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # Configure logging
    setup_logging(args.log_level)

    try:
        config = ConfigManager(args.config).config
        run(config, args.force_delete)
    except (SanitarrError, requests.RequestException) as e:
        logger.error(f"cleanup failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
