"""
Deletion of library entries.

Episode files are removed in two steps which are not transactional: the
episode is unmonitored first and its file is deleted second. Sonarr treats a
missing file of a monitored episode as still wanted and grabs it again, so
the file is never deleted unless the unmonitor call went through. A failed
candidate does not stop the remaining ones; failures are reported at the end.

Whole movies and series are removed with a single delete-with-files call each.
"""

import logging
from typing import Callable, Iterable, List, Optional

from concurrency import run_concurrently
from models.deletion import DeletionReport, EpisodeFileDeletion
from services.sonarr import SonarrService

logger = logging.getLogger(__name__)


def delete_single_episode(sonarr: SonarrService, file: EpisodeFileDeletion) -> Optional[Exception]:
    """Unmonitor then delete one episode file. Returns the error instead of raising it."""
    try:
        sonarr.unmonitor_episode(file.episode_id)
    except Exception as e:
        logger.error(
            f"failed to unmonitor {file} (episode_id: {file.episode_id}), "
            f"its file will not be deleted: {e}"
        )
        return e

    try:
        sonarr.delete_episode_file(file.episode_file_id)
    except Exception as e:
        logger.error(
            f"failed to delete {file} after unmonitoring "
            f"(episode_id: {file.episode_id}, file_id: {file.episode_file_id}): {e}"
        )
        return e

    logger.info(f"deleted and unmonitored: {file}")
    return None


def delete_episode_files(
    sonarr: SonarrService,
    files: List[EpisodeFileDeletion],
    force_delete: bool,
) -> DeletionReport:
    if not force_delete:
        logger.info(
            "no items will be deleted as no `--force-delete` flag is provided. Listing them instead:"
        )
        for file in files:
            logger.info(f"  - {file}")
        return DeletionReport(dry_run=True)

    logger.debug(f"deleting {len(files)} episode files")
    errors = run_concurrently(
        lambda file: delete_single_episode(sonarr, file),
        files,
        desc="Deleting Episodes",
        unit="episodes",
    )

    report = DeletionReport()
    for file, error in zip(files, errors):
        if error is None:
            report.succeeded.append(file)
        else:
            report.failed.append(file)

    logger.info(f"deletion complete: {len(report.succeeded)} succeeded, {len(report.failed)} failed")
    return report


def delete_in_parallel(ids: Iterable[int], delete_func: Callable[[int], None], desc: str) -> None:
    """Delete independent library entries concurrently. Any failure aborts the batch."""
    ids = sorted(set(ids))
    logger.debug(f"attempting to delete items {ids}")
    run_concurrently(delete_func, ids, desc=desc)
