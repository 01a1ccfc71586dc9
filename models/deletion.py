from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class EpisodeFileDeletion:
    """A watched episode whose file is about to be removed from Sonarr."""

    series_title: str
    season: int
    episode: int
    episode_id: int
    episode_file_id: int

    def __str__(self) -> str:
        return f"{self.series_title} S{self.season:02}E{self.episode:02}"


@dataclass
class DeletionReport:
    succeeded: List[EpisodeFileDeletion] = field(default_factory=list)
    failed: List[EpisodeFileDeletion] = field(default_factory=list)
    dry_run: bool = False

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed
