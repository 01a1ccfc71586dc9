import logging
from typing import FrozenSet, Iterable, List

from models.library import Tag

logger = logging.getLogger(__name__)


class TagPolicy:
    """Items carrying any of the forbidden tag ids are never deleted."""

    def __init__(self, forbidden_ids: Iterable[int] = ()):
        self.forbidden_ids: FrozenSet[int] = frozenset(forbidden_ids)

    @classmethod
    def resolve(cls, tags_to_keep: List[str], tags: List[Tag], service: str) -> "TagPolicy":
        """
        Map configured tag names to the ids used by the library manager.

        Labels are compared case-insensitively as Radarr and Sonarr store them
        lower-cased. A name that does not resolve protects nothing and is
        logged as a warning.
        """
        logger.debug(f"forbidden {service} tags configured: {tags_to_keep}")

        ids_by_label = {}
        for tag in tags:
            ids_by_label.setdefault(tag.label.lower(), []).append(tag.id)

        forbidden_ids = set()
        for name in tags_to_keep:
            ids = ids_by_label.get(name.lower())
            if not ids:
                logger.warning(
                    f'tag "{name}" does not exist in {service}, items will not be protected by it'
                )
                continue
            forbidden_ids.update(ids)

        logger.debug(f"forbidden {service} tag ids: {sorted(forbidden_ids)}")
        return cls(forbidden_ids)

    def is_protected(self, tag_ids: Iterable[int]) -> bool:
        return any(tag_id in self.forbidden_ids for tag_id in tag_ids or ())
