import logging

from models.library import Tag
from tag_policy import TagPolicy


def test_forbidden_tag_protects_item():
    policy = TagPolicy([4, 5, 6])
    assert policy.is_protected([5])


def test_other_tags_do_not_protect():
    policy = TagPolicy([])
    assert not policy.is_protected([1, 2, 3])
    assert not TagPolicy([4]).is_protected([])


def test_resolve_maps_names_to_ids():
    tags = [Tag(1, "keep"), Tag(2, "4k"), Tag(3, "kids")]

    policy = TagPolicy.resolve(["keep", "kids"], tags, "Radarr")

    assert policy.forbidden_ids == {1, 3}


def test_resolve_ignores_case():
    policy = TagPolicy.resolve(["Keep"], [Tag(7, "keep")], "Sonarr")
    assert policy.forbidden_ids == {7}


def test_unresolved_tag_is_reported(caplog):
    with caplog.at_level(logging.WARNING):
        policy = TagPolicy.resolve(["keep", "missing"], [Tag(1, "keep")], "Radarr")

    assert policy.forbidden_ids == {1}
    assert 'tag "missing" does not exist in Radarr' in caplog.text
