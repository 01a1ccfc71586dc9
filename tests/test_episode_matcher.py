import logging

from episode_matcher import match_episodes
from factories import series, watched
from models.deletion import EpisodeFileDeletion
from models.library import Episode

SERIES = series(id=1, title="Breaking Bad")

SONARR_EPISODES = [
    Episode(id=123, season_number=1, episode_number=5, episode_file_id=456, monitored=True),
    Episode(id=124, season_number=1, episode_number=6, episode_file_id=None, monitored=True),
    Episode(id=200, season_number=2, episode_number=1, episode_file_id=900, monitored=False),
]


def test_matches_by_season_and_episode_number():
    item = watched("Gray Matter", "jf-555", season_number=1, episode_number=5)

    result = match_episodes(SERIES, [item], SONARR_EPISODES)

    assert result == [
        EpisodeFileDeletion(
            series_title="Breaking Bad", season=1, episode=5, episode_id=123, episode_file_id=456
        )
    ]
    assert str(result[0]) == "Breaking Bad S01E05"


def test_jellyfin_id_is_not_used_for_matching():
    # a Jellyfin id equal to a Sonarr id must not produce a match
    item = watched("Other", "200", season_number=1, episode_number=5)

    result = match_episodes(SERIES, [item], SONARR_EPISODES)

    assert [f.episode_id for f in result] == [123]


def test_missing_season_number_is_skipped(caplog):
    item = watched("No Season", season_number=None, episode_number=5)

    with caplog.at_level(logging.WARNING):
        assert match_episodes(SERIES, [item], SONARR_EPISODES) == []
    assert "missing season number" in caplog.text


def test_missing_episode_number_is_skipped(caplog):
    item = watched("No Episode", season_number=1, episode_number=None)

    with caplog.at_level(logging.WARNING):
        assert match_episodes(SERIES, [item], SONARR_EPISODES) == []
    assert "missing episode number" in caplog.text


def test_missing_both_numbers_is_skipped(caplog):
    item = watched("Nothing")

    with caplog.at_level(logging.WARNING):
        assert match_episodes(SERIES, [item], SONARR_EPISODES) == []
    assert "missing both season and episode numbers" in caplog.text


def test_episode_not_in_sonarr_is_skipped():
    item = watched("Unknown", season_number=3, episode_number=1)
    assert match_episodes(SERIES, [item], SONARR_EPISODES) == []


def test_episode_without_file_is_skipped():
    item = watched("No File", season_number=1, episode_number=6)
    assert match_episodes(SERIES, [item], SONARR_EPISODES) == []


def test_duplicate_watched_items_match_once():
    items = [
        watched("Gray Matter", "jf-1", season_number=1, episode_number=5),
        watched("Gray Matter", "jf-2", season_number=1, episode_number=5),
    ]
    assert len(match_episodes(SERIES, items, SONARR_EPISODES)) == 1
