from unittest.mock import MagicMock, patch

import pytest

from models.config import RadarrConfig, SonarrConfig
from models.library import Episode, SeriesInfo
from services.radarr import RadarrService
from services.sonarr import SonarrService


def response(json_data=None, content=b"{}"):
    resp = MagicMock()
    resp.json.return_value = json_data
    resp.content = content
    return resp


@pytest.fixture
def session():
    with patch("services.arr.build_session") as build_session:
        session = build_session.return_value
        session.headers = {}
        yield session


@pytest.fixture
def radarr(session):
    return RadarrService(RadarrConfig("http://radarr:7878/", "secret"))


@pytest.fixture
def sonarr(session):
    return SonarrService(SonarrConfig("http://sonarr:8989", "secret"))


def test_api_key_header(radarr, session):
    assert session.headers == {"X-Api-Key": "secret"}


def test_movies_by_tmdb_id(radarr, session):
    session.get.return_value = response(
        [{"id": 1, "title": "Heat", "hasFile": True, "monitored": True, "tags": [3]}]
    )

    movies = radarr.movies_by_tmdb_id("949")

    assert [(m.id, m.title, m.tags) for m in movies] == [(1, "Heat", [3])]
    assert session.get.call_args.args[0] == "http://radarr:7878/api/v3/movie"
    assert session.get.call_args.kwargs["params"] == {"tmdbId": "949"}


def test_delete_movie(radarr, session):
    radarr.delete_movie(7)

    assert session.delete.call_args.args[0] == "http://radarr:7878/api/v3/movie/7"
    assert session.delete.call_args.kwargs["params"] == {"deleteFiles": "true"}


def test_history_is_paged(radarr, session):
    page_one = {
        "totalRecords": 101,
        "records": [{"movieId": 1, "downloadId": f"H{i}", "eventType": "grabbed",
                     "data": {"downloadClient": "qBittorrent"}} for i in range(100)],
    }
    page_two = {
        "totalRecords": 101,
        "records": [{"movieId": 2, "downloadId": "LAST", "eventType": "grabbed",
                     "data": {"downloadClientName": "Deluge"}}],
    }
    session.get.side_effect = [response(page_one), response(page_two)]

    records = radarr.history_records([2, 1])

    assert len(records) == 101
    assert records[-1].download_client == "Deluge"
    assert session.get.call_count == 2
    params = session.get.call_args.kwargs["params"]
    assert ("movieIds", 1) in params and ("movieIds", 2) in params
    assert ("eventType", 1) in params
    assert ("page", 2) in params


def test_history_without_ids(radarr, session):
    assert radarr.history_records([]) == []
    session.get.assert_not_called()


def test_series_parsing(sonarr, session):
    session.get.return_value = response(
        [
            {
                "id": 5,
                "title": "Breaking Bad",
                "tags": [],
                "statistics": {"sizeOnDisk": 1000},
                "seasons": [
                    {
                        "seasonNumber": 1,
                        "monitored": True,
                        "statistics": {"episodeFileCount": 7, "totalEpisodeCount": 7},
                    }
                ],
            },
            {"id": 6, "title": "No Seasons", "statistics": {"sizeOnDisk": 0}},
        ]
    )

    found, no_seasons = sonarr.series_by_tvdb_id("81189")

    assert isinstance(found, SeriesInfo)
    assert found.size_on_disk == 1000
    assert found.seasons[0].is_complete
    assert found.seasons[0].wont_air
    assert no_seasons.seasons is None


def test_episodes_without_file(sonarr, session):
    session.get.return_value = response(
        [
            {"id": 1, "seasonNumber": 1, "episodeNumber": 1, "episodeFileId": 0, "monitored": True},
            {"id": 2, "seasonNumber": 1, "episodeNumber": 2, "episodeFileId": 44, "monitored": True},
        ]
    )

    episodes = sonarr.episodes_by_series(5)

    assert episodes == [
        Episode(1, 1, 1, episode_file_id=None, monitored=True),
        Episode(2, 1, 2, episode_file_id=44, monitored=True),
    ]


def test_unmonitor_episode(sonarr, session):
    session.put.return_value = response([], content=b"[]")

    sonarr.unmonitor_episode(123)

    assert session.put.call_args.args[0] == "http://sonarr:8989/api/v3/episode/monitor"
    assert session.put.call_args.kwargs["json"] == {"episodeIds": [123], "monitored": False}


def test_delete_episode_file(sonarr, session):
    sonarr.delete_episode_file(456)

    assert session.delete.call_args.args[0] == "http://sonarr:8989/api/v3/episodefile/456"
