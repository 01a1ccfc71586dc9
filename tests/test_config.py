from datetime import timedelta
from pathlib import Path

import pytest

from exceptions import ConfigError
from services.config import ConfigManager, parse_duration

EXAMPLE_CONFIG = Path(__file__).resolve().parents[1] / "config.example.yaml"

ENV_VARS = [
    "SANITARR_USERNAME",
    "JELLYFIN_BASE_URL",
    "JELLYFIN_API_KEY",
    "RADARR_BASE_URL",
    "RADARR_API_KEY",
    "SONARR_BASE_URL",
    "SONARR_API_KEY",
    "QBITTORRENT_BASE_URL",
    "QBITTORRENT_USERNAME",
    "QBITTORRENT_PASSWORD",
    "DELUGE_BASE_URL",
    "DELUGE_PASSWORD",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    # keep a developer's .env out of the tests
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("services.config.load_dotenv", lambda: None)


def write_config(tmp_path, text: str) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return str(path)


MINIMAL = """
username: foo
jellyfin:
  base_url: http://localhost:8096
  api_key: api-key-foo
"""


class TestParseDuration:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2d", timedelta(days=2)),
            ("7days", timedelta(days=7)),
            ("36h", timedelta(hours=36)),
            ("1w 2d", timedelta(days=9)),
            ("1 day 12 hours", timedelta(days=1, hours=12)),
            ("90m", timedelta(minutes=90)),
            ("30s", timedelta(seconds=30)),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "2", "two days", "2 fortnights", "2d, 3h"])
    def test_invalid(self, value):
        with pytest.raises(ConfigError):
            parse_duration(value)


class TestConfigManager:
    def test_example_config(self):
        cfg = ConfigManager(str(EXAMPLE_CONFIG)).config

        assert cfg.username == "foo"
        assert cfg.jellyfin.api_key == "api-key-foo"
        assert cfg.jellyfin.base_url == "http://localhost:8096"

        assert cfg.radarr.base_url == "http://localhost:7878"
        assert cfg.radarr.tags_to_keep == ["keep"]
        assert cfg.radarr.retention_period == timedelta(days=2)
        assert cfg.radarr.unmonitor_watched is False

        assert cfg.sonarr.base_url == "http://localhost:8989"
        assert cfg.sonarr.retention_period == timedelta(days=7)
        assert cfg.sonarr.cleanup_mode == "series"

        assert cfg.download_clients.qbittorrent.username == "admin"
        assert cfg.download_clients.qbittorrent.password == "adminadmin"
        assert cfg.download_clients.deluge.base_url == "http://localhost:8112"
        assert cfg.download_clients.deluge.password == "qwerty"

    def test_minimal_config(self, tmp_path):
        cfg = ConfigManager(write_config(tmp_path, MINIMAL)).config

        assert cfg.radarr is None
        assert cfg.sonarr is None
        assert cfg.download_clients.qbittorrent is None
        assert cfg.download_clients.deluge is None

    def test_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("JELLYFIN_API_KEY", "from-env")
        monkeypatch.setenv("DELUGE_BASE_URL", "http://deluge:8112")
        monkeypatch.setenv("DELUGE_PASSWORD", "secret")

        cfg = ConfigManager(write_config(tmp_path, MINIMAL)).config

        assert cfg.jellyfin.api_key == "from-env"
        assert cfg.download_clients.deluge.password == "secret"

    def test_no_retention_period(self, tmp_path):
        text = MINIMAL + "radarr:\n  base_url: http://radarr\n  api_key: key\n"
        cfg = ConfigManager(write_config(tmp_path, text)).config

        assert cfg.radarr.retention_period is None
        assert cfg.radarr.tags_to_keep == []

    def test_unknown_key(self, tmp_path):
        text = MINIMAL + "radarr:\n  base_url: http://radarr\n  api_key: key\n  tags_to_kep: [keep]\n"
        with pytest.raises(ConfigError, match="tags_to_kep"):
            ConfigManager(write_config(tmp_path, text))

    def test_missing_key(self, tmp_path):
        with pytest.raises(ConfigError, match="api_key"):
            ConfigManager(write_config(tmp_path, "username: foo\njellyfin:\n  base_url: x\n"))

    def test_invalid_cleanup_mode(self, tmp_path):
        text = MINIMAL + "sonarr:\n  base_url: http://sonarr\n  api_key: key\n  cleanup_mode: seasons\n"
        with pytest.raises(ConfigError, match="cleanup_mode"):
            ConfigManager(write_config(tmp_path, text))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="failed to read config file"):
            ConfigManager(str(tmp_path / "nope.yaml"))
