from unittest.mock import MagicMock

import pytest

from models.config import RadarrConfig, SonarrConfig


@pytest.fixture
def radarr_config():
    return RadarrConfig(base_url="http://radarr:7878", api_key="key", tags_to_keep=["keep"])


@pytest.fixture
def sonarr_config():
    return SonarrConfig(base_url="http://sonarr:8989", api_key="key", tags_to_keep=["keep"])


@pytest.fixture
def jellyfin():
    return MagicMock()


@pytest.fixture
def download_service():
    return MagicMock()


@pytest.fixture(autouse=True)
def no_progress_bars(monkeypatch):
    """Keep tqdm output out of the test logs."""
    monkeypatch.setenv("TQDM_DISABLE", "1")
