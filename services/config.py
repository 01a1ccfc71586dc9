import os
import re
from datetime import timedelta
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from exceptions import ConfigError
from models.config import (
    Config,
    DelugeConfig,
    DownloadClientsConfig,
    JellyfinConfig,
    QbittorrentConfig,
    RadarrConfig,
    SonarrConfig,
)

CLEANUP_MODES = ("series", "episodes")

_DURATION_UNITS = {
    "s": 1,
    "sec": 1,
    "secs": 1,
    "second": 1,
    "seconds": 1,
    "m": 60,
    "min": 60,
    "mins": 60,
    "minute": 60,
    "minutes": 60,
    "h": 3600,
    "hr": 3600,
    "hrs": 3600,
    "hour": 3600,
    "hours": 3600,
    "d": 86400,
    "day": 86400,
    "days": 86400,
    "w": 604800,
    "week": 604800,
    "weeks": 604800,
}
_DURATION_PART_RE = re.compile(r"(\d+)\s*([a-z]+)")


def parse_duration(value: str) -> timedelta:
    """Parse a human readable duration such as "2d", "7days" or "1w 2d 12h"."""
    text = str(value).strip().lower()
    if not text:
        raise ConfigError("empty duration")

    seconds = 0
    position = 0
    for match in _DURATION_PART_RE.finditer(text):
        if text[position : match.start()].strip():
            raise ConfigError(f"invalid duration {value!r}")
        amount, unit = match.groups()
        if unit not in _DURATION_UNITS:
            raise ConfigError(f"unknown time unit {unit!r} in duration {value!r}")
        seconds += int(amount) * _DURATION_UNITS[unit]
        position = match.end()

    if position == 0 or text[position:].strip():
        raise ConfigError(f"invalid duration {value!r}")

    return timedelta(seconds=seconds)


class ConfigManager:
    # section -> fields that may be overridden from the environment
    ENV_FIELDS = {
        "jellyfin": ["base_url", "api_key"],
        "radarr": ["base_url", "api_key"],
        "sonarr": ["base_url", "api_key"],
        "qbittorrent": ["base_url", "username", "password"],
        "deluge": ["base_url", "password"],
    }

    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = Path(config_path)

        # Load .env
        load_dotenv()

        # Load config.yaml
        self.config = self._load_config()

    def _read_file(self) -> dict:
        try:
            with open(self.config_path) as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"failed to read config file at {self.config_path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"failed to parse config file at {self.config_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"config file at {self.config_path} must contain a mapping")
        return data

    def _apply_env_overrides(self, data: dict) -> None:
        """
        Override config values with environment variables.

        Variables follow the SECTION_FIELD pattern (e.g. JELLYFIN_API_KEY,
        QBITTORRENT_PASSWORD). Download clients live under `download_clients`
        in the file but use their bare name in the variable. USERNAME is not
        read from the environment as most shells already define it; use
        SANITARR_USERNAME instead.
        """
        if var := os.environ.get("SANITARR_USERNAME"):
            data["username"] = var

        for section, section_fields in self.ENV_FIELDS.items():
            parent = data
            if section in ("qbittorrent", "deluge"):
                if data.get("download_clients") is None:
                    data["download_clients"] = {}
                parent = data["download_clients"]
                if not isinstance(parent, dict):
                    raise ConfigError("section 'download_clients' must be a mapping")

            for field_name in section_fields:
                if var := os.environ.get(f"{section.upper()}_{field_name.upper()}"):
                    if not isinstance(parent.get(section), dict):
                        parent[section] = {}
                    parent[section][field_name] = var

    def _load_config(self) -> Config:
        """
        Load and parse configuration from the YAML file and environment variables.

        Environment variables take precedence over config file values. Unknown
        keys are rejected so that typos do not silently disable a safety
        setting such as `tags_to_keep`.
        """
        data = self._read_file()
        self._apply_env_overrides(data)

        _check_keys(data, "", required={"username", "jellyfin"},
                    optional={"radarr", "sonarr", "download_clients"})

        clients = data.get("download_clients") or {}
        _check_keys(clients, "download_clients", required=set(),
                    optional={"qbittorrent", "deluge"})

        return Config(
            username=str(data["username"]),
            jellyfin=self._jellyfin(data["jellyfin"]),
            radarr=self._radarr(data["radarr"]) if data.get("radarr") else None,
            sonarr=self._sonarr(data["sonarr"]) if data.get("sonarr") else None,
            download_clients=DownloadClientsConfig(
                qbittorrent=(
                    self._qbittorrent(clients["qbittorrent"]) if clients.get("qbittorrent") else None
                ),
                deluge=self._deluge(clients["deluge"]) if clients.get("deluge") else None,
            ),
        )

    def _jellyfin(self, data: dict) -> JellyfinConfig:
        _check_keys(data, "jellyfin", required={"base_url", "api_key"}, optional={"verify_ssl"})
        return JellyfinConfig(
            base_url=data["base_url"],
            api_key=data["api_key"],
            verify_ssl=bool(data.get("verify_ssl", True)),
        )

    def _radarr(self, data: dict) -> RadarrConfig:
        _check_keys(
            data,
            "radarr",
            required={"base_url", "api_key"},
            optional={"retention_period", "tags_to_keep", "unmonitor_watched", "verify_ssl"},
        )
        return RadarrConfig(
            base_url=data["base_url"],
            api_key=data["api_key"],
            retention_period=_optional_duration(data.get("retention_period")),
            tags_to_keep=_string_list(data.get("tags_to_keep"), "radarr.tags_to_keep"),
            unmonitor_watched=bool(data.get("unmonitor_watched", False)),
            verify_ssl=bool(data.get("verify_ssl", True)),
        )

    def _sonarr(self, data: dict) -> SonarrConfig:
        _check_keys(
            data,
            "sonarr",
            required={"base_url", "api_key"},
            optional={
                "retention_period",
                "tags_to_keep",
                "unmonitor_watched",
                "cleanup_mode",
                "verify_ssl",
            },
        )
        cleanup_mode = str(data.get("cleanup_mode", "series")).lower()
        if cleanup_mode not in CLEANUP_MODES:
            raise ConfigError(
                f"sonarr.cleanup_mode must be one of {', '.join(CLEANUP_MODES)}, got {cleanup_mode!r}"
            )

        return SonarrConfig(
            base_url=data["base_url"],
            api_key=data["api_key"],
            retention_period=_optional_duration(data.get("retention_period")),
            tags_to_keep=_string_list(data.get("tags_to_keep"), "sonarr.tags_to_keep"),
            unmonitor_watched=bool(data.get("unmonitor_watched", False)),
            cleanup_mode=cleanup_mode,
            verify_ssl=bool(data.get("verify_ssl", True)),
        )

    def _qbittorrent(self, data: dict) -> QbittorrentConfig:
        _check_keys(
            data,
            "download_clients.qbittorrent",
            required={"base_url", "username", "password"},
            optional={"verify_ssl"},
        )
        return QbittorrentConfig(
            base_url=data["base_url"],
            username=str(data["username"]),
            password=str(data["password"]),
            verify_ssl=bool(data.get("verify_ssl", True)),
        )

    def _deluge(self, data: dict) -> DelugeConfig:
        _check_keys(
            data,
            "download_clients.deluge",
            required={"base_url", "password"},
            optional={"verify_ssl"},
        )
        return DelugeConfig(
            base_url=data["base_url"],
            password=str(data["password"]),
            verify_ssl=bool(data.get("verify_ssl", True)),
        )


def _check_keys(data, section: str, required: set, optional: set) -> None:
    where = f"section '{section}'" if section else "config root"
    if not isinstance(data, dict):
        raise ConfigError(f"{where} must be a mapping")

    unknown = set(data) - required - optional
    if unknown:
        raise ConfigError(f"unknown keys in {where}: {', '.join(sorted(unknown))}")

    missing = {key for key in required if data.get(key) in (None, "")}
    if missing:
        raise ConfigError(f"missing keys in {where}: {', '.join(sorted(missing))}")


def _optional_duration(value) -> Optional[timedelta]:
    if value in (None, ""):
        return None
    return parse_duration(value)


def _string_list(value, name: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ConfigError(f"{name} must be a list of tag names")
    return [str(v) for v in value]
