import logging
from dataclasses import dataclass, field
from typing import List, Tuple

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LEVEL = logging.INFO

_LEVELS = {
    "off": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}


@dataclass
class LogSettings:
    """
    Root log level plus per-logger levels, e.g. `info`,
    `off,movie_cleaner=debug,urllib3=info` or `warning,services=debug`.
    Unknown levels fall back to info.
    """

    root_level: int = DEFAULT_LEVEL
    other_levels: List[Tuple[str, int]] = field(default_factory=list)


def _level(name: str) -> int:
    return _LEVELS.get(name.strip().lower(), DEFAULT_LEVEL)


def parse_log_settings(value: str) -> LogSettings:
    parts = value.split(",")
    settings = LogSettings(root_level=_level(parts[0] or "info"))

    for part in parts[1:]:
        logger_name, sep, level = part.partition("=")
        if not sep or not logger_name.strip():
            continue
        settings.other_levels.append((logger_name.strip(), _level(level)))
    return settings


def setup_logging(settings: LogSettings) -> None:
    logging.basicConfig(level=settings.root_level, format=LOG_FORMAT)
    for logger_name, level in settings.other_levels:
        logging.getLogger(logger_name).setLevel(level)
