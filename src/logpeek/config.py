"""Persistent user settings for logpeek, stored as TOML in the XDG config dir."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w
from platformdirs import user_config_dir
from pydantic import ValidationError

from logpeek.models import AppConfig

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "LOGPEEK_CONFIG_DIR"
CONFIG_FILENAME = "config.toml"


def get_config_dir() -> Path:
    """Get the logpeek config directory.

    Respects LOGPEEK_CONFIG_DIR environment variable if set.
    """
    if override := os.environ.get(CONFIG_DIR_ENV):
        return Path(override)
    return Path(user_config_dir("logpeek"))


def config_path() -> Path:
    return get_config_dir() / CONFIG_FILENAME


def load_config() -> AppConfig:
    """Load settings, falling back to defaults when the file is missing or unreadable.

    Unknown keys are ignored; a value of the wrong type discards the whole file.
    """
    path = config_path()
    if not path.is_file():
        return AppConfig()
    try:
        data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("ignoring unreadable config %s: %s", path, exc)
        return AppConfig()
    try:
        return AppConfig.model_validate(data)
    except ValidationError as exc:
        logger.warning("ignoring invalid config %s: %s", path, exc)
        return AppConfig()


def save_config(config: AppConfig) -> Path:
    """Write settings to disk and return the file written."""
    path = config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomli_w.dumps(config.model_dump(mode="json")), encoding="utf-8")
    logger.debug("saved config to %s", path)
    return path


def update_config(config: AppConfig, **changes: Any) -> AppConfig:  # noqa: ANN401
    """Return a copy of ``config`` with ``changes`` applied, validated, and saved."""
    updated = AppConfig.model_validate({**config.model_dump(), **changes})
    save_config(updated)
    return updated
