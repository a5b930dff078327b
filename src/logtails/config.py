"""XDG directory management and configuration for logtails."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

import tomli_w
from platformdirs import user_config_dir
from pydantic import ValidationError

from logtails.models import AppConfig
from logtails.rules import RuleSetError, load_rules

if TYPE_CHECKING:
    from logtails.rules import RuleSet

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """Get the logtails config directory.

    Respects LOGTAILS_CONFIG_DIR environment variable if set.
    """
    if override := os.environ.get("LOGTAILS_CONFIG_DIR"):
        return Path(override)
    return Path(user_config_dir("logtails"))


def load_config() -> AppConfig:
    """Load application config from disk, returning defaults if not found.

    An unreadable file or invalid settings fall back to defaults with a
    warning. Invalid ``[[rules]]`` tables raise RuleSetError instead.
    """
    path = get_config_dir() / "config.toml"
    if not path.exists():
        return AppConfig()
    try:
        data: dict[str, Any] = tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return AppConfig()
    try:
        return AppConfig(**data)
    except ValidationError as e:
        if any(error["loc"][:1] == ("rules",) for error in e.errors()):
            msg = f"Invalid highlight rules in {path}: {e}"
            raise RuleSetError(msg) from e
        logger.warning("Ignoring invalid config %s: %s", path, e)
        return AppConfig()


def save_config(config: AppConfig) -> None:
    """Save application config to disk."""
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    path = config_dir / "config.toml"
    path.write_bytes(tomli_w.dumps(config.model_dump()).encode())


def load_rule_set(config: AppConfig) -> RuleSet:
    """Build the highlight rule set for a config. Raises RuleSetError if invalid."""
    return load_rules(config.rules)
