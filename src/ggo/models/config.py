"""Configuration models for ggo.

GgoConfig holds user-tunable ranking behavior. It is loaded from a TOML
file by the CLI and handed to the Navigator; the core never reads the
file system for configuration itself.

Example config.toml::

    [frecency]
    half_life_days = 14.0

    [behavior]
    auto_select_threshold = 1.5
    default_fuzzy = true
    default_ignore_case = false
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, ValidationError, field_validator

from ggo.constants import DAY_SECONDS, DEFAULT_AUTO_SELECT_THRESHOLD
from ggo.exceptions import ConfigError


class FrecencyConfig(BaseModel):
    """Exponential-decay settings."""

    half_life_days: float = 7.0

    @field_validator("half_life_days")
    @classmethod
    def _positive_half_life(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("half_life_days must be > 0")
        return value

    @property
    def half_life_seconds(self) -> float:
        return self.half_life_days * DAY_SECONDS


class BehaviorConfig(BaseModel):
    """Selection and matching defaults."""

    auto_select_threshold: float = DEFAULT_AUTO_SELECT_THRESHOLD
    default_fuzzy: bool = True
    default_ignore_case: bool = False

    @field_validator("auto_select_threshold")
    @classmethod
    def _threshold_at_least_one(cls, value: float) -> float:
        if value < 1.0:
            raise ValueError("auto_select_threshold must be >= 1.0")
        return value


class GgoConfig(BaseModel):
    """Top-level ggo configuration."""

    frecency: FrecencyConfig = FrecencyConfig()
    behavior: BehaviorConfig = BehaviorConfig()


def default_config_dir() -> Path:
    """Directory holding config.toml and the usage database.

    ``GGO_CONFIG_DIR`` wins, then ``$XDG_CONFIG_HOME/ggo``, then ``~/.config/ggo``.
    """
    override = os.environ.get("GGO_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / "ggo"


def default_config_path() -> Path:
    return default_config_dir() / "config.toml"


def default_db_path() -> Path:
    """Location of the usage database; ``GGO_DB_PATH`` overrides it."""
    override = os.environ.get("GGO_DB_PATH")
    if override:
        return Path(override).expanduser()
    return default_config_dir() / "data.db"


def load_config(config_path: Path | None = None) -> GgoConfig:
    """Load configuration from a TOML file.

    A missing file yields defaults. Missing keys fall back to defaults.

    Raises:
        ConfigError: If the file is not valid TOML or holds invalid values.
    """
    if config_path is None:
        config_path = default_config_path()

    if not config_path.exists():
        return GgoConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse {config_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read {config_path}: {exc}") from exc

    try:
        return GgoConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def save_config(config: GgoConfig, config_path: Path | None = None) -> None:
    """Write configuration back to TOML."""
    if config_path is None:
        config_path = default_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    for section, model in (("frecency", config.frecency), ("behavior", config.behavior)):
        lines.append(f"[{section}]")
        for key, value in model.model_dump().items():
            if isinstance(value, bool):
                lines.append(f"{key} = {'true' if value else 'false'}")
            else:
                lines.append(f"{key} = {value!r}")
        lines.append("")

    config_path.write_text("\n".join(lines))
