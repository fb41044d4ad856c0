"""Settings file I/O.

The settings file holds machine-wide defaults (whitelist, cutoffs, log
location) in TOML. Command-line options override every value in it.

Location: <config dir>/settings.toml
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from profclean.core.errors import SettingsError, SettingsParseError, SettingsValidationError
from profclean.core.paths import get_settings_path


class Settings(BaseModel):
    """Machine-wide defaults for cleanup runs.

    Attributes:
        whitelist: Additional usernames that must never be deleted.
        month_cutoff: Default months of inactivity (0 = disabled).
        space_limit_gb: Default free-space target in GB (0 = disabled).
        profile_limit: Default maximum profiles per run (0 = unlimited).
        volume: Volume to measure free space on (None = system drive).
        log_dir: Directory for decision logs (None = default log dir).
    """

    model_config = ConfigDict(extra="forbid")

    whitelist: list[str] = Field(
        default_factory=lambda: [],
        description="Usernames that must never be deleted",
    )
    month_cutoff: Annotated[int, Field(ge=0)] = 0
    space_limit_gb: Annotated[float, Field(ge=0)] = 0
    profile_limit: Annotated[int, Field(ge=0)] = 0
    volume: str | None = None
    log_dir: str | None = None


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a TOML file.

    A missing file is not an error; defaults are returned instead.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated Settings object.

    Raises:
        SettingsParseError: If the TOML syntax is invalid.
        SettingsValidationError: If the content doesn't match the schema.
        SettingsError: If the file cannot be read.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        return Settings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax in {settings_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise SettingsValidationError(f"Invalid settings in {settings_path}: {e}") from e


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Save settings to a TOML file atomically.

    Writes to a temporary file in the same directory and renames it over
    the target with os.replace().

    Args:
        settings: Settings to save.
        path: Destination. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    data = _settings_to_dict(settings)

    tmp_path: Path | None = None
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path


def _settings_to_dict(settings: Settings) -> dict[str, Any]:
    """Convert settings to a TOML-serializable dict (TOML has no null)."""
    return {key: value for key, value in settings.model_dump().items() if value is not None}
