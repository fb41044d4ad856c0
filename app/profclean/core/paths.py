"""Path management for profclean.

Configuration and logs live in a machine-wide location because the tool
acts on every profile of the machine, not on the invoking user.

Defaults:
- Windows: %PROGRAMDATA%\\profclean\\ (config) and ...\\logs\\ (logs)
- Elsewhere: XDG config and state directories of the invoking user

Both can be overridden with PROFCLEAN_CONFIG_DIR and PROFCLEAN_LOG_DIR.
"""

import os
import sys
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "profclean"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def _get_program_data_dir() -> Path | None:
    """Get %PROGRAMDATA%/profclean on Windows, None elsewhere."""
    if sys.platform != "win32":
        return None
    base = os.environ.get("PROGRAMDATA")
    if not base:
        return None
    return Path(base) / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        PROFCLEAN_CONFIG_DIR if set, otherwise %PROGRAMDATA%/profclean on
        Windows or ~/.config/profclean (XDG_CONFIG_HOME) elsewhere.
    """
    override = os.environ.get("PROFCLEAN_CONFIG_DIR")
    if override:
        return Path(override)
    return _get_program_data_dir() or _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_log_dir() -> Path:
    """Get the directory holding per-run decision logs.

    Returns:
        PROFCLEAN_LOG_DIR if set, otherwise a ``logs`` directory under
        %PROGRAMDATA%/profclean on Windows or ~/.local/state/profclean elsewhere.
    """
    override = os.environ.get("PROFCLEAN_LOG_DIR")
    if override:
        return Path(override)
    program_data = _get_program_data_dir()
    if program_data is not None:
        return program_data / "logs"
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state") / "logs"


def get_settings_path() -> Path:
    """Get the settings file path.

    Returns:
        Path to <config dir>/settings.toml.
    """
    return get_config_dir() / "settings.toml"


def get_user_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to <config dir>/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def default_volume() -> str:
    """Get the volume holding user profiles.

    Returns:
        The system drive root on Windows (e.g. ``C:\\``), ``/`` elsewhere.
    """
    if sys.platform == "win32":
        return os.environ.get("SystemDrive", "C:") + "\\"
    return "/"


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_log_dir(path: Path | None = None) -> Path:
    """Create the log directory if it doesn't exist.

    Args:
        path: Explicit log directory. Defaults to :func:`get_log_dir`.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(path or get_log_dir(), "log")
