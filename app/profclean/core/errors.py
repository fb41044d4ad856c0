"""Error taxonomy for profclean.

Fatal errors (configuration, enumeration, unreadable free space) abort a
run and surface to the CLI with a non-zero exit code. Deletion errors are
raised at the point of failure and absorbed by the caller that owns the
current profile, which logs them and moves on.
"""


class ProfcleanError(Exception):
    """Base exception for all profclean errors."""


class ConfigurationError(ProfcleanError):
    """Raised when a run configuration is invalid.

    Raised before any profile enumeration takes place.
    """


class EnumerationError(ProfcleanError):
    """Raised when the OS profile directory cannot be listed at all."""


class FreeSpaceError(ProfcleanError):
    """Raised when a space-limited run cannot read free space on its volume.

    Without a reading the run cannot tell whether the limit is met, so it
    stops before deleting anything.
    """


class ProbeError(ProfcleanError):
    """A single path that could not be read during probing.

    The walker hands the underlying OSError to its ``on_error`` callback and
    keeps going, so this is never raised out of a probe. The decision log
    builds one to format the recoverable failure.

    Attributes:
        path: The path that could not be accessed.
        reason: Human-readable failure reason.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot access {path}: {reason}")
        self.path = path
        self.reason = reason


class DeletionError(ProfcleanError):
    """Raised when a single delete-profile request fails.

    Attributes:
        username: Name of the profile that could not be deleted.
        reason: Human-readable failure reason.
    """

    def __init__(self, username: str, reason: str) -> None:
        super().__init__(f"Failed to delete profile {username}: {reason}")
        self.username = username
        self.reason = reason


class SettingsError(ProfcleanError):
    """Base exception for settings file errors."""


class SettingsParseError(SettingsError):
    """Raised when the settings file is not valid TOML."""


class SettingsValidationError(SettingsError):
    """Raised when the settings file content does not match the schema."""
