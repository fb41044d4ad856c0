"""Windows profile directory backed by CIM ``Win32_UserProfile``.

Profiles are listed and deleted through PowerShell's CIM cmdlets so the
OS removes the profile folder together with its ProfileList registry
entry. Files are never removed directly.
"""

import json
import logging
import re
import subprocess
from typing import Any

from profclean.core.errors import DeletionError, EnumerationError
from profclean.models.profile import ProfileRecord
from profclean.models.report import DeletionStatus
from profclean.profiles.base import ProfileDirectory
from profclean.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

_POWERSHELL = "powershell"
_POWERSHELL_ARGS = ["-NoProfile", "-NonInteractive", "-Command"]

_LIST_SCRIPT = (
    "Get-CimInstance -ClassName Win32_UserProfile"
    " | Select-Object SID, LocalPath, Special, Loaded"
    " | ConvertTo-Json -Compress"
)

# Emits 'deleted' once per removed instance, nothing if the SID is unknown
_DELETE_SCRIPT = (
    "Get-CimInstance -ClassName Win32_UserProfile -Filter \"SID='{sid}'\""
    " | ForEach-Object {{ Remove-CimInstance -InputObject $_ -ErrorAction Stop; 'deleted' }}"
)

_SID_PATTERN = re.compile(r"^S-\d+(-\d+)+$")


class WindowsProfileDirectory(ProfileDirectory):
    """Profile directory for local Windows profiles.

    Args:
        list_timeout: Seconds to wait for the profile listing.
        delete_timeout: Seconds to wait for a single profile deletion.
            Large profiles can take several minutes to remove.
    """

    def __init__(self, *, list_timeout: float = 120.0, delete_timeout: float = 1800.0) -> None:
        self._list_timeout = list_timeout
        self._delete_timeout = delete_timeout

    def is_available(self) -> bool:
        """Check if PowerShell is available."""
        return command_exists(_POWERSHELL)

    def list_profiles(self) -> list[ProfileRecord]:
        """List all Win32_UserProfile instances.

        Raises:
            EnumerationError: If PowerShell is missing, fails, or returns
                output that is not JSON.
        """
        try:
            result = run_command(
                [_POWERSHELL, *_POWERSHELL_ARGS, _LIST_SCRIPT],
                timeout=self._list_timeout,
            )
        except (FileNotFoundError, OSError, subprocess.TimeoutExpired) as e:
            msg = f"Cannot run {_POWERSHELL}: {e}"
            raise EnumerationError(msg) from e

        if not result.success:
            msg = f"Profile listing failed: {result.stderr.strip() or 'unknown error'}"
            raise EnumerationError(msg)

        return self._parse_profiles(result.stdout)

    def delete_profile(self, profile: ProfileRecord) -> DeletionStatus:
        """Remove the Win32_UserProfile instance matching the profile's SID.

        Raises:
            DeletionError: If the record has no valid SID or removal fails.
        """
        sid = profile.handle
        if not sid or not _SID_PATTERN.match(sid):
            raise DeletionError(profile.username, f"invalid profile SID: {sid!r}")

        try:
            result = run_command(
                [_POWERSHELL, *_POWERSHELL_ARGS, _DELETE_SCRIPT.format(sid=sid)],
                timeout=self._delete_timeout,
            )
        except (FileNotFoundError, OSError, subprocess.TimeoutExpired) as e:
            raise DeletionError(profile.username, str(e)) from e

        if not result.success:
            raise DeletionError(profile.username, result.stderr.strip() or "Remove-CimInstance failed")

        if "deleted" not in result.stdout:
            logger.info("Profile %s (%s) no longer exists", profile.username, sid)
            return DeletionStatus.VANISHED

        return DeletionStatus.DELETED

    @staticmethod
    def _parse_profiles(output: str) -> list[ProfileRecord]:
        """Parse ConvertTo-Json output into profile records.

        ConvertTo-Json emits a bare object instead of a list when there is
        exactly one instance, and nothing at all when there are none.

        Raises:
            EnumerationError: If the output is not valid JSON.
        """
        text = output.strip()
        if not text:
            return []

        try:
            data: Any = json.loads(text)
        except json.JSONDecodeError as e:
            msg = f"Unexpected profile listing output: {e}"
            raise EnumerationError(msg) from e

        items = data if isinstance(data, list) else [data]
        profiles: list[ProfileRecord] = []
        for item in items:
            if not isinstance(item, dict):
                logger.debug("Skipping non-object profile entry: %r", item)
                continue
            local_path = item.get("LocalPath")
            if not local_path:
                logger.debug("Skipping profile without LocalPath: %r", item.get("SID"))
                continue
            profiles.append(
                ProfileRecord(
                    path=str(local_path),
                    is_special=bool(item.get("Special", False)),
                    is_loaded=bool(item.get("Loaded", False)),
                    handle=item.get("SID"),
                )
            )
        return profiles
