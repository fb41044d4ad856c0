"""Unit tests for WindowsProfileDirectory.

PowerShell is never invoked: run_command and command_exists are patched.
"""

import json
import subprocess
from unittest.mock import patch

import pytest
from profclean.core.errors import DeletionError, EnumerationError
from profclean.models.profile import ProfileRecord
from profclean.models.report import DeletionStatus
from profclean.profiles.windows import WindowsProfileDirectory
from profclean.utils.shell import CommandResult

SID = "S-1-5-21-1111111111-2222222222-3333333333-1001"


def _ok(stdout: str = "") -> CommandResult:
    return CommandResult(stdout=stdout, stderr="", returncode=0)


class TestIsAvailable:
    """Tests for WindowsProfileDirectory.is_available."""

    def test_available_when_powershell_exists(self) -> None:
        """Directory is available when powershell is on PATH."""
        with patch("profclean.profiles.windows.command_exists", return_value=True):
            assert WindowsProfileDirectory().is_available() is True

    def test_unavailable_without_powershell(self) -> None:
        """Directory is unavailable when powershell is missing."""
        with patch("profclean.profiles.windows.command_exists", return_value=False):
            assert WindowsProfileDirectory().is_available() is False


class TestListProfiles:
    """Tests for WindowsProfileDirectory.list_profiles."""

    def test_parses_profile_list(self) -> None:
        """A JSON array is parsed into records."""
        output = json.dumps(
            [
                {
                    "SID": "S-1-5-18",
                    "LocalPath": "C:\\WINDOWS\\system32\\config\\systemprofile",
                    "Special": True,
                    "Loaded": True,
                },
                {"SID": SID, "LocalPath": "C:\\Users\\jdoe", "Special": False, "Loaded": False},
            ]
        )
        with patch("profclean.profiles.windows.run_command", return_value=_ok(output)) as run:
            profiles = WindowsProfileDirectory().list_profiles()

        assert len(profiles) == 2
        assert profiles[0].is_special is True
        assert profiles[0].is_loaded is True
        assert profiles[1] == ProfileRecord(
            path="C:\\Users\\jdoe", is_special=False, is_loaded=False, handle=SID
        )
        args = run.call_args[0][0]
        assert args[0] == "powershell"
        assert "Win32_UserProfile" in args[-1]

    def test_single_profile_object(self) -> None:
        """A bare object (one instance) is accepted."""
        output = json.dumps(
            {"SID": SID, "LocalPath": "C:\\Users\\jdoe", "Special": False, "Loaded": False}
        )
        with patch("profclean.profiles.windows.run_command", return_value=_ok(output)):
            profiles = WindowsProfileDirectory().list_profiles()

        assert [p.username for p in profiles] == ["jdoe"]

    def test_empty_output(self) -> None:
        """No output means no profiles."""
        with patch("profclean.profiles.windows.run_command", return_value=_ok("")):
            assert WindowsProfileDirectory().list_profiles() == []

    def test_entries_without_path_skipped(self) -> None:
        """Entries without a LocalPath are ignored."""
        output = json.dumps([{"SID": SID, "LocalPath": None}, "garbage"])
        with patch("profclean.profiles.windows.run_command", return_value=_ok(output)):
            assert WindowsProfileDirectory().list_profiles() == []

    def test_invalid_json_raises(self) -> None:
        """Non-JSON output is an enumeration error."""
        with (
            patch("profclean.profiles.windows.run_command", return_value=_ok("not json")),
            pytest.raises(EnumerationError, match="Unexpected"),
        ):
            WindowsProfileDirectory().list_profiles()

    def test_command_failure_raises(self) -> None:
        """A failing PowerShell call is an enumeration error."""
        failed = CommandResult(stdout="", stderr="Access denied", returncode=1)
        with (
            patch("profclean.profiles.windows.run_command", return_value=failed),
            pytest.raises(EnumerationError, match="Access denied"),
        ):
            WindowsProfileDirectory().list_profiles()

    def test_missing_powershell_raises(self) -> None:
        """A missing executable is an enumeration error."""
        with (
            patch("profclean.profiles.windows.run_command", side_effect=FileNotFoundError()),
            pytest.raises(EnumerationError),
        ):
            WindowsProfileDirectory().list_profiles()


class TestDeleteProfile:
    """Tests for WindowsProfileDirectory.delete_profile."""

    def _profile(self, handle: str | None = SID) -> ProfileRecord:
        return ProfileRecord(path="C:\\Users\\jdoe", handle=handle)

    def test_deletes_by_sid(self) -> None:
        """The CIM instance is removed by SID."""
        with patch(
            "profclean.profiles.windows.run_command", return_value=_ok("deleted\r\n")
        ) as run:
            status = WindowsProfileDirectory().delete_profile(self._profile())

        assert status == DeletionStatus.DELETED
        script = run.call_args[0][0][-1]
        assert f"SID='{SID}'" in script
        assert "Remove-CimInstance" in script

    def test_unknown_sid_is_vanished(self) -> None:
        """No matching instance means the profile already disappeared."""
        with patch("profclean.profiles.windows.run_command", return_value=_ok("")):
            status = WindowsProfileDirectory().delete_profile(self._profile())

        assert status == DeletionStatus.VANISHED

    def test_failure_raises(self) -> None:
        """A failing removal raises DeletionError with the reason."""
        failed = CommandResult(stdout="", stderr="The process cannot access the file", returncode=1)
        with patch("profclean.profiles.windows.run_command", return_value=failed):
            with pytest.raises(DeletionError) as exc_info:
                WindowsProfileDirectory().delete_profile(self._profile())

        assert exc_info.value.username == "jdoe"
        assert "cannot access" in exc_info.value.reason

    def test_timeout_raises(self) -> None:
        """A timed-out removal raises DeletionError."""
        with (
            patch(
                "profclean.profiles.windows.run_command",
                side_effect=subprocess.TimeoutExpired(cmd="powershell", timeout=1),
            ),
            pytest.raises(DeletionError),
        ):
            WindowsProfileDirectory().delete_profile(self._profile())

    @pytest.mark.parametrize("handle", [None, "", "S-1-5-21'; Remove-Item C:\\ -Recurse; '"])
    def test_invalid_sid_rejected(self, handle: str | None) -> None:
        """Records without a well-formed SID are never passed to PowerShell."""
        with patch("profclean.profiles.windows.run_command") as run:
            with pytest.raises(DeletionError, match="invalid profile SID"):
                WindowsProfileDirectory().delete_profile(self._profile(handle))

        run.assert_not_called()
