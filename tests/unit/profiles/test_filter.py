"""Unit tests for the candidate filter."""

from collections.abc import Callable

from profclean.models.config import WhitelistSet
from profclean.models.profile import ProfileRecord
from profclean.profiles.filter import ExclusionReason, eligible, exclusion_reason
from profclean.profiles.protected import build_whitelist

MakeProfile = Callable[..., ProfileRecord]


class TestExclusionReason:
    """Tests for exclusion_reason."""

    def test_special_profile(self, make_profile: MakeProfile) -> None:
        """Special profiles are excluded."""
        profile = make_profile("systemprofile", special=True)
        assert exclusion_reason(profile, WhitelistSet()) == ExclusionReason.SPECIAL

    def test_loaded_profile(self, make_profile: MakeProfile) -> None:
        """Loaded profiles are excluded."""
        profile = make_profile("jdoe", loaded=True)
        assert exclusion_reason(profile, WhitelistSet()) == ExclusionReason.LOADED

    def test_whitelisted_profile_any_case(self, make_profile: MakeProfile) -> None:
        """Whitelisted usernames are excluded regardless of case."""
        profile = make_profile("ADMINISTRATOR")
        assert exclusion_reason(profile, build_whitelist()) == ExclusionReason.WHITELISTED

    def test_eligible_profile(self, make_profile: MakeProfile) -> None:
        """An ordinary profile has no exclusion reason."""
        assert exclusion_reason(make_profile("jdoe"), build_whitelist()) is None


class TestEligible:
    """Tests for eligible."""

    def test_filters_and_preserves_order(self, make_profile: MakeProfile) -> None:
        """Only eligible profiles survive, in input order."""
        profiles = [
            make_profile("zed"),
            make_profile("systemprofile", special=True),
            make_profile("alice"),
            make_profile("bob", loaded=True),
            make_profile("svc_backup"),
            make_profile("carol"),
        ]
        whitelist = build_whitelist(["SVC_BACKUP"])

        result = eligible(profiles, whitelist)

        assert [p.username for p in result] == ["zed", "alice", "carol"]

    def test_reports_exclusions(self, make_profile: MakeProfile) -> None:
        """Every excluded profile is reported with its reason."""
        profiles = [
            make_profile("svc", special=True),
            make_profile("bob", loaded=True),
            make_profile("Public"),
            make_profile("alice"),
        ]
        excluded: list[tuple[str, ExclusionReason]] = []

        eligible(
            profiles,
            build_whitelist(),
            on_excluded=lambda p, r: excluded.append((p.username, r)),
        )

        assert excluded == [
            ("svc", ExclusionReason.SPECIAL),
            ("bob", ExclusionReason.LOADED),
            ("Public", ExclusionReason.WHITELISTED),
        ]

    def test_empty_input(self) -> None:
        """No profiles yields no candidates."""
        assert eligible([], build_whitelist()) == []

    def test_result_is_subset(self, make_profile: MakeProfile) -> None:
        """No eligible profile is special, loaded or whitelisted."""
        profiles = [
            make_profile(name, special=i % 3 == 0, loaded=i % 4 == 0)
            for i, name in enumerate(["a", "b", "Guest", "c", "d", "Default", "e", "f"])
        ]
        whitelist = build_whitelist(["e"])

        for profile in eligible(profiles, whitelist):
            assert profile in profiles
            assert not profile.is_special
            assert not profile.is_loaded
            assert profile.username not in whitelist
