"""Run configuration models.

This module defines the immutable whitelist and the per-invocation
configuration snapshot consumed by the cleanup engine.
"""

from collections.abc import Iterable, Iterator
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from profclean.core.errors import ConfigurationError

BYTES_PER_GB = 1024**3


class WhitelistSet:
    """Case-insensitive, immutable set of protected usernames.

    Build one with :func:`profclean.profiles.protected.build_whitelist`
    to include the built-in protected accounts.
    """

    __slots__ = ("_display", "_folded")

    def __init__(self, names: Iterable[str] = ()) -> None:
        display: dict[str, str] = {}
        for name in names:
            stripped = name.strip()
            if stripped:
                display.setdefault(stripped.casefold(), stripped)
        self._display = display
        self._folded = frozenset(display)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return name.strip().casefold() in self._folded

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._display.values(), key=str.casefold))

    def __len__(self) -> int:
        return len(self._folded)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WhitelistSet):
            return NotImplemented
        return self._folded == other._folded

    def __hash__(self) -> int:
        return hash(self._folded)

    def __repr__(self) -> str:
        return f"WhitelistSet({list(self)!r})"

    def union(self, names: Iterable[str]) -> "WhitelistSet":
        """Return a new whitelist with additional names."""
        return WhitelistSet([*self._display.values(), *names])


class RunConfig(BaseModel):
    """Immutable configuration snapshot for one cleanup run.

    Attributes:
        month_cutoff: Months without activity before a profile is stale (0 = disabled).
        space_limit_bytes: Free-space target in bytes (0 = disabled).
        profile_limit: Maximum number of profiles to process (0 = unlimited).
        dry_run: If True, no delete request is ever issued.
        whitelist: Usernames that must never be deleted.
        volume: Volume whose free space is measured.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    month_cutoff: Annotated[int, Field(ge=0)] = 0
    space_limit_bytes: Annotated[int, Field(ge=0)] = 0
    profile_limit: Annotated[int, Field(ge=0)] = 0
    dry_run: bool = False
    whitelist: WhitelistSet = Field(default_factory=WhitelistSet)
    volume: str = "/"

    @model_validator(mode="after")
    def _require_policy(self) -> "RunConfig":
        if self.month_cutoff == 0 and self.space_limit_bytes == 0:
            msg = "Either a month cutoff or a space limit must be set"
            raise ConfigurationError(msg)
        return self

    @classmethod
    def create(cls, **values: object) -> "RunConfig":
        """Build a RunConfig, reporting every problem as ConfigurationError.

        Raises:
            ConfigurationError: If any value is out of range or no policy is set.
        """
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            msg = f"Invalid run configuration: {e}"
            raise ConfigurationError(msg) from e

    @classmethod
    def from_gigabytes(
        cls,
        *,
        space_limit_gb: float = 0,
        **values: object,
    ) -> "RunConfig":
        """Build a RunConfig with the space limit given in gigabytes."""
        if space_limit_gb < 0:
            msg = f"Space limit cannot be negative, got {space_limit_gb}"
            raise ConfigurationError(msg)
        return cls.create(space_limit_bytes=int(space_limit_gb * BYTES_PER_GB), **values)

    @property
    def age_mode(self) -> bool:
        """True when the age policy selects candidates."""
        return self.month_cutoff > 0

    @property
    def space_mode(self) -> bool:
        """True when the space policy selects candidates."""
        return self.space_limit_bytes > 0 and self.month_cutoff == 0

    @property
    def has_space_limit(self) -> bool:
        return self.space_limit_bytes > 0

    @property
    def has_profile_limit(self) -> bool:
        return self.profile_limit > 0
