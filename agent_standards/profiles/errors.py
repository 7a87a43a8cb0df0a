"""Error types raised while loading and resolving standards profiles."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Tuple


class StandardsError(RuntimeError):
    """Base error for profile loading and resolution."""

    def __init__(
        self,
        message: str,
        profile: Optional[str] = None,
        path: Optional[Path] = None,
    ) -> None:
        super().__init__(message)
        self.profile = profile
        self.path = path


class NotFoundError(StandardsError):
    """Raised when a profile, parent profile or standard does not exist."""


class ReadError(StandardsError):
    """Raised when a standards document cannot be read as text."""


class ConfigError(StandardsError):
    """Raised when profile-config.yml is malformed or violates the schema."""


class CyclicInheritanceError(StandardsError):
    """Raised when a profile is its own ancestor."""

    def __init__(self, profile: str, chain: Sequence[str]) -> None:
        self.chain: Tuple[str, ...] = tuple(chain)
        super().__init__(
            f"Cyclic inheritance for profile '{profile}': {' -> '.join(self.chain)}",
            profile=profile,
        )


class InheritanceDepthError(StandardsError):
    """Raised when an inheritance chain is longer than the configured limit."""

    def __init__(self, profile: str, chain: Sequence[str], limit: int) -> None:
        self.chain: Tuple[str, ...] = tuple(chain)
        self.limit = limit
        super().__init__(
            f"Inheritance chain for profile '{profile}' exceeds {limit} levels",
            profile=profile,
        )


class ConflictWarning(UserWarning):
    """A child profile replaced a standard it inherited. Not fatal."""

    def __init__(
        self, profile: str, overridden_profile: str, key: Tuple[str, str]
    ) -> None:
        self.profile = profile
        self.overridden_profile = overridden_profile
        self.key = key
        category, filename = key
        super().__init__(
            f"Profile '{profile}' overrides {category}/{filename} "
            f"inherited from '{overridden_profile}'"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConflictWarning):
            return NotImplemented
        return (self.profile, self.overridden_profile, self.key) == (
            other.profile,
            other.overridden_profile,
            other.key,
        )

    def __hash__(self) -> int:
        return hash((self.profile, self.overridden_profile, self.key))
