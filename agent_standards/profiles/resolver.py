"""Inheritance resolution: parent standards, minus exclusions, plus overrides."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Callable, Dict, List, Optional, Set

from agent_standards.config import Settings
from agent_standards.profiles.errors import (
    ConflictWarning,
    CyclicInheritanceError,
    InheritanceDepthError,
    NotFoundError,
)
from agent_standards.profiles.models import (
    Document,
    DocumentKey,
    EffectiveProfile,
    Profile,
)
from agent_standards.profiles.store import load_profile

logger = logging.getLogger(__name__)

ProfileLoader = Callable[[str, Settings], Profile]


class ProfileResolver:
    """Compute effective profiles from the profiles on disk.

    The resolver holds no state between calls; resolving the same name twice
    against an unchanged filesystem yields equal results.
    """

    def __init__(self, settings: Settings, loader: ProfileLoader = load_profile):
        self.settings = settings
        self.loader = loader

    def _load_lineage(self, name: str) -> List[Profile]:
        """Load ``name`` and its ancestors, nearest first."""
        lineage: List[Profile] = []
        visited: Set[str] = set()
        current: Optional[str] = name
        child: Optional[str] = None

        while current is not None:
            if current in visited:
                walk = [p.name for p in lineage] + [current]
                raise CyclicInheritanceError(name, walk)
            if len(lineage) >= self.settings.max_inheritance_depth:
                raise InheritanceDepthError(
                    name,
                    [p.name for p in lineage],
                    self.settings.max_inheritance_depth,
                )

            try:
                profile = self.loader(current, self.settings)
            except NotFoundError as e:
                if child is None:
                    raise
                raise NotFoundError(
                    f"Parent profile '{current}' of '{child}' not found",
                    profile=current,
                    path=e.path,
                ) from e

            visited.add(current)
            lineage.append(profile)
            child, current = current, profile.parent

        return lineage

    def resolve(self, name: str) -> EffectiveProfile:
        """
        Resolve a profile against its ancestors.

        Ancestors are merged root first. At each level the inherited keys
        matched by the profile's exclusions are dropped, then the profile's
        own documents are inserted, replacing inherited ones with the same
        (category, filename).

        Raises:
            NotFoundError: If the profile or one of its ancestors is missing
            CyclicInheritanceError: If the chain revisits a profile
            InheritanceDepthError: If the chain exceeds ``max_inheritance_depth``
            ConfigError: If a profile config is invalid
            ReadError: If a document cannot be read
        """
        lineage = self._load_lineage(name)

        merged: Dict[DocumentKey, Document] = {}
        warnings: List[ConflictWarning] = []
        chain: List[str] = []

        for profile in reversed(lineage):
            chain.append(profile.name)

            if profile.exclusions:
                for category, filename in profile.exclusions.unmatched(merged):
                    logger.debug(
                        f"Exclusion {category}/{filename} in '{profile.name}' "
                        "matched no inherited standard"
                    )
                excluded = [key for key in merged if profile.exclusions.matches(key)]
                for key in excluded:
                    del merged[key]
                if excluded:
                    logger.debug(
                        f"Profile '{profile.name}' excluded {len(excluded)} inherited standards"
                    )

            for key, document in profile.documents.items():
                previous = merged.get(key)
                if previous is not None:
                    warning = ConflictWarning(profile.name, previous.profile, key)
                    warnings.append(warning)
                    logger.info(str(warning))
                merged[key] = document

        effective = EffectiveProfile(
            name=name,
            chain=tuple(chain),
            documents=MappingProxyType(dict(sorted(merged.items()))),
            warnings=tuple(warnings),
        )
        logger.info(
            f"Resolved profile '{name}' ({' -> '.join(chain)}): "
            f"{len(effective)} standards, {len(warnings)} overrides"
        )
        return effective


def resolve_profile(name: str, settings: Optional[Settings] = None) -> EffectiveProfile:
    """Resolve ``name`` with a fresh resolver."""
    return ProfileResolver(settings or Settings()).resolve(name)
