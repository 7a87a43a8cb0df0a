"""Profile registry: discovery and caching of resolved profiles."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from agent_standards.config import Settings, get_settings
from agent_standards.profiles.errors import StandardsError
from agent_standards.profiles.indexer import list_categories
from agent_standards.profiles.models import EffectiveProfile, ProfileSummary
from agent_standards.profiles.resolver import ProfileResolver
from agent_standards.profiles.store import discover_profiles

logger = logging.getLogger(__name__)


class ProfileRegistry:
    """Registry caching effective profiles for the lifetime of the process."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._resolver = ProfileResolver(settings)
        self._profiles: Dict[str, EffectiveProfile] = {}
        self._loaded = False

    def load_all(self) -> Dict[str, StandardsError]:
        """
        Resolve every profile found under the profiles root.

        A broken profile does not stop the others from being cached.

        Returns:
            Resolution errors keyed by profile name, empty when all resolved
        """
        loaded = []
        failures: Dict[str, StandardsError] = {}
        for name in discover_profiles(self.settings):
            try:
                self.get(name)
            except StandardsError as e:
                logger.error(f"Failed to resolve profile '{name}': {e}")
                failures[name] = e
                continue
            loaded.append(name)

        self._loaded = True
        if loaded:
            logger.info(f"Profiles loaded: {', '.join(loaded)}")
        else:
            logger.info("No profiles loaded")
        return failures

    def get(self, name: str) -> EffectiveProfile:
        """
        Get the effective profile for ``name``, resolving it on first use.

        Raises:
            NotFoundError: If the profile or one of its ancestors is missing
            CyclicInheritanceError: If the inheritance chain loops
        """
        profile = self._profiles.get(name)
        if profile is None:
            profile = self._resolver.resolve(name)
            self._profiles[name] = profile
        return profile

    def list_profiles(self) -> List[ProfileSummary]:
        """
        Get summary information about every discoverable profile.

        Returns:
            List of profile summaries, sorted by name
        """
        summaries = []
        for name in discover_profiles(self.settings):
            try:
                profile = self.get(name)
            except StandardsError as e:
                logger.warning(f"Listing profile '{name}' without resolution: {e}")
                summaries.append(ProfileSummary(name=name, error=str(e)))
                continue
            summaries.append(
                ProfileSummary(
                    name=profile.name,
                    parent=profile.chain[-2] if len(profile.chain) > 1 else None,
                    chain=list(profile.chain),
                    document_count=len(profile),
                    categories=list_categories(profile),
                    fingerprint=profile.fingerprint(),
                )
            )
        return summaries

    def get_available_names(self) -> List[str]:
        """Get list of profile names on disk."""
        return discover_profiles(self.settings)

    def is_loaded(self) -> bool:
        """Check if profiles have been loaded."""
        return self._loaded

    def clear(self) -> None:
        """Drop all cached profiles."""
        self._profiles.clear()
        self._loaded = False


# Global registry instance
_registry: Optional[ProfileRegistry] = None


def get_profile_registry() -> ProfileRegistry:
    """Get the global profile registry instance."""
    global _registry
    if _registry is None:
        _registry = ProfileRegistry(get_settings())
    return _registry


def set_profile_registry(registry: Optional[ProfileRegistry]) -> None:
    """Replace the global registry; ``None`` forces a fresh one on next access."""
    global _registry
    _registry = registry


def reload_profiles() -> None:
    """Clear the global registry and resolve every profile again."""
    registry = get_profile_registry()
    registry.clear()
    registry.load_all()
