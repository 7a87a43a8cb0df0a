"""Standards profiles: loading, inheritance resolution and category indexing."""

from agent_standards.profiles.errors import (
    ConfigError,
    ConflictWarning,
    CyclicInheritanceError,
    InheritanceDepthError,
    NotFoundError,
    ReadError,
    StandardsError,
)
from agent_standards.profiles.indexer import by_category, get_document, list_categories
from agent_standards.profiles.loader import ProfileRegistry, get_profile_registry
from agent_standards.profiles.models import (
    Document,
    EffectiveProfile,
    ExclusionList,
    Profile,
    ProfileConfig,
    ProfileSummary,
)
from agent_standards.profiles.resolver import ProfileResolver, resolve_profile
from agent_standards.profiles.store import list_documents, load_profile

__all__ = [
    "Document",
    "EffectiveProfile",
    "ExclusionList",
    "Profile",
    "ProfileConfig",
    "ProfileSummary",
    "ProfileRegistry",
    "ProfileResolver",
    "get_profile_registry",
    "resolve_profile",
    "list_documents",
    "load_profile",
    "by_category",
    "list_categories",
    "get_document",
    "StandardsError",
    "NotFoundError",
    "ReadError",
    "ConfigError",
    "CyclicInheritanceError",
    "InheritanceDepthError",
    "ConflictWarning",
]
