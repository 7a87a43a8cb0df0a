"""Profile data models for Agent Standards."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from types import MappingProxyType
from typing import Any, FrozenSet, Iterable, List, Mapping, Optional, Tuple

import orjson
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from agent_standards.profiles.errors import ConflictWarning

DocumentKey = Tuple[str, str]

_GLOB_CHARS = frozenset("*?[")


def check_profile_name(name: str) -> str:
    """Reject names that would leave the profiles root."""
    if not name or "/" in name or "\\" in name or name in (".", ".."):
        raise ValueError(f"Invalid profile name: {name!r}")
    return name


class ProfileConfig(BaseModel):
    """Typed contents of a profile's ``profile-config.yml``."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: Optional[str] = Field(
        default=None, description="Optional profile name; must match its directory"
    )
    parent: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("parent", "inherits_from"),
        description="Name of the profile this one inherits from",
    )
    excluded_standards: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("excluded_standards", "exclude_inherited_files"),
        description="Inherited standards to drop, e.g. 'standards/testing/ui-testing.md'",
    )

    @field_validator("name", "parent", mode="before")
    @classmethod
    def normalize_name(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError(f"Profile name must be a string, got {type(v).__name__}")
        v = v.strip()
        if not v:
            return None
        return check_profile_name(v)

    @field_validator("excluded_standards", mode="before")
    @classmethod
    def normalize_exclusions(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


@dataclass(frozen=True, slots=True)
class ExclusionList:
    """(category, filename) pairs a child profile drops from its parent.

    Either half may be a glob pattern, so ``testing/*`` drops a whole
    category.
    """

    entries: FrozenSet[DocumentKey] = frozenset()

    @classmethod
    def parse(
        cls,
        raw_entries: Iterable[str],
        standards_dir: str = "standards",
        suffix: str = ".md",
    ) -> "ExclusionList":
        """
        Build an exclusion list from config entries.

        Accepted forms are ``standards/<category>/<file>`` and
        ``<category>/<file>``. The document suffix is appended to plain
        filenames that lack it.

        Raises:
            ValueError: If an entry does not name exactly one category and file
        """
        parsed = set()
        for raw in raw_entries:
            if not isinstance(raw, str) or not raw.strip():
                raise ValueError(f"Invalid exclusion entry: {raw!r}")
            parts = [
                p for p in raw.strip().replace("\\", "/").split("/") if p and p != "."
            ]
            if parts and parts[0] == standards_dir:
                parts = parts[1:] if len(parts) == 3 else []
            if len(parts) != 2:
                raise ValueError(
                    f"Exclusion '{raw}' must look like "
                    f"'{standards_dir}/<category>/<file>' or '<category>/<file>'"
                )
            category, filename = parts
            if not _GLOB_CHARS.intersection(filename) and not filename.endswith(suffix):
                filename = f"{filename}{suffix}"
            parsed.add((category, filename))
        return cls(frozenset(parsed))

    def matches(self, key: DocumentKey) -> bool:
        category, filename = key
        return any(
            fnmatchcase(category, cat_pattern) and fnmatchcase(filename, file_pattern)
            for cat_pattern, file_pattern in self.entries
        )

    def unmatched(self, keys: Iterable[DocumentKey]) -> List[DocumentKey]:
        """Entries that match none of ``keys``."""
        keys = list(keys)
        return [
            (cat_pattern, file_pattern)
            for cat_pattern, file_pattern in sorted(self.entries)
            if not any(
                fnmatchcase(category, cat_pattern) and fnmatchcase(filename, file_pattern)
                for category, filename in keys
            )
        ]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, tuple) and len(key) == 2 and self.matches(key)

    def __iter__(self):
        return iter(sorted(self.entries))

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True, slots=True)
class Document:
    """A single standards markdown file."""

    profile: str
    category: str
    filename: str
    content: str
    path: Optional[Path] = field(default=None, compare=False)

    @property
    def key(self) -> DocumentKey:
        return (self.category, self.filename)


@dataclass(frozen=True, slots=True)
class Profile:
    """A profile as declared on disk, before inheritance is applied."""

    name: str
    parent: Optional[str] = None
    exclusions: ExclusionList = field(default_factory=ExclusionList)
    documents: Mapping[DocumentKey, Document] = field(
        default_factory=lambda: MappingProxyType({})
    )
    root: Optional[Path] = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class EffectiveProfile:
    """The merged document set of a profile after inheritance and exclusions."""

    name: str
    chain: Tuple[str, ...]
    documents: Mapping[DocumentKey, Document]
    warnings: Tuple[ConflictWarning, ...] = ()

    def keys(self) -> List[DocumentKey]:
        return sorted(self.documents)

    def get(self, category: str, filename: str) -> Optional[Document]:
        return self.documents.get((category, filename))

    def fingerprint(self) -> str:
        """Stable digest of the resolved content, for cache validation."""
        rows = [
            [doc.category, doc.filename, doc.profile, doc.content]
            for _, doc in sorted(self.documents.items())
        ]
        payload = orjson.dumps({"name": self.name, "chain": list(self.chain), "documents": rows})
        return hashlib.sha256(payload).hexdigest()

    def __len__(self) -> int:
        return len(self.documents)

    def __hash__(self) -> int:
        return hash(
            (self.name, self.chain, tuple(sorted(self.documents.items())), self.warnings)
        )

    def __contains__(self, key: object) -> bool:
        return key in self.documents


class ProfileSummary(BaseModel):
    """Summary information about a profile for discovery."""

    name: str
    parent: Optional[str] = None
    chain: List[str] = Field(default_factory=list)
    document_count: int = 0
    categories: List[str] = Field(default_factory=list)
    fingerprint: Optional[str] = None
    error: Optional[str] = Field(
        default=None, description="Why the profile could not be resolved"
    )
