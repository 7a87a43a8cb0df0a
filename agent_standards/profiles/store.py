"""Read-only access to profile directories on disk."""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import List, Optional

import yaml
from pydantic import ValidationError

from agent_standards.config import Settings
from agent_standards.profiles.errors import ConfigError, NotFoundError, ReadError
from agent_standards.profiles.models import (
    Document,
    ExclusionList,
    Profile,
    ProfileConfig,
    check_profile_name,
)

logger = logging.getLogger(__name__)


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def _list_dir(directory: Path, profile: str) -> List[Path]:
    try:
        return sorted(directory.iterdir())
    except OSError as e:
        raise ReadError(
            f"Cannot list {directory}: {e}", profile=profile, path=directory
        ) from e


def list_documents(
    profile_root: str | Path,
    profile_name: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> List[Document]:
    """
    Read every standards document of a single profile.

    Only ``<profile_root>/<standards_dir>/<category>/*<suffix>`` is scanned;
    deeper directories are ignored.

    Args:
        profile_root: Directory of the profile
        profile_name: Name recorded on each document, defaults to the directory name
        settings: Layout settings, defaults to ``Settings()``

    Returns:
        Documents sorted by (category, filename)

    Raises:
        NotFoundError: If the profile root does not exist
        ReadError: If a document cannot be read or decoded
    """
    settings = settings or Settings()
    root = Path(profile_root)
    name = profile_name or root.name
    if not root.is_dir():
        raise NotFoundError(f"Profile directory not found: {root}", profile=name, path=root)

    standards_root = root / settings.standards_dir
    if not standards_root.is_dir():
        logger.debug(f"Profile '{name}' has no {settings.standards_dir}/ directory")
        return []

    documents: List[Document] = []
    for category_dir in _list_dir(standards_root, name):
        if not category_dir.is_dir() or _is_hidden(category_dir):
            continue
        for doc_path in _list_dir(category_dir, name):
            if (
                not doc_path.is_file()
                or _is_hidden(doc_path)
                or not doc_path.name.endswith(settings.document_suffix)
            ):
                continue
            try:
                content = doc_path.read_text(encoding=settings.encoding)
            except (OSError, UnicodeDecodeError) as e:
                raise ReadError(
                    f"Cannot read standard {doc_path}: {e}", profile=name, path=doc_path
                ) from e
            documents.append(
                Document(
                    profile=name,
                    category=category_dir.name,
                    filename=doc_path.name,
                    content=content,
                    path=doc_path,
                )
            )

    logger.debug(f"Read {len(documents)} standards from profile '{name}'")
    return documents


def load_profile_config(
    profile_root: str | Path, settings: Optional[Settings] = None
) -> ProfileConfig:
    """
    Parse the profile's config file; a missing or empty file means no parent.

    Raises:
        ConfigError: If the file is not valid YAML or violates the schema
    """
    settings = settings or Settings()
    root = Path(profile_root)
    config_path = root / settings.config_filename
    if not config_path.is_file():
        return ProfileConfig()

    try:
        with open(config_path, "r", encoding=settings.encoding) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"YAML parse error in {config_path}: {e}")
        raise ConfigError(
            f"Invalid YAML in {config_path}: {e}", profile=root.name, path=config_path
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(
            f"Cannot read {config_path}: {e}", profile=root.name, path=config_path
        ) from e

    if data is None:
        return ProfileConfig()
    if not isinstance(data, dict):
        raise ConfigError(
            f"{config_path} must contain a mapping, got {type(data).__name__}",
            profile=root.name,
            path=config_path,
        )

    try:
        return ProfileConfig.model_validate(data)
    except ValidationError as e:
        logger.error(f"Validation error in {config_path}: {e}")
        raise ConfigError(
            f"Invalid profile config {config_path}: {e}",
            profile=root.name,
            path=config_path,
        ) from e


def load_profile(name: str, settings: Settings) -> Profile:
    """
    Load a profile's own documents, parent and exclusions.

    Raises:
        NotFoundError: If no directory named ``name`` exists under the profiles root
        ConfigError: If the profile config is invalid
        ReadError: If a document cannot be read
    """
    try:
        check_profile_name(name)
    except ValueError as e:
        raise NotFoundError(f"Profile not found: {name}", profile=name) from e

    root = Path(settings.profiles_root) / name
    if _is_hidden(root) or not root.is_dir():
        raise NotFoundError(f"Profile not found: {name}", profile=name, path=root)

    config = load_profile_config(root, settings)
    if config.name is not None and config.name != name:
        raise ConfigError(
            f"Profile directory '{name}' declares name '{config.name}'",
            profile=name,
            path=root / settings.config_filename,
        )

    try:
        exclusions = ExclusionList.parse(
            config.excluded_standards,
            standards_dir=settings.standards_dir,
            suffix=settings.document_suffix,
        )
    except ValueError as e:
        raise ConfigError(str(e), profile=name, path=root / settings.config_filename) from e

    if exclusions and config.parent is None:
        logger.warning(f"Profile '{name}' excludes standards but has no parent")

    documents = list_documents(root, profile_name=name, settings=settings)
    return Profile(
        name=name,
        parent=config.parent,
        exclusions=exclusions,
        documents=MappingProxyType({doc.key: doc for doc in documents}),
        root=root,
    )


def discover_profiles(settings: Settings) -> List[str]:
    """Names of all profile directories under the profiles root."""
    root = Path(settings.profiles_root)
    if not root.is_dir():
        logger.warning(f"Profiles directory not found: {root}")
        return []
    return sorted(p.name for p in root.iterdir() if p.is_dir() and not _is_hidden(p))
