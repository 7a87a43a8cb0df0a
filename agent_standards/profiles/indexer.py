"""Category views over a resolved profile."""

from __future__ import annotations

from collections import defaultdict
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from agent_standards.profiles.errors import NotFoundError
from agent_standards.profiles.models import Document, EffectiveProfile


def _filename_order(document: Document) -> Tuple[str, str]:
    return (document.filename.casefold(), document.filename)


def by_category(effective: EffectiveProfile) -> Mapping[str, Tuple[Document, ...]]:
    """
    Group a resolved profile's documents by category.

    Categories are sorted ascending; documents inside a category are ordered
    by filename, case-insensitively.

    Returns:
        Read-only mapping of category name to documents
    """
    grouped: Dict[str, List[Document]] = defaultdict(list)
    for document in effective.documents.values():
        grouped[document.category].append(document)

    return MappingProxyType(
        {
            category: tuple(sorted(grouped[category], key=_filename_order))
            for category in sorted(grouped)
        }
    )


def list_categories(effective: EffectiveProfile) -> List[str]:
    return sorted({category for category, _ in effective.documents})


def get_document(effective: EffectiveProfile, category: str, filename: str) -> Document:
    """Look up one standard, raising ``NotFoundError`` when absent."""
    document = effective.get(category, filename)
    if document is None:
        raise NotFoundError(
            f"Standard {category}/{filename} not found in profile '{effective.name}'",
            profile=effective.name,
        )
    return document
