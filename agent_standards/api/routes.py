"""HTTP route handlers exposing resolved profiles to agents."""

from __future__ import annotations

from typing import List

import anyio
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from agent_standards.profiles.errors import NotFoundError
from agent_standards.profiles.indexer import by_category, get_document
from agent_standards.profiles.loader import ProfileRegistry
from agent_standards.profiles.models import EffectiveProfile, ProfileSummary

from .schemas import DocumentModel, EffectiveProfileModel


router = APIRouter(prefix="/v1/profiles", tags=["profiles"])


def get_registry(request: Request) -> ProfileRegistry:
    return request.app.state.registry


async def _resolve(registry: ProfileRegistry, name: str) -> EffectiveProfile:
    # Filesystem reads happen off the event loop.
    return await anyio.to_thread.run_sync(registry.get, name)


@router.get("", response_model=List[ProfileSummary])
async def list_profiles(registry: ProfileRegistry = Depends(get_registry)):
    return await anyio.to_thread.run_sync(registry.list_profiles)


@router.post("/reload", response_model=List[ProfileSummary])
async def reload_profiles(registry: ProfileRegistry = Depends(get_registry)):
    def _reload() -> List[ProfileSummary]:
        registry.clear()
        registry.load_all()
        return registry.list_profiles()

    return await anyio.to_thread.run_sync(_reload)


@router.get("/{name}", response_model=EffectiveProfileModel)
async def get_profile(
    name: str,
    include_content: bool = Query(default=True),
    registry: ProfileRegistry = Depends(get_registry),
):
    profile = await _resolve(registry, name)
    return EffectiveProfileModel.from_domain(profile, include_content=include_content)


@router.get("/{name}/standards/{category}", response_model=List[DocumentModel])
async def get_category(
    name: str,
    category: str,
    include_content: bool = Query(default=True),
    registry: ProfileRegistry = Depends(get_registry),
):
    profile = await _resolve(registry, name)
    categories = by_category(profile)
    if category not in categories:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "category_not_found",
                "profile": name,
                "category": category,
                "available": list(categories),
            },
        )
    return [
        DocumentModel.from_domain(doc, include_content) for doc in categories[category]
    ]


@router.get("/{name}/standards/{category}/{filename}", response_model=DocumentModel)
async def get_standard(
    name: str,
    category: str,
    filename: str,
    registry: ProfileRegistry = Depends(get_registry),
):
    profile = await _resolve(registry, name)
    suffix = registry.settings.document_suffix
    if profile.get(category, filename) is None and not filename.endswith(suffix):
        filename = f"{filename}{suffix}"
    try:
        document = get_document(profile, category, filename)
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "standard_not_found",
                "profile": name,
                "category": category,
                "filename": filename,
                "details": str(exc),
            },
        ) from exc
    return DocumentModel.from_domain(document)
