# agent_standards/api/schemas.py
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from agent_standards.profiles.errors import ConflictWarning
from agent_standards.profiles.indexer import by_category
from agent_standards.profiles.models import Document, EffectiveProfile


class DocumentModel(BaseModel):
    profile: str = Field(..., description="Profile the document was read from")
    category: str
    filename: str
    content: Optional[str] = None

    @classmethod
    def from_domain(
        cls, document: Document, include_content: bool = True
    ) -> "DocumentModel":
        return cls(
            profile=document.profile,
            category=document.category,
            filename=document.filename,
            content=document.content if include_content else None,
        )


class ConflictModel(BaseModel):
    profile: str
    overridden_profile: str
    category: str
    filename: str

    @classmethod
    def from_domain(cls, warning: ConflictWarning) -> "ConflictModel":
        category, filename = warning.key
        return cls(
            profile=warning.profile,
            overridden_profile=warning.overridden_profile,
            category=category,
            filename=filename,
        )


class EffectiveProfileModel(BaseModel):
    name: str
    chain: List[str]
    fingerprint: str
    document_count: int
    categories: Dict[str, List[DocumentModel]]
    warnings: List[ConflictModel] = Field(default_factory=list)

    @classmethod
    def from_domain(
        cls, profile: EffectiveProfile, include_content: bool = True
    ) -> "EffectiveProfileModel":
        return cls(
            name=profile.name,
            chain=list(profile.chain),
            fingerprint=profile.fingerprint(),
            document_count=len(profile),
            categories={
                category: [
                    DocumentModel.from_domain(doc, include_content) for doc in documents
                ]
                for category, documents in by_category(profile).items()
            },
            warnings=[ConflictModel.from_domain(w) for w in profile.warnings],
        )
