"""Esquemas Pydantic de requisição/resposta para documentos."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from docportal.schemas.common import ChangeTypeLiteral, DocumentStatusLiteral
from docportal.utils.sanitize import sanitize_rich_content, sanitize_text

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 200


def _clean_title(value: str) -> str:
    title = sanitize_text(value)
    if len(title) < TITLE_MIN_LENGTH:
        raise ValueError("Título muito curto")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValueError("Título muito longo")
    return title


def _clean_content(value: str) -> str:
    content = sanitize_rich_content(value)
    if not content:
        raise ValueError("Conteúdo obrigatório")
    return content


class DocumentCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    content: str
    category_id: Optional[UUID] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _clean_title(value)

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: str) -> str:
        return _clean_content(value)


class DocumentUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    content: Optional[str] = None
    category_id: Optional[UUID] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _clean_title(value)

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _clean_content(value)


class DocumentOut(BaseModel):
    id: str
    title: str
    content: str
    status: DocumentStatusLiteral
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    author_id: str
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    version: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DocumentPage(BaseModel):
    items: List[DocumentOut]
    total: int
    page: int
    page_size: int


class DocumentHistoryOut(BaseModel):
    id: str
    document_id: str
    title: str
    content: str
    status: DocumentStatusLiteral
    changed_by: str
    change_type: ChangeTypeLiteral
    version: int
    created_at: datetime

    model_config = {"from_attributes": True}


class DashboardStats(BaseModel):
    total_documents: int
    approved_documents: int
    pending_approvals: int
    my_drafts: int
