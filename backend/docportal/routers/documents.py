"""Router da API de documentos. Valida a requisição e delega as regras do fluxo à camada de serviço."""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from docportal.database import get_db
from docportal.middleware.auth_middleware import get_current_user
from docportal.schemas.document import (
    DocumentCreate,
    DocumentHistoryOut,
    DocumentOut,
    DocumentPage,
    DocumentUpdate,
)
from docportal.services import document_service
from docportal.services.identity_service import CurrentUser

router = APIRouter(prefix="/api/documents", tags=["documents"])

StatusFilter = Literal["all", "Rascunho", "Aguardando Aprovação", "Aprovado", "Arquivado"]


@router.get("", response_model=DocumentPage)
def list_documents(
    search: Optional[str] = None,
    status_filter: Optional[StatusFilter] = Query(None, alias="status"),
    page: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    items, total = document_service.fetch_documents(
        db,
        current_user,
        search_term=search,
        status=status_filter,
        page=page,
    )
    return DocumentPage(
        items=[DocumentOut.model_validate(doc) for doc in items],
        total=total,
        page=page,
        page_size=document_service.PAGE_SIZE,
    )


@router.post("", response_model=DocumentOut, status_code=status.HTTP_201_CREATED)
def create_document(
    data: DocumentCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return document_service.create_document(db, current_user, data)


@router.get("/{document_id}", response_model=DocumentOut)
def get_document(
    document_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return document_service.get_document(db, current_user, document_id)


@router.put("/{document_id}", response_model=DocumentOut)
def update_document(
    document_id: str,
    data: DocumentUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return document_service.update_document(db, current_user, document_id, data)


@router.post("/{document_id}/submit", response_model=DocumentOut)
def submit_document(
    document_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return document_service.submit_document_for_approval(db, current_user, document_id)


@router.post("/{document_id}/approve", response_model=DocumentOut)
def approve_document(
    document_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return document_service.approve_document(db, current_user, document_id)


@router.post("/{document_id}/archive", response_model=DocumentOut)
def archive_document(
    document_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return document_service.archive_document(db, current_user, document_id)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    document_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    document_service.delete_document(db, current_user, document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{document_id}/history", response_model=List[DocumentHistoryOut])
def list_document_history(
    document_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return document_service.list_document_history(db, current_user, document_id)


@router.post("/{document_id}/restore/{history_id}", response_model=DocumentOut)
def restore_document_version(
    document_id: str,
    history_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return document_service.restore_document_version(db, current_user, document_id, history_id)
