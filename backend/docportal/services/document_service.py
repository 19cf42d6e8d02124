"""Serviço de documentos: consultas filtradas/paginadas e transições do fluxo de aprovação.

Toda mutação revalida as regras de ``docportal.utils.permissions`` no servidor
antes de gravar, incrementa ``version`` e registra uma entrada de histórico na
mesma transação. Edições concorrentes não são reconciliadas: a última escrita
prevalece.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import false, or_
from sqlalchemy.orm import Session

from docportal.config import settings
from docportal.exceptions import AuthorizationDenied, NotFoundError, ValidationError
from docportal.models.category import Category
from docportal.models.document import Document
from docportal.models.document_history import DocumentHistory
from docportal.schemas.document import DocumentCreate, DocumentUpdate
from docportal.services import history_service, identity_service
from docportal.services.identity_service import CurrentUser
from docportal.utils.permissions import (
    AGUARDANDO_APROVACAO,
    ANALISTA,
    APROVADO,
    ARQUIVADO,
    CHANGE_APPROVED,
    CHANGE_ARCHIVED,
    CHANGE_CREATED,
    CHANGE_RESTORED,
    CHANGE_UPDATED,
    RASCUNHO,
    can_approve_document,
    can_archive_document,
    can_delete_document,
    can_edit_document,
    can_submit_document,
    can_view_document,
    initial_status_for,
    is_privileged,
)

logger = logging.getLogger(__name__)

PAGE_SIZE = settings.DOCUMENTS_PAGE_SIZE


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _deny(actor: CurrentUser, action: str, message: str, document_id: Optional[str] = None):
    logger.info(
        "denied action=%s user=%s role=%s document=%s",
        action, actor.id, actor.role, document_id,
    )
    raise AuthorizationDenied(message, action=action)


def _get_or_404(db: Session, document_id: str) -> Document:
    doc = db.query(Document).filter(Document.id == document_id).first()
    if not doc:
        raise NotFoundError("Documento não encontrado")
    return doc


def _ensure_category(db: Session, category_id) -> Optional[str]:
    if category_id is None:
        return None
    category_id = str(category_id)
    if not db.query(Category.id).filter(Category.id == category_id).first():
        raise ValidationError("Categoria inválida", field="category_id")
    return category_id


def _apply_visibility(query, viewer: CurrentUser):
    # Mesma regra de can_view_document, expressa como filtro SQL.
    if is_privileged(viewer.role):
        return query
    if viewer.role == ANALISTA:
        return query.filter(or_(Document.status == APROVADO, Document.author_id == viewer.id))
    return query.filter(false())


def _commit_change(db: Session, doc: Document, actor: CurrentUser, change_type: str) -> Document:
    history_service.record_change(db, doc, changed_by=actor.id, change_type=change_type)
    db.commit()
    db.refresh(doc)
    logger.info(
        "document %s id=%s status=%s version=%s by=%s",
        change_type, doc.id, doc.status, doc.version, actor.id,
    )
    return doc


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def fetch_documents(
    db: Session,
    viewer: CurrentUser,
    *,
    search_term: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 0,
) -> Tuple[List[Document], int]:
    q = _apply_visibility(db.query(Document), viewer)
    term = (search_term or "").strip()
    if term:
        q = q.filter(Document.title.ilike(f"%{_escape_like(term)}%", escape="\\"))
    if status and status != "all":
        q = q.filter(Document.status == status)

    total = q.count()
    items = (
        q.order_by(Document.created_at.desc(), Document.id)
        .offset(max(page, 0) * PAGE_SIZE)
        .limit(PAGE_SIZE)
        .all()
    )
    return items, total


def fetch_dashboard_stats(db: Session, viewer: CurrentUser) -> dict:
    base = _apply_visibility(db.query(Document), viewer)
    return {
        "total_documents": base.count(),
        "approved_documents": base.filter(Document.status == APROVADO).count(),
        "pending_approvals": base.filter(Document.status == AGUARDANDO_APROVACAO).count(),
        "my_drafts": db.query(Document)
        .filter(Document.status == RASCUNHO, Document.author_id == viewer.id)
        .count(),
    }


def get_document(db: Session, viewer: CurrentUser, document_id: str) -> Document:
    doc = _get_or_404(db, document_id)
    if not can_view_document(viewer.role, doc.status, doc.author_id == viewer.id):
        _deny(viewer, "view", "Você não tem permissão para visualizar este documento", doc.id)
    return doc


def create_document(db: Session, actor: CurrentUser, data: DocumentCreate) -> Document:
    if not actor.permissions.can_create:
        _deny(actor, "create", "Você não tem permissão para criar documentos")

    status = initial_status_for(actor.role)
    doc = Document(
        title=data.title,
        content=data.content,
        category_id=_ensure_category(db, data.category_id),
        status=status,
        author_id=actor.id,
        version=1,
    )
    if status == APROVADO:
        doc.approved_by = actor.id
        doc.approved_at = _now()
    db.add(doc)
    db.flush()
    return _commit_change(db, doc, actor, CHANGE_CREATED)


def update_document(db: Session, actor: CurrentUser, document_id: str, data: DocumentUpdate) -> Document:
    doc = _get_or_404(db, document_id)
    if not can_edit_document(actor.role, doc.status, doc.author_id == actor.id):
        _deny(actor, "edit", "Você não tem permissão para editar este documento", doc.id)

    changes = data.model_dump(exclude_unset=True)
    for key in ("title", "content"):
        if changes.get(key) is None:
            changes.pop(key, None)
    if "category_id" in changes:
        changes["category_id"] = _ensure_category(db, changes["category_id"])
    if not changes:
        return doc

    for key, value in changes.items():
        setattr(doc, key, value)
    doc.version += 1
    return _commit_change(db, doc, actor, CHANGE_UPDATED)


def submit_document_for_approval(db: Session, actor: CurrentUser, document_id: str) -> Document:
    doc = _get_or_404(db, document_id)
    if not can_submit_document(actor.role, doc.status, doc.author_id == actor.id):
        _deny(actor, "submit", "Apenas o autor pode enviar um rascunho para aprovação", doc.id)

    doc.status = AGUARDANDO_APROVACAO
    doc.version += 1
    return _commit_change(db, doc, actor, CHANGE_UPDATED)


def approve_document(db: Session, actor: CurrentUser, document_id: str) -> Document:
    doc = _get_or_404(db, document_id)
    author_role = identity_service.get_user_role(db, doc.author_id)
    if not can_approve_document(actor.role, doc.status, author_role):
        _deny(actor, "approve", "Você não tem permissão para aprovar este documento", doc.id)

    doc.status = APROVADO
    doc.approved_by = actor.id
    doc.approved_at = _now()
    doc.version += 1
    return _commit_change(db, doc, actor, CHANGE_APPROVED)


def archive_document(db: Session, actor: CurrentUser, document_id: str) -> Document:
    doc = _get_or_404(db, document_id)
    if not can_archive_document(actor.role, doc.status):
        _deny(actor, "archive", "Você não tem permissão para arquivar este documento", doc.id)

    doc.status = ARQUIVADO
    doc.version += 1
    return _commit_change(db, doc, actor, CHANGE_ARCHIVED)


def restore_document_version(db: Session, actor: CurrentUser, document_id: str, history_id: str) -> Document:
    doc = _get_or_404(db, document_id)
    if not can_edit_document(actor.role, doc.status, doc.author_id == actor.id):
        _deny(actor, "restore", "Você não tem permissão para restaurar este documento", doc.id)

    entry = history_service.get_entry(db, document_id, history_id)
    doc.title = entry.title
    doc.content = entry.content
    doc.version += 1
    return _commit_change(db, doc, actor, CHANGE_RESTORED)


def delete_document(db: Session, actor: CurrentUser, document_id: str) -> None:
    doc = _get_or_404(db, document_id)
    if not can_delete_document(actor.role):
        _deny(actor, "delete", "Apenas Gerentes podem excluir documentos", doc.id)

    # O histórico do documento é removido pelo ON DELETE CASCADE.
    db.delete(doc)
    db.commit()
    logger.info("document deleted id=%s by=%s", document_id, actor.id)


def list_document_history(db: Session, viewer: CurrentUser, document_id: str) -> List[DocumentHistory]:
    doc = get_document(db, viewer, document_id)
    return history_service.list_history(db, doc.id)
