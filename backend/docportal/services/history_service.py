"""Registro append-only do histórico de documentos (document_history)."""

from typing import List

from sqlalchemy.orm import Session

from docportal.exceptions import NotFoundError
from docportal.models.document import Document
from docportal.models.document_history import DocumentHistory


def record_change(db: Session, document: Document, *, changed_by: str, change_type: str) -> DocumentHistory:
    # Não faz commit: a entrada entra na mesma transação da mutação do documento.
    row = DocumentHistory(
        document_id=document.id,
        title=document.title,
        content=document.content,
        status=document.status,
        changed_by=changed_by,
        change_type=change_type,
        version=document.version,
    )
    db.add(row)
    db.flush()
    return row


def list_history(db: Session, document_id: str) -> List[DocumentHistory]:
    return (
        db.query(DocumentHistory)
        .filter(DocumentHistory.document_id == document_id)
        .order_by(DocumentHistory.version.desc())
        .all()
    )


def get_entry(db: Session, document_id: str, history_id: str) -> DocumentHistory:
    row = (
        db.query(DocumentHistory)
        .filter(
            DocumentHistory.id == history_id,
            DocumentHistory.document_id == document_id,
        )
        .first()
    )
    if not row:
        raise NotFoundError("Entrada de histórico não encontrada")
    return row
