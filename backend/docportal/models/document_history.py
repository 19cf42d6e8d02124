"""Trilha de auditoria imutável dos documentos (tabela document_history)."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.sql import func
from docportal.database import Base


class DocumentHistory(Base):
    __tablename__ = "document_history"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    document_id = Column(String(36), ForeignKey("documents.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    status = Column(String(30), nullable=False)
    changed_by = Column(String(36), ForeignKey("auth_users.id"), nullable=False)
    change_type = Column(String(20), nullable=False)  # created/updated/approved/archived/restored
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("idx_document_history_document", "document_id", "version"),
    )
