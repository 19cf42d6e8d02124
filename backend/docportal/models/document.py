"""Modelo SQLAlchemy da tabela documents."""

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from docportal.database import Base


class Document(Base):
    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False, default="")
    status = Column(String(30), nullable=False, default="Rascunho")
    # Rascunho/Aguardando Aprovação/Aprovado/Arquivado
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    author_id = Column(String(36), ForeignKey("auth_users.id", ondelete="CASCADE"), nullable=False)
    approved_by = Column(String(36), ForeignKey("auth_users.id"), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    category = relationship("Category", lazy="joined")

    __table_args__ = (
        CheckConstraint(
            "(approved_by IS NULL AND approved_at IS NULL) OR (approved_by IS NOT NULL AND approved_at IS NOT NULL)",
            name="ck_documents_approval_pair",
        ),
        Index("idx_documents_status_created", "status", "created_at"),
        Index("idx_documents_author", "author_id"),
    )

    @property
    def category_name(self):
        return self.category.name if self.category else None
