"""Pacote de modelos SQLAlchemy. Importar este módulo registra todas as tabelas no metadata."""

from docportal.models.user import AuthUser, UserRole
from docportal.models.profile import Profile
from docportal.models.category import Category
from docportal.models.document import Document
from docportal.models.document_history import DocumentHistory

__all__ = [
    "AuthUser", "UserRole",
    "Profile",
    "Category",
    "Document",
    "DocumentHistory",
]
