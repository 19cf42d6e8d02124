"""Pacote da camada de serviços."""

from docportal.services import (
    identity_service,
    history_service,
    document_service,
    category_service,
    user_service,
    profile_service,
)
