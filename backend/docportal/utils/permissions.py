"""Política de papéis e regras de transição do fluxo de documentos.

Funções puras: não acessam banco nem lançam exceções. Papel ausente ou
desconhecido sempre resulta em negação.
"""

from dataclasses import asdict, dataclass
from typing import Optional


ANALISTA = "Analista"
COORDENADOR = "Coordenador"
GERENTE = "Gerente"

ALL_ROLES = (ANALISTA, COORDENADOR, GERENTE)
PRIVILEGED_ROLES = (COORDENADOR, GERENTE)

RASCUNHO = "Rascunho"
AGUARDANDO_APROVACAO = "Aguardando Aprovação"
APROVADO = "Aprovado"
ARQUIVADO = "Arquivado"

ALL_STATUSES = (RASCUNHO, AGUARDANDO_APROVACAO, APROVADO, ARQUIVADO)
ANALISTA_EDITABLE_STATUSES = (RASCUNHO, AGUARDANDO_APROVACAO)

CHANGE_CREATED = "created"
CHANGE_UPDATED = "updated"
CHANGE_APPROVED = "approved"
CHANGE_ARCHIVED = "archived"
CHANGE_RESTORED = "restored"

ALL_CHANGE_TYPES = (CHANGE_CREATED, CHANGE_UPDATED, CHANGE_APPROVED, CHANGE_ARCHIVED, CHANGE_RESTORED)


@dataclass(frozen=True)
class Permissions:
    can_create: bool = False
    can_edit: bool = False
    can_approve: bool = False
    can_delete: bool = False
    can_manage_users: bool = False
    can_view_users: bool = False
    can_edit_users: bool = False
    can_delete_users: bool = False
    can_manage_categories: bool = False

    def as_dict(self) -> dict:
        return asdict(self)


NO_PERMISSIONS = Permissions()

_ROLE_PERMISSIONS = {
    ANALISTA: Permissions(can_create=True),
    COORDENADOR: Permissions(
        can_create=True,
        can_edit=True,
        can_approve=True,
        can_view_users=True,
        can_manage_categories=True,
    ),
    GERENTE: Permissions(
        can_create=True,
        can_edit=True,
        can_approve=True,
        can_delete=True,
        can_manage_users=True,
        can_view_users=True,
        can_edit_users=True,
        can_delete_users=True,
        can_manage_categories=True,
    ),
}


def is_valid_role(role: Optional[str]) -> bool:
    return role in ALL_ROLES


def is_privileged(role: Optional[str]) -> bool:
    return role in PRIVILEGED_ROLES


def get_user_permissions(role: Optional[str]) -> Permissions:
    return _ROLE_PERMISSIONS.get(role, NO_PERMISSIONS)


def initial_status_for(role: Optional[str]) -> str:
    # Documento criado por Gerente já nasce aprovado.
    if role == GERENTE:
        return APROVADO
    return RASCUNHO


def can_edit_document(role: Optional[str], status: str, is_author: bool) -> bool:
    if role in PRIVILEGED_ROLES:
        return True
    if role == ANALISTA and is_author:
        return status in ANALISTA_EDITABLE_STATUSES
    return False


def can_approve_document(role: Optional[str], status: str, author_role: Optional[str]) -> bool:
    if role == GERENTE:
        return True
    if role == COORDENADOR:
        # Coordenador aprova apenas submissões de Analista.
        return status == AGUARDANDO_APROVACAO and author_role == ANALISTA
    return False


def can_delete_document(role: Optional[str]) -> bool:
    return role == GERENTE


def can_view_document(role: Optional[str], status: str, is_author: bool) -> bool:
    if role not in ALL_ROLES:
        return False
    if status == APROVADO:
        return True
    if is_author:
        return True
    return role in PRIVILEGED_ROLES


def can_submit_document(role: Optional[str], status: str, is_author: bool) -> bool:
    if not is_author or status != RASCUNHO:
        return False
    return can_edit_document(role, status, is_author)


def can_archive_document(role: Optional[str], status: str) -> bool:
    if status == ARQUIVADO:
        return False
    return get_user_permissions(role).can_edit
