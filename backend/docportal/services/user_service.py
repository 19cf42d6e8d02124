"""Serviço administrativo de usuários: listagem, criação, troca de papel e exclusão em duas fases."""

import logging
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from docportal.exceptions import AuthorizationDenied, DependencyError, NotFoundError, PortalError, ValidationError
from docportal.models.document import Document
from docportal.models.document_history import DocumentHistory
from docportal.models.user import AuthUser, UserRole
from docportal.schemas.user import AdminUserCreate, AdminUserUpdate
from docportal.services import identity_service
from docportal.services.identity_service import CurrentUser
from docportal.utils.permissions import GERENTE

logger = logging.getLogger(__name__)

CLEANUP_PROCEDURE = "procedure"
CLEANUP_DIRECT = "direct"


def _require(actor: CurrentUser, flag: str, action: str) -> None:
    if not getattr(actor.permissions, flag):
        logger.info("denied action=%s user=%s role=%s", action, actor.id, actor.role)
        raise AuthorizationDenied("Permissão insuficiente", action=action)


def _get_user_or_404(db: Session, user_id: str) -> AuthUser:
    user = identity_service.get_user(db, user_id)
    if not user:
        raise NotFoundError("Usuário não encontrado")
    return user


def _to_admin_user(user: AuthUser, role_row: Optional[UserRole]) -> Dict:
    return {
        "id": user.id,
        "email": user.email,
        "role": role_row.role if role_row else None,
        "role_id": role_row.id if role_row else None,
        "created_at": user.created_at,
    }


def _users_with_roles(db: Session) -> List[Dict]:
    roles = {row.user_id: row for row in db.query(UserRole).all()}
    return [_to_admin_user(user, roles.get(user.id)) for user in identity_service.list_users(db)]


def _ensure_not_last_gerente(db: Session, user_id: str, next_role: Optional[str]) -> None:
    current = db.query(UserRole).filter(UserRole.user_id == user_id).first()
    if not current or current.role != GERENTE or next_role == GERENTE:
        return
    gerente_count = db.query(UserRole).filter(UserRole.role == GERENTE).count()
    if gerente_count <= 1:
        raise ValidationError("O último Gerente não pode ser removido ou rebaixado", field="role")


def _upsert_role(db: Session, user_id: str, role: str, assigned_by: str) -> UserRole:
    # Um único papel por usuário; conflito resolvido por user_id.
    row = db.query(UserRole).filter(UserRole.user_id == user_id).first()
    if row:
        row.role = role
        row.assigned_by = assigned_by
    else:
        row = UserRole(user_id=user_id, role=role, assigned_by=assigned_by)
        db.add(row)
    return row


def list_users(db: Session, actor: CurrentUser) -> List[Dict]:
    _require(actor, "can_manage_users", "list_users")
    return _users_with_roles(db)


def list_user_directory(db: Session, actor: CurrentUser) -> List[Dict]:
    _require(actor, "can_view_users", "view_users")
    return _users_with_roles(db)


def _create_account(db: Session, actor: CurrentUser, data: AdminUserCreate) -> AuthUser:
    try:
        user = identity_service.create_user(db, data.email, data.password, auto_confirm=True, commit=False)
        _upsert_role(db, user.id, data.role, assigned_by=actor.id)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise DependencyError(f"account creation failed for {data.email}: {exc}") from exc
    db.refresh(user)
    logger.info("user created id=%s role=%s by=%s", user.id, data.role, actor.id)
    return user


def create_user(db: Session, actor: CurrentUser, data: AdminUserCreate) -> AuthUser:
    _require(actor, "can_manage_users", "create_user")
    return _create_account(db, actor, data)


def _row_error(exc: SchemaValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Dados inválidos"
    first = errors[0]
    ctx_error = (first.get("ctx") or {}).get("error")
    return str(ctx_error) if ctx_error else first.get("msg", "Dados inválidos")


def import_users(db: Session, actor: CurrentUser, rows: Iterable[Dict]) -> Dict:
    """Cria contas em lote, linha a linha.

    Cada linha é validada e gravada isoladamente: uma falha desfaz apenas a
    própria linha e entra em ``errors`` como ``"<email>: <motivo>"``.
    """
    _require(actor, "can_manage_users", "import_users")
    success, errors = 0, []
    for row in rows:
        email = str(row.get("email") or "").strip()
        try:
            data = AdminUserCreate.model_validate(row)
            _create_account(db, actor, data)
        except SchemaValidationError as exc:
            errors.append(f"{email}: {_row_error(exc)}")
        except PortalError as exc:
            db.rollback()
            errors.append(f"{email}: {exc.message}")
        else:
            success += 1
    logger.info("user import by=%s success=%s failed=%s", actor.id, success, len(errors))
    return {"success": success, "failed": len(errors), "errors": errors}


def _check_role_change(db: Session, actor: CurrentUser, user_id: str, role: str) -> None:
    if user_id == actor.id and role != GERENTE:
        raise ValidationError("Não é possível rebaixar a própria conta", field="role")
    _ensure_not_last_gerente(db, user_id, role)


def update_user_role(db: Session, actor: CurrentUser, user_id: str, role: str) -> UserRole:
    _require(actor, "can_manage_users", "update_user_role")
    _get_user_or_404(db, user_id)
    _check_role_change(db, actor, user_id, role)
    row = _upsert_role(db, user_id, role, assigned_by=actor.id)
    db.commit()
    db.refresh(row)
    logger.info("role updated user=%s role=%s by=%s", user_id, role, actor.id)
    return row


def update_user(db: Session, actor: CurrentUser, user_id: str, data: AdminUserUpdate) -> Dict:
    _require(actor, "can_edit_users", "edit_user")
    user = _get_user_or_404(db, user_id)
    if data.role is not None:
        _require(actor, "can_manage_users", "update_user_role")
        _check_role_change(db, actor, user_id, data.role)

    # E-mail e papel na mesma transação.
    try:
        if data.email is not None:
            user = identity_service.update_user_email(db, user_id, data.email, commit=False)
        if data.role is not None:
            _upsert_role(db, user_id, data.role, assigned_by=actor.id)
        db.commit()
    except PortalError:
        db.rollback()
        raise
    db.refresh(user)
    logger.info("user updated id=%s by=%s", user_id, actor.id)
    role_row = db.query(UserRole).filter(UserRole.user_id == user_id).first()
    return _to_admin_user(user, role_row)


def _cleanup_direct(db: Session, user_id: str) -> None:
    db.query(Document).filter(Document.approved_by == user_id).update(
        {Document.approved_by: None, Document.approved_at: None},
        synchronize_session=False,
    )
    db.query(UserRole).filter(UserRole.assigned_by == user_id).update(
        {UserRole.assigned_by: None},
        synchronize_session=False,
    )
    db.query(DocumentHistory).filter(DocumentHistory.changed_by == user_id).delete(
        synchronize_session=False,
    )
    db.commit()


def cleanup_user_references(db: Session, user_id: str) -> str:
    """Remove as referências de ``user_id`` que impediriam a exclusão da conta.

    No PostgreSQL tenta a função ``cleanup_user_references`` instalada por
    ``scripts/init_db.py``; se ela não existir ou falhar, aplica as
    atualizações tabela a tabela. Retorna o caminho utilizado.
    """
    if db.get_bind().dialect.name == "postgresql":
        try:
            db.execute(text("SELECT cleanup_user_references(:target_user_id)"), {"target_user_id": user_id})
            db.commit()
            return CLEANUP_PROCEDURE
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning("cleanup_user_references unavailable, falling back to direct updates: %s", exc)

    try:
        _cleanup_direct(db, user_id)
    except SQLAlchemyError as exc:
        db.rollback()
        raise DependencyError(f"reference cleanup failed for {user_id}: {exc}") from exc
    return CLEANUP_DIRECT


def delete_user(db: Session, actor: CurrentUser, user_id: str) -> None:
    _require(actor, "can_delete_users", "delete_user")
    if user_id == actor.id:
        raise ValidationError("Não é possível excluir a própria conta")
    _get_user_or_404(db, user_id)
    _ensure_not_last_gerente(db, user_id, None)

    method = cleanup_user_references(db, user_id)
    logger.info("references cleaned for user=%s via=%s", user_id, method)

    try:
        identity_service.delete_user(db, user_id)
    except DependencyError:
        # Conta continua existindo, já sem referências; o chamador deve repetir a exclusão.
        logger.error("identity deletion failed after cleanup user=%s", user_id, exc_info=True)
        raise
    logger.info("user deleted id=%s by=%s", user_id, actor.id)
