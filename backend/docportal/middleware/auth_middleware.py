"""Dependências FastAPI de autenticação: resolve o usuário e o papel a cada requisição."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from docportal.database import get_db
from docportal.exceptions import AuthenticationError, AuthorizationDenied
from docportal.services import identity_service
from docportal.services.identity_service import CurrentUser

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> CurrentUser:
    if credentials is None:
        raise AuthenticationError("Token de acesso ausente")
    user_id = identity_service.resolve_user_id(credentials.credentials)

    user = identity_service.get_user(db, user_id)
    if not user:
        raise AuthenticationError("Usuário não encontrado")
    # O papel nunca vem do cliente: é relido do banco em toda requisição.
    role = identity_service.get_user_role(db, user.id)
    return CurrentUser(id=user.id, email=user.email, role=role)


def require_permission(flag: str):
    def checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not getattr(current_user.permissions, flag):
            raise AuthorizationDenied("Permissão insuficiente", action=flag)
        return current_user
    return checker
