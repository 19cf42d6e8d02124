"""Provedor de identidade local: credenciais com bcrypt, tokens JWT e a API administrativa de contas."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from docportal.config import settings
from docportal.exceptions import AuthenticationError, ConflictError, DependencyError, NotFoundError
from docportal.models.user import AuthUser, UserRole
from docportal.utils.permissions import Permissions, get_user_permissions, is_valid_role

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: str
    role: Optional[str] = None

    @property
    def permissions(self) -> Permissions:
        return get_user_permissions(self.role)


def _normalize_email(email: str) -> str:
    return str(email or "").strip().lower()


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        return False


def create_access_token(user_id: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def resolve_user_id(token: str) -> str:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise AuthenticationError("Token inválido ou expirado")
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Payload do token inválido")
    return str(user_id)


def get_user(db: Session, user_id: str) -> Optional[AuthUser]:
    return db.query(AuthUser).filter(AuthUser.id == user_id).first()


def get_user_role(db: Session, user_id: str) -> Optional[str]:
    row = db.query(UserRole.role).filter(UserRole.user_id == user_id).first()
    if row is None:
        return None
    role = row[0]
    if not is_valid_role(role):
        logger.warning("ignoring unknown role value for user %s: %r", user_id, role)
        return None
    return role


def authenticate(db: Session, email: str, password: str) -> AuthUser:
    user = db.query(AuthUser).filter(AuthUser.email == _normalize_email(email)).first()
    if not user or not verify_password(password, user.password_hash):
        raise AuthenticationError("E-mail ou senha inválidos")
    return user


def create_user(db: Session, email: str, password: str, auto_confirm: bool = True, commit: bool = True) -> AuthUser:
    normalized = _normalize_email(email)
    if db.query(AuthUser).filter(AuthUser.email == normalized).first():
        raise ConflictError("Já existe um usuário com este e-mail")
    user = AuthUser(
        email=normalized,
        password_hash=hash_password(password),
        email_confirmed=auto_confirm,
    )
    db.add(user)
    if not commit:
        db.flush()
        return user
    db.commit()
    db.refresh(user)
    return user


def update_user_email(db: Session, user_id: str, email: str, commit: bool = True) -> AuthUser:
    user = get_user(db, user_id)
    if not user:
        raise NotFoundError("Usuário não encontrado")
    normalized = _normalize_email(email)
    if normalized == user.email:
        return user
    taken = db.query(AuthUser).filter(AuthUser.email == normalized, AuthUser.id != user_id).first()
    if taken:
        raise ConflictError("Este e-mail já está em uso")
    user.email = normalized
    if commit:
        db.commit()
        db.refresh(user)
    return user


def delete_user(db: Session, user_id: str) -> None:
    user = get_user(db, user_id)
    if not user:
        raise NotFoundError("Usuário não encontrado")
    try:
        db.delete(user)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise DependencyError(f"identity deletion failed for {user_id}: {exc}") from exc


def list_users(db: Session) -> List[AuthUser]:
    return db.query(AuthUser).order_by(AuthUser.created_at, AuthUser.email).all()
