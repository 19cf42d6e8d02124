"""Router de autenticação: login, logout e dados do usuário corrente."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from docportal.database import get_db
from docportal.schemas.user import LoginRequest, MeOut, TokenResponse
from docportal.services import identity_service
from docportal.middleware.auth_middleware import get_current_user
from docportal.services.identity_service import CurrentUser

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _me(current_user: CurrentUser) -> MeOut:
    return MeOut(
        id=current_user.id,
        email=current_user.email,
        role=current_user.role,
        permissions=current_user.permissions.as_dict(),
    )


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = identity_service.authenticate(db, request.email, request.password)
    token = identity_service.create_access_token(user.id)
    role = identity_service.get_user_role(db, user.id)
    return TokenResponse(access_token=token, user=_me(CurrentUser(id=user.id, email=user.email, role=role)))


@router.post("/logout")
def logout(current_user: CurrentUser = Depends(get_current_user)):
    return {"message": "Sessão encerrada."}


@router.get("/me", response_model=MeOut)
def me(current_user: CurrentUser = Depends(get_current_user)):
    return _me(current_user)
