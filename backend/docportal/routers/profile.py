"""Router do perfil pessoal. Cada usuário lê e altera apenas o próprio perfil."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from docportal.database import get_db
from docportal.middleware.auth_middleware import get_current_user
from docportal.schemas.profile import ProfileOut, ProfileUpdate
from docportal.services import profile_service
from docportal.services.identity_service import CurrentUser

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("", response_model=ProfileOut)
def get_profile(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return profile_service.get_profile(db, current_user)


@router.put("", response_model=ProfileOut)
def update_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return profile_service.update_profile(db, current_user, data)
