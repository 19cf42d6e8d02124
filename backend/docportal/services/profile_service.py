"""Perfil pessoal do usuário corrente (nome, idade e apresentação)."""

import logging
from typing import Dict, Optional

from sqlalchemy.orm import Session

from docportal.models.profile import Profile
from docportal.schemas.profile import ProfileUpdate
from docportal.services.identity_service import CurrentUser

logger = logging.getLogger(__name__)


def _to_dict(user: CurrentUser, profile: Optional[Profile]) -> Dict:
    return {
        "user_id": user.id,
        "email": user.email,
        "first_name": profile.first_name if profile else None,
        "last_name": profile.last_name if profile else None,
        "age": profile.age if profile else None,
        "bio": profile.bio if profile else None,
        "updated_at": profile.updated_at if profile else None,
    }


def get_profile(db: Session, user: CurrentUser) -> Dict:
    profile = db.query(Profile).filter(Profile.user_id == user.id).first()
    return _to_dict(user, profile)


def update_profile(db: Session, user: CurrentUser, data: ProfileUpdate) -> Dict:
    """Substitui todos os campos do perfil; a linha é criada na primeira gravação."""
    profile = db.query(Profile).filter(Profile.user_id == user.id).first()
    if not profile:
        profile = Profile(user_id=user.id)
        db.add(profile)
    for key, value in data.model_dump().items():
        setattr(profile, key, value)
    db.commit()
    db.refresh(profile)
    logger.info("profile updated user=%s", user.id)
    return _to_dict(user, profile)
