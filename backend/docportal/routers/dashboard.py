"""Router de indicadores do painel inicial."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from docportal.database import get_db
from docportal.middleware.auth_middleware import get_current_user
from docportal.schemas.document import DashboardStats
from docportal.services import document_service
from docportal.services.identity_service import CurrentUser

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return document_service.fetch_dashboard_stats(db, current_user)
