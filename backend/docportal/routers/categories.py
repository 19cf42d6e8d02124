from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from docportal.database import get_db
from docportal.middleware.auth_middleware import get_current_user
from docportal.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from docportal.services import category_service
from docportal.services.identity_service import CurrentUser

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=List[CategoryOut])
def list_categories(
    db: Session = Depends(get_db),
    _current_user: CurrentUser = Depends(get_current_user),
):
    return category_service.list_categories(db)


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    data: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return category_service.create_category(db, current_user, data)


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: str,
    data: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return category_service.update_category(db, current_user, category_id, data)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    category_service.delete_category(db, current_user, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
