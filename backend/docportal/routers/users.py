"""Router de usuários: diretório somente leitura e administração de contas."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from docportal.database import get_db
from docportal.middleware.auth_middleware import require_permission
from docportal.schemas.user import (
    AdminUserCreate,
    AdminUserCreated,
    AdminUserList,
    AdminUserOut,
    AdminUserUpdate,
    RoleUpdate,
    SuccessOut,
    UserImportRequest,
    UserImportResult,
)
from docportal.services import user_service
from docportal.services.identity_service import CurrentUser

router = APIRouter(tags=["users"])


@router.get("/api/users", response_model=AdminUserList)
def list_user_directory(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_permission("can_view_users")),
):
    return AdminUserList(users=user_service.list_user_directory(db, current_user))


@router.get("/api/admin/users", response_model=AdminUserList)
def list_users(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_permission("can_manage_users")),
):
    return AdminUserList(users=user_service.list_users(db, current_user))


@router.post("/api/admin/users", response_model=AdminUserCreated, status_code=status.HTTP_201_CREATED)
def create_user(
    data: AdminUserCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_permission("can_manage_users")),
):
    user = user_service.create_user(db, current_user, data)
    return AdminUserCreated(id=user.id)


@router.post("/api/admin/users/import", response_model=UserImportResult)
def import_users(
    data: UserImportRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_permission("can_manage_users")),
):
    rows = [row.model_dump() for row in data.users]
    return user_service.import_users(db, current_user, rows)


@router.patch("/api/admin/users/{user_id}/role", response_model=SuccessOut)
def update_user_role(
    user_id: str,
    data: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_permission("can_manage_users")),
):
    user_service.update_user_role(db, current_user, user_id, data.role)
    return SuccessOut()


@router.put("/api/admin/users/{user_id}", response_model=AdminUserOut)
def update_user(
    user_id: str,
    data: AdminUserUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_permission("can_edit_users")),
):
    return user_service.update_user(db, current_user, user_id, data)


@router.delete("/api/admin/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_permission("can_delete_users")),
):
    user_service.delete_user(db, current_user, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
