import logging
from typing import List

from sqlalchemy.orm import Session

from docportal.exceptions import AuthorizationDenied, ConflictError, NotFoundError, ValidationError
from docportal.models.category import Category
from docportal.schemas.category import CategoryCreate, CategoryUpdate
from docportal.services.identity_service import CurrentUser

logger = logging.getLogger(__name__)


def _require_manage(actor: CurrentUser) -> None:
    if not actor.permissions.can_manage_categories:
        logger.info("denied action=manage_categories user=%s role=%s", actor.id, actor.role)
        raise AuthorizationDenied("Você não tem permissão para gerenciar categorias", action="manage_categories")


def _get_or_404(db: Session, category_id: str) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFoundError("Categoria não encontrada")
    return category


def _ensure_unique_name(db: Session, name: str, exclude_id: str | None = None) -> None:
    q = db.query(Category).filter(Category.name == name)
    if exclude_id:
        q = q.filter(Category.id != exclude_id)
    if q.first():
        raise ConflictError("Já existe uma categoria com este nome")


def _validate_parent(db: Session, parent_id, category_id: str | None = None) -> str | None:
    if parent_id is None:
        return None
    parent_id = str(parent_id)
    if category_id and parent_id == category_id:
        raise ValidationError("Uma categoria não pode ser pai de si mesma", field="parent_id")
    if not db.query(Category.id).filter(Category.id == parent_id).first():
        raise ValidationError("Categoria pai inválida", field="parent_id")

    # Sobe a cadeia de ancestrais; encontrar a própria categoria fecha um ciclo.
    seen = set()
    ancestor = parent_id
    while ancestor and ancestor not in seen:
        if ancestor == category_id:
            raise ValidationError("A hierarquia de categorias não pode formar um ciclo", field="parent_id")
        seen.add(ancestor)
        row = db.query(Category.parent_id).filter(Category.id == ancestor).first()
        ancestor = row[0] if row else None
    return parent_id


def list_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.name).all()


def create_category(db: Session, actor: CurrentUser, data: CategoryCreate) -> Category:
    _require_manage(actor)
    _ensure_unique_name(db, data.name)
    category = Category(
        name=data.name,
        description=data.description,
        icon=data.icon,
        parent_id=_validate_parent(db, data.parent_id),
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def update_category(db: Session, actor: CurrentUser, category_id: str, data: CategoryUpdate) -> Category:
    _require_manage(actor)
    category = _get_or_404(db, category_id)
    payload = data.model_dump(exclude_unset=True)
    if payload.get("name"):
        _ensure_unique_name(db, payload["name"], exclude_id=category.id)
    if "parent_id" in payload:
        payload["parent_id"] = _validate_parent(db, payload["parent_id"], category.id)
    for key, value in payload.items():
        if value is None and key != "parent_id":
            continue
        setattr(category, key, value)
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, actor: CurrentUser, category_id: str) -> None:
    _require_manage(actor)
    category = _get_or_404(db, category_id)
    # Documentos e subcategorias ficam sem categoria (ON DELETE SET NULL).
    db.delete(category)
    db.commit()
