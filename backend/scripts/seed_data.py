"""Seed the database with the bootstrap Gerente account and a few categories."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from docportal.config import settings
from docportal.database import SessionLocal, engine, Base
import docportal.models  # noqa: F401

from docportal.models.category import Category
from docportal.models.user import AuthUser, UserRole
from docportal.services import identity_service
from docportal.utils.permissions import GERENTE

CATEGORIES = [
    ("Procedimentos", "Procedimentos operacionais padrão", "clipboard"),
    ("Políticas", "Políticas internas", "shield"),
    ("Relatórios", "Relatórios periódicos", "bar-chart"),
]


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(AuthUser).count() > 0:
            print("Database already seeded. Skipping.")
            return

        admin = identity_service.create_user(
            db,
            settings.BOOTSTRAP_ADMIN_EMAIL,
            settings.BOOTSTRAP_ADMIN_PASSWORD,
            auto_confirm=True,
        )
        db.add(UserRole(user_id=admin.id, role=GERENTE, assigned_by=None))

        for name, description, icon in CATEGORIES:
            db.add(Category(name=name, description=description, icon=icon))

        db.commit()
        print(f"Seeded Gerente account {admin.email} and {len(CATEGORIES)} categories.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
