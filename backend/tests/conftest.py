import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_JSON", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from docportal.database import Base, enable_sqlite_foreign_keys, get_db
from docportal.main import app
from docportal.models.category import Category
from docportal.models.user import UserRole
from docportal.services import identity_service

TEST_DB_URL = "sqlite:///./test_docportal.db"
PASSWORD = "senha123"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
enable_sqlite_foreign_keys(engine)
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    accounts = {
        "gerente": ("gerente@empresa.com", "Gerente"),
        "coordenador": ("coord@empresa.com", "Coordenador"),
        "coordenador2": ("coord2@empresa.com", "Coordenador"),
        "analista": ("analista@empresa.com", "Analista"),
        "analista2": ("analista2@empresa.com", "Analista"),
        "sem_papel": ("semrole@empresa.com", None),
    }
    users = {}
    for key, (email, role) in accounts.items():
        user = identity_service.create_user(db, email, PASSWORD)
        if role:
            db.add(UserRole(user_id=user.id, role=role))
        users[key] = user
    db.commit()
    for user in users.values():
        db.refresh(user)
    return users


@pytest.fixture
def seed_category(db):
    category = Category(name="Procedimentos", description="POPs", icon="clipboard")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def get_token(client, email: str) -> str:
    resp = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, email: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, email)}"}


def create_document(client, headers: dict, title: str = "Manual de processos", content: str = "Conteúdo inicial") -> dict:
    resp = client.post("/api/documents", json={"title": title, "content": content}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()
