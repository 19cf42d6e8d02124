"""Administração de usuários: permissões, troca de papel e exclusão em duas fases."""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from docportal.exceptions import DependencyError, ValidationError
from docportal.models.document import Document
from docportal.models.document_history import DocumentHistory
from docportal.models.user import AuthUser, UserRole
from docportal.schemas.user import AdminUserUpdate
from docportal.services import identity_service, user_service
from docportal.services.identity_service import CurrentUser
from tests.conftest import PASSWORD, auth_headers, create_document

GERENTE = "gerente@empresa.com"
COORD = "coord@empresa.com"
ANALISTA = "analista@empresa.com"


def test_list_users_gerente_success(client, seed_users):
    resp = client.get("/api/admin/users", headers=auth_headers(client, GERENTE))
    assert resp.status_code == 200
    users = resp.json()["users"]
    assert len(users) == 6
    by_email = {u["email"]: u for u in users}
    assert by_email[COORD]["role"] == "Coordenador"
    assert by_email["semrole@empresa.com"]["role"] is None
    assert by_email["semrole@empresa.com"]["role_id"] is None


def test_admin_list_forbidden_for_coordenador(client, seed_users):
    resp = client.get("/api/admin/users", headers=auth_headers(client, COORD))
    assert resp.status_code == 403


def test_directory_is_read_only_for_coordenador(client, seed_users):
    coord = auth_headers(client, COORD)
    assert client.get("/api/users", headers=coord).status_code == 200
    assert client.get("/api/users", headers=auth_headers(client, ANALISTA)).status_code == 403

    resp = client.put(
        f"/api/admin/users/{seed_users['analista'].id}",
        json={"role": "Coordenador"},
        headers=coord,
    )
    assert resp.status_code == 403


def test_create_user_gerente_success(client, db, seed_users):
    headers = auth_headers(client, GERENTE)
    resp = client.post(
        "/api/admin/users",
        headers=headers,
        json={"email": "novo@empresa.com", "password": "segredo1", "role": "Analista"},
    )
    assert resp.status_code == 201, resp.text
    new_id = resp.json()["id"]

    role_row = db.query(UserRole).filter(UserRole.user_id == new_id).first()
    assert role_row.role == "Analista"
    assert role_row.assigned_by == seed_users["gerente"].id
    assert db.query(AuthUser).filter(AuthUser.id == new_id).first().email_confirmed is True

    login = client.post("/api/auth/login", json={"email": "novo@empresa.com", "password": "segredo1"})
    assert login.status_code == 200


def test_create_user_duplicate_email_conflict(client, seed_users):
    resp = client.post(
        "/api/admin/users",
        headers=auth_headers(client, GERENTE),
        json={"email": ANALISTA, "password": "segredo1", "role": "Analista"},
    )
    assert resp.status_code == 409


def test_create_user_payload_validation(client, seed_users):
    headers = auth_headers(client, GERENTE)
    bad_role = client.post(
        "/api/admin/users",
        headers=headers,
        json={"email": "x@empresa.com", "password": "segredo1", "role": "Diretor"},
    )
    assert bad_role.status_code == 400
    assert bad_role.json()["code"] == "validation_error"

    short_password = client.post(
        "/api/admin/users",
        headers=headers,
        json={"email": "x@empresa.com", "password": "123", "role": "Analista"},
    )
    assert short_password.status_code == 400


def test_create_user_forbidden_for_coordenador(client, seed_users):
    resp = client.post(
        "/api/admin/users",
        headers=auth_headers(client, COORD),
        json={"email": "x@empresa.com", "password": "segredo1", "role": "Analista"},
    )
    assert resp.status_code == 403


def test_import_users_mixed_batch(client, db, seed_users):
    resp = client.post(
        "/api/admin/users/import",
        headers=auth_headers(client, GERENTE),
        json={"users": [
            {"email": "lote1@empresa.com", "password": "segredo1", "role": "Analista"},
            {"email": ANALISTA, "password": "segredo1", "role": "Analista"},
            {"email": "lote2@empresa.com", "password": "curta", "role": "Coordenador"},
            {"email": "lote3@empresa.com", "password": "segredo1", "role": "Diretor"},
        ]},
    )
    assert resp.status_code == 200, resp.text
    result = resp.json()
    assert result["success"] == 1
    assert result["failed"] == 3
    assert result["errors"][0].startswith(f"{ANALISTA}: ")
    assert result["errors"][1].startswith("lote2@empresa.com: ")
    assert result["errors"][2].startswith("lote3@empresa.com: ")

    created = db.query(AuthUser).filter(AuthUser.email == "lote1@empresa.com").first()
    assert identity_service.get_user_role(db, created.id) == "Analista"
    assert db.query(AuthUser).filter(AuthUser.email.in_(["lote2@empresa.com", "lote3@empresa.com"])).count() == 0
    assert db.query(AuthUser).count() == 7

    login = client.post("/api/auth/login", json={"email": "lote1@empresa.com", "password": "segredo1"})
    assert login.status_code == 200


def test_import_users_forbidden_for_coordenador(client, seed_users):
    resp = client.post(
        "/api/admin/users/import",
        headers=auth_headers(client, COORD),
        json={"users": [{"email": "lote1@empresa.com", "password": "segredo1", "role": "Analista"}]},
    )
    assert resp.status_code == 403


def test_import_users_role_failure_rolls_back_row(db, seed_users, monkeypatch):
    actor = CurrentUser(id=seed_users["gerente"].id, email=GERENTE, role="Gerente")

    def broken_upsert(*args, **kwargs):
        raise SQLAlchemyError("user_roles indisponível")

    monkeypatch.setattr(user_service, "_upsert_role", broken_upsert)
    result = user_service.import_users(
        db, actor, [{"email": "lote1@empresa.com", "password": "segredo1", "role": "Analista"}],
    )
    assert result["success"] == 0
    assert result["failed"] == 1
    assert db.query(AuthUser).filter(AuthUser.email == "lote1@empresa.com").first() is None


def test_update_role_upserts_single_row(client, db, seed_users):
    headers = auth_headers(client, GERENTE)
    target = seed_users["sem_papel"].id

    first = client.patch(f"/api/admin/users/{target}/role", json={"role": "Analista"}, headers=headers)
    assert first.status_code == 200
    assert first.json() == {"success": True}
    second = client.patch(f"/api/admin/users/{target}/role", json={"role": "Coordenador"}, headers=headers)
    assert second.status_code == 200

    rows = db.query(UserRole).filter(UserRole.user_id == target).all()
    assert len(rows) == 1
    assert rows[0].role == "Coordenador"
    assert rows[0].assigned_by == seed_users["gerente"].id


def test_update_role_unknown_user(client, seed_users):
    resp = client.patch("/api/admin/users/nao-existe/role", json={"role": "Analista"}, headers=auth_headers(client, GERENTE))
    assert resp.status_code == 404


def test_gerente_cannot_demote_self(client, seed_users):
    resp = client.patch(
        f"/api/admin/users/{seed_users['gerente'].id}/role",
        json={"role": "Analista"},
        headers=auth_headers(client, GERENTE),
    )
    assert resp.status_code == 400


def test_rejected_self_demotion_keeps_email(client, seed_users):
    resp = client.put(
        f"/api/admin/users/{seed_users['gerente'].id}",
        json={"email": "novo@empresa.com", "role": "Analista"},
        headers=auth_headers(client, GERENTE),
    )
    assert resp.status_code == 400

    assert client.post("/api/auth/login", json={"email": "novo@empresa.com", "password": PASSWORD}).status_code == 401
    me = client.get("/api/auth/me", headers=auth_headers(client, GERENTE)).json()
    assert me["email"] == GERENTE
    assert me["role"] == "Gerente"


def test_rejected_last_gerente_demotion_keeps_email(db, seed_users):
    actor = CurrentUser(id=seed_users["coordenador"].id, email=COORD, role="Gerente")
    with pytest.raises(ValidationError):
        user_service.update_user(
            db, actor, seed_users["gerente"].id,
            AdminUserUpdate(email="outro@empresa.com", role="Coordenador"),
        )
    db.expire_all()
    assert identity_service.get_user(db, seed_users["gerente"].id).email == GERENTE
    assert identity_service.get_user_role(db, seed_users["gerente"].id) == "Gerente"


def test_update_user_email_and_role(client, seed_users):
    headers = auth_headers(client, GERENTE)
    resp = client.put(
        f"/api/admin/users/{seed_users['analista'].id}",
        json={"email": "analista.novo@empresa.com", "role": "Coordenador"},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["email"] == "analista.novo@empresa.com"
    assert data["role"] == "Coordenador"

    login = client.post("/api/auth/login", json={"email": "analista.novo@empresa.com", "password": PASSWORD})
    assert login.status_code == 200


def test_update_user_email_conflict(client, seed_users):
    resp = client.put(
        f"/api/admin/users/{seed_users['analista'].id}",
        json={"email": COORD},
        headers=auth_headers(client, GERENTE),
    )
    assert resp.status_code == 409


def test_delete_self_forbidden(client, seed_users):
    resp = client.delete(f"/api/admin/users/{seed_users['gerente'].id}", headers=auth_headers(client, GERENTE))
    assert resp.status_code == 400


def test_delete_user_forbidden_for_coordenador(client, seed_users):
    resp = client.delete(f"/api/admin/users/{seed_users['analista'].id}", headers=auth_headers(client, COORD))
    assert resp.status_code == 403


def test_delete_user_cleans_references(client, db, seed_users):
    gerente = auth_headers(client, GERENTE)
    coord_id = seed_users["coordenador"].id

    # Coordenador aprova o documento de um Analista e atribui um papel.
    analista = auth_headers(client, ANALISTA)
    doc = create_document(client, analista)
    client.post(f"/api/documents/{doc['id']}/submit", headers=analista)
    assert client.post(f"/api/documents/{doc['id']}/approve", headers=auth_headers(client, COORD)).status_code == 200
    own_doc = create_document(client, auth_headers(client, COORD), title="Do coordenador")

    role_row = db.query(UserRole).filter(UserRole.user_id == seed_users["sem_papel"].id).first()
    assert role_row is None
    db.add(UserRole(user_id=seed_users["sem_papel"].id, role="Analista", assigned_by=coord_id))
    db.commit()

    resp = client.delete(f"/api/admin/users/{coord_id}", headers=gerente)
    assert resp.status_code == 204

    db.expire_all()
    assert db.query(AuthUser).filter(AuthUser.id == coord_id).first() is None
    assert db.query(UserRole).filter(UserRole.user_id == coord_id).first() is None

    approved = db.query(Document).filter(Document.id == doc["id"]).first()
    assert approved.status == "Aprovado"
    assert approved.approved_by is None
    assert approved.approved_at is None

    assert db.query(DocumentHistory).filter(DocumentHistory.changed_by == coord_id).count() == 0
    assert db.query(Document).filter(Document.id == own_doc["id"]).first() is None

    reassigned = db.query(UserRole).filter(UserRole.user_id == seed_users["sem_papel"].id).first()
    assert reassigned.assigned_by is None

    listing = client.get("/api/admin/users", headers=gerente).json()["users"]
    assert COORD not in {u["email"] for u in listing}


def test_cleanup_uses_direct_updates_on_sqlite(db, seed_users):
    method = user_service.cleanup_user_references(db, seed_users["analista"].id)
    assert method == user_service.CLEANUP_DIRECT


def test_identity_deletion_failure_leaves_clean_account(client, db, seed_users, monkeypatch):
    def failing_delete(_db, user_id):
        raise DependencyError(f"identity provider unavailable for {user_id}")

    monkeypatch.setattr(identity_service, "delete_user", failing_delete)

    target = seed_users["coordenador"].id
    analista = auth_headers(client, ANALISTA)
    doc = create_document(client, analista)
    client.post(f"/api/documents/{doc['id']}/submit", headers=analista)
    client.post(f"/api/documents/{doc['id']}/approve", headers=auth_headers(client, COORD))

    resp = client.delete(f"/api/admin/users/{target}", headers=auth_headers(client, GERENTE))
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Erro interno do servidor", "code": "dependency_error"}

    db.expire_all()
    assert db.query(AuthUser).filter(AuthUser.id == target).first() is not None
    assert db.query(Document).filter(Document.id == doc["id"]).first().approved_by is None

    monkeypatch.undo()
    retry = client.delete(f"/api/admin/users/{target}", headers=auth_headers(client, GERENTE))
    assert retry.status_code == 204


def test_last_gerente_cannot_be_removed(db, seed_users):
    # Um segundo Gerente tenta excluir o único outro Gerente depois de ser rebaixado.
    other = identity_service.create_user(db, "gerente2@empresa.com", PASSWORD)
    db.add(UserRole(user_id=other.id, role="Gerente"))
    db.commit()
    actor = CurrentUser(id=other.id, email=other.email, role="Gerente")

    db.query(UserRole).filter(UserRole.user_id == other.id).update({UserRole.role: "Coordenador"})
    db.commit()

    with pytest.raises(ValidationError):
        user_service.delete_user(db, actor, seed_users["gerente"].id)
