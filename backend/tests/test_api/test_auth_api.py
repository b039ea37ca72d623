"""
API tests for /registro, /login, /logout and /perfil
"""
import pytest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from panaderia.api.auth import get_user_repository, pwd_context
from panaderia.core.auth import create_access_token
from panaderia.main import app


class FakeUserRepository:
    """Users kept in a dict keyed by username"""

    def __init__(self):
        self.users = {}

    def find_by_username(self, username):
        return self.users.get(username)

    def create(self, username, password_hash, is_admin=False):
        if username in self.users:
            return None
        user_id = len(self.users) + 1
        self.users[username] = {"id": user_id, "username": username, "password": password_hash, "admin": is_admin}
        return user_id


@pytest.fixture
def users():
    return FakeUserRepository()


@pytest.fixture
def client(users):
    app.dependency_overrides[get_user_repository] = lambda: users
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_register_then_login(client, users):
    response = client.post("/registro", json={"username": "ana", "password": "secreta1"})
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert users.users["ana"]["password"] != "secreta1"
    assert users.users["ana"]["admin"] is False

    response = client.post("/login", json={"username": "ana", "password": "secreta1"})
    assert response.status_code == 200
    body = response.json()
    assert body["isAdmin"] is False
    assert body["token_type"] == "bearer"

    response = client.get("/perfil", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert response.status_code == 200
    assert response.json() == {"id": 1, "usuario": "ana", "isAdmin": False}


def test_register_requires_both_fields(client):
    response = client.post("/registro", json={"username": "ana"})

    assert response.status_code == 400
    assert response.json() == {"error": "Usuario y contraseña son requeridos"}


def test_register_rejects_short_password(client):
    response = client.post("/registro", json={"username": "ana", "password": "123"})

    assert response.status_code == 400


def test_register_rejects_existing_user(client, users):
    users.create("ana", pwd_context.hash("secreta1"))

    response = client.post("/registro", json={"username": "ana", "password": "otra-clave"})

    assert response.status_code == 400
    assert response.json() == {"error": "El usuario ya existe"}


def test_login_wrong_password_is_401(client, users):
    users.create("ana", pwd_context.hash("secreta1"))

    response = client.post("/login", json={"username": "ana", "password": "incorrecta"})

    assert response.status_code == 401
    assert response.json() == {"error": "Usuario o contraseña incorrecta"}


def test_login_unknown_user_is_401(client):
    response = client.post("/login", json={"username": "nadie", "password": "secreta1"})

    assert response.status_code == 401


def test_admin_flag_in_token(client, users):
    users.create("jefa", pwd_context.hash("secreta1"), is_admin=True)

    body = client.post("/login", json={"username": "jefa", "password": "secreta1"}).json()

    assert body["isAdmin"] is True


def test_profile_requires_token(client):
    response = client.get("/perfil")

    assert response.status_code == 401


def test_expired_token_is_401(client):
    token = create_access_token(1, "ana", False, expires_minutes=-1)

    response = client.get("/perfil", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json() == {"error": "La sesión ha expirado"}


def test_logout(client):
    response = client.post("/logout")

    assert response.status_code == 200
    assert response.json() == {"mensaje": "Has cerrado sesión"}


def test_health_reports_database_status():
    app.state.db = MagicMock()
    app.state.db.ping.return_value = 1.5

    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["database"]["latency_ms"] == 1.5
