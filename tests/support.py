"""Shared fixtures: an app on in-memory SQLite plus helpers to seed users and log in."""

import unittest
from typing import Any

from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.database import Database
from app.core.security import hash_password
from app.main import create_app
from app.models import Role, User
from app.schemas.auth import CurrentUser

PREFIX = "/api/v1"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "Test1234!"


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "APP_ENV": "dev",
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": "test-secret",
        "DB_CREATE_TABLES": True,
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_database() -> Database:
    """Fresh in-memory database with all tables created."""
    database = Database("sqlite://")
    database.init(create_tables=True)
    return database


def as_current_user(user: User) -> CurrentUser:
    return CurrentUser(id=user.id, name=user.name, email=user.email, roles=user.role_names)


class ApiTestCase(unittest.TestCase):
    """Runs each test against a fresh app and database, logged in as a super admin."""

    def setUp(self) -> None:
        self.settings = make_settings()
        self.app = create_app(self.settings)
        self.client = TestClient(self.app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)
        self.db = self.app.state.db

        self.superadmin_role = self.create_role("superadmin", ["all"])
        self.admin = self.create_user("Admin", ADMIN_EMAIL, ADMIN_PASSWORD, [self.superadmin_role])
        self.token = self.login(ADMIN_EMAIL, ADMIN_PASSWORD)

    # Direct store helpers (bypass the API, not audited).

    def create_role(self, name: str, permissions: list[str] | None = None) -> Role:
        with self.db.session() as session:
            role = Role(name=name, permissions=permissions or [])
            session.add(role)
            session.commit()
            return role

    def create_user(
        self,
        name: str,
        email: str,
        password: str = "password123",
        roles: list[Role] | None = None,
    ) -> User:
        with self.db.session() as session:
            user = User(name=name, email=email, hashed_password=hash_password(password))
            user.roles = [session.merge(r) for r in roles or []]
            session.add(user)
            session.commit()
            return user

    # HTTP helpers.

    def login(self, email: str, password: str) -> str:
        response = self.client.post(f"{PREFIX}/auth/login", json={"email": email, "password": password})
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["token"]

    def auth_headers(self, token: str | None = None) -> dict[str, str]:
        return {"Authorization": f"Bearer {token or self.token}"}

    def get(self, path: str, **kwargs: Any):
        return self.client.get(f"{PREFIX}{path}", headers=self.auth_headers(), **kwargs)

    def post(self, path: str, json: Any = None):
        return self.client.post(f"{PREFIX}{path}", headers=self.auth_headers(), json=json)

    def put(self, path: str, json: Any = None):
        return self.client.put(f"{PREFIX}{path}", headers=self.auth_headers(), json=json)

    def delete(self, path: str):
        return self.client.delete(f"{PREFIX}{path}", headers=self.auth_headers())
