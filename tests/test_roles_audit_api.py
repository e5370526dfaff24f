"""API tests for /superadmin/roles and /superadmin/audit-logs, plus audit atomicity."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from app.models import AuditLog, Role, User
from app.services import roles as role_service
from app.services import users as user_service
from app.services.errors import ConflictError
from tests.support import ApiTestCase, as_current_user, make_database


class TestRoles(ApiTestCase):
    def test_list_roles_sorted_by_name(self) -> None:
        self.create_role("zeta")
        self.create_role("alpha", ["read"])
        response = self.get("/superadmin/roles")
        self.assertEqual(response.status_code, 200)
        roles = response.json()["roles"]
        self.assertEqual([r["name"] for r in roles], ["alpha", "superadmin", "zeta"])
        self.assertEqual(roles[0]["permissions"], ["read"])
        self.assertIn("createdAt", roles[0])

    def test_create_role(self) -> None:
        response = self.post(
            "/superadmin/roles", json={"name": "test-role", "permissions": ["read", "write", "read"]}
        )
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["message"], "Role created successfully")
        self.assertEqual(body["role"]["name"], "test-role")
        self.assertEqual(body["role"]["permissions"], ["read", "write"])

    def test_create_role_without_permissions(self) -> None:
        response = self.post("/superadmin/roles", json={"name": "empty"})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["role"]["permissions"], [])

    def test_create_role_requires_name(self) -> None:
        self.assertEqual(self.post("/superadmin/roles", json={"permissions": []}).status_code, 400)
        self.assertEqual(self.post("/superadmin/roles", json={"name": ""}).status_code, 400)

    def test_duplicate_role_name_is_400(self) -> None:
        response = self.post("/superadmin/roles", json={"name": "superadmin"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Role already exists"})

    def test_update_role_renames_and_replaces_permissions(self) -> None:
        role = self.create_role("ops", ["read"])
        response = self.put(
            f"/superadmin/roles/{role.id}", json={"name": "operations", "permissions": ["deploy"]}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["role"]["name"], "operations")
        self.assertEqual(response.json()["role"]["permissions"], ["deploy"])

    def test_update_role_keeps_omitted_fields(self) -> None:
        role = self.create_role("ops", ["read"])
        response = self.put(f"/superadmin/roles/{role.id}", json={"name": "ops2"})
        self.assertEqual(response.json()["role"]["permissions"], ["read"])

    def test_update_missing_role_is_404(self) -> None:
        response = self.put("/superadmin/roles/9999", json={"name": "x"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Role not found"})

    def test_rename_onto_existing_name_is_400(self) -> None:
        role = self.create_role("ops")
        response = self.put(f"/superadmin/roles/{role.id}", json={"name": "superadmin"})
        self.assertEqual(response.status_code, 400)


class TestAuditTrail(ApiTestCase):
    """Every successful mutation appends exactly one audit row with its action tag."""

    def test_one_row_per_mutation(self) -> None:
        role_id = self.post("/superadmin/roles", json={"name": "ops"}).json()["role"]["id"]
        self.put(f"/superadmin/roles/{role_id}", json={"permissions": ["read"]})
        user_id = self.post(
            "/superadmin/users", json={"name": "A", "email": "a@x.com", "password": "pw123456"}
        ).json()["user"]["id"]
        self.put(f"/superadmin/users/{user_id}", json={"name": "B"})
        self.post("/superadmin/assign-role", json={"userId": user_id, "roleId": role_id})
        self.delete(f"/superadmin/users/{user_id}")

        response = self.get("/superadmin/audit-logs")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(
            [(r["action"], r["targetType"], r["targetId"]) for r in body["auditLogs"]],
            [
                ("DELETE_USER", "User", user_id),
                ("ASSIGN_ROLE", "User", user_id),
                ("UPDATE_USER", "User", user_id),
                ("CREATE_USER", "User", user_id),
                ("UPDATE_ROLE", "Role", role_id),
                ("CREATE_ROLE", "Role", role_id),
            ],
        )
        self.assertEqual(body["pagination"], {"total": 6, "page": 1, "limit": 20, "totalPages": 1})
        first = body["auditLogs"][0]
        self.assertEqual(first["actorUserId"], self.admin.id)
        self.assertEqual(first["actor"], {"id": self.admin.id, "name": "Admin", "email": self.admin.email})

    def test_reads_are_not_audited(self) -> None:
        self.get("/superadmin/users")
        self.get("/superadmin/roles")
        self.get("/superadmin/analytics/summary")
        self.assertEqual(self.get("/superadmin/audit-logs").json()["auditLogs"], [])

    def test_filters(self) -> None:
        other_admin = self.create_user("Other", "other@x.com", "password123", [self.superadmin_role])
        other_token = self.login("other@x.com", "password123")

        self.post("/superadmin/roles", json={"name": "mine"})
        self.client.post(
            "/api/v1/superadmin/roles",
            headers=self.auth_headers(other_token),
            json={"name": "theirs"},
        )
        self.post("/superadmin/users", json={"name": "A", "email": "a@x.com", "password": "pw123456"})

        by_actor = self.get("/superadmin/audit-logs", params={"userId": other_admin.id}).json()
        self.assertEqual([r["details"]["name"] for r in by_actor["auditLogs"]], ["theirs"])

        by_action = self.get("/superadmin/audit-logs", params={"action": "CREATE_USER"}).json()
        self.assertEqual(len(by_action["auditLogs"]), 1)

        future = (datetime.now(UTC) + timedelta(days=1)).isoformat()
        past = (datetime.now(UTC) - timedelta(days=1)).isoformat()
        self.assertEqual(
            self.get("/superadmin/audit-logs", params={"startDate": future}).json()["auditLogs"], []
        )
        in_range = self.get(
            "/superadmin/audit-logs", params={"startDate": past, "endDate": future}
        ).json()
        self.assertEqual(in_range["pagination"]["total"], 3)
        self.assertEqual(
            self.get("/superadmin/audit-logs", params={"endDate": past}).json()["auditLogs"], []
        )

    def test_pagination(self) -> None:
        for name in ("r1", "r2", "r3"):
            self.post("/superadmin/roles", json={"name": name})
        body = self.get("/superadmin/audit-logs", params={"limit": 2, "page": 2}).json()
        self.assertEqual([r["details"]["name"] for r in body["auditLogs"]], ["r1"])
        self.assertEqual(body["pagination"]["totalPages"], 2)

    def test_huge_page_is_empty(self) -> None:
        self.post("/superadmin/roles", json={"name": "r1"})
        response = self.get("/superadmin/audit-logs", params={"limit": 100, "page": 10**19})
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["auditLogs"], [])
        self.assertEqual(response.json()["pagination"]["total"], 1)


class TestAuditAtomicity(unittest.TestCase):
    """A failed audit write rolls back the mutation it belongs to."""

    def setUp(self) -> None:
        self.database = make_database()
        self.addCleanup(self.database.dispose)
        with self.database.session() as db:
            role = Role(name="superadmin", permissions=["all"])
            admin = User(name="Admin", email="admin@x.com", hashed_password="x", roles=[role])
            target = User(name="Target", email="target@x.com", hashed_password="x")
            db.add_all([admin, target])
            db.commit()
            self.actor = as_current_user(admin)
            self.target_id = target.id

    def test_delete_is_rolled_back_when_audit_fails(self) -> None:
        db = self.database.session()
        try:
            with patch.object(
                user_service.audit, "record_audit", side_effect=RuntimeError("audit store down")
            ):
                with self.assertRaises(RuntimeError):
                    user_service.delete_user(db, self.actor, self.target_id)
        finally:
            db.close()

        with self.database.session() as db:
            self.assertIsNotNone(db.get(User, self.target_id))
            self.assertEqual(db.query(AuditLog).count(), 0)

    def test_update_is_rolled_back_when_audit_fails(self) -> None:
        db = self.database.session()
        try:
            with patch.object(
                user_service.audit, "record_audit", side_effect=RuntimeError("audit store down")
            ):
                with self.assertRaises(RuntimeError):
                    user_service.update_user(db, self.actor, self.target_id, name="Changed")
        finally:
            db.close()

        with self.database.session() as db:
            self.assertEqual(db.get(User, self.target_id).name, "Target")


class TestUniqueConstraintConflicts(unittest.TestCase):
    """A duplicate that slips past the pre-check is still reported as a conflict."""

    def setUp(self) -> None:
        self.database = make_database()
        self.addCleanup(self.database.dispose)
        with self.database.session() as db:
            role = Role(name="superadmin", permissions=["all"])
            ops = Role(name="ops", permissions=[])
            admin = User(name="Admin", email="admin@x.com", hashed_password="x", roles=[role])
            target = User(name="Target", email="target@x.com", hashed_password="x")
            db.add_all([admin, target, ops])
            db.commit()
            self.actor = as_current_user(admin)
            self.target_id = target.id
            self.ops_id = ops.id

    def assert_counts(self, users: int, roles: int) -> None:
        with self.database.session() as db:
            self.assertEqual(db.query(User).count(), users)
            self.assertEqual(db.query(Role).count(), roles)
            self.assertEqual(db.query(AuditLog).count(), 0)

    def test_create_user_with_taken_email(self) -> None:
        with self.database.session() as db, patch.object(
            user_service, "_email_taken", return_value=False
        ):
            with self.assertRaises(ConflictError) as ctx:
                user_service.create_user(db, self.actor, "Dup", "target@x.com", "pw123456")
        self.assertEqual(ctx.exception.message, "Email already exists")
        self.assert_counts(users=2, roles=2)

    def test_update_user_onto_taken_email(self) -> None:
        with self.database.session() as db, patch.object(
            user_service, "_email_taken", return_value=False
        ):
            with self.assertRaises(ConflictError):
                user_service.update_user(db, self.actor, self.target_id, email="admin@x.com")
        with self.database.session() as db:
            self.assertEqual(db.get(User, self.target_id).email, "target@x.com")
        self.assert_counts(users=2, roles=2)

    def test_create_role_with_taken_name(self) -> None:
        with self.database.session() as db, patch.object(
            role_service, "_name_taken", return_value=False
        ):
            with self.assertRaises(ConflictError) as ctx:
                role_service.create_role(db, self.actor, "ops")
        self.assertEqual(ctx.exception.message, "Role already exists")
        self.assert_counts(users=2, roles=2)

    def test_rename_role_onto_taken_name(self) -> None:
        with self.database.session() as db, patch.object(
            role_service, "_name_taken", return_value=False
        ):
            with self.assertRaises(ConflictError):
                role_service.update_role(db, self.actor, self.ops_id, name="superadmin")
        with self.database.session() as db:
            self.assertEqual(db.get(Role, self.ops_id).name, "ops")
        self.assert_counts(users=2, roles=2)


if __name__ == "__main__":
    unittest.main()
