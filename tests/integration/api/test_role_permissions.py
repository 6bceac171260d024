"""Integration tests for the role permission administration API."""

from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from sekolah.modules.role_permissions.models import Permission, Role
from sekolah.modules.users.models import User
from tests.helpers import make_rule


pytestmark = pytest.mark.integration

BASE = "/api/v1/role-permissions"


class TestAdminOnly:
    """Administration endpoints are closed to non-administrators."""

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("GET", BASE),
            ("POST", BASE),
            ("DELETE", f"{BASE}/{uuid4()}"),
            ("GET", "/api/v1/roles"),
            ("POST", "/api/v1/roles"),
        ],
    )
    async def test_forbidden_for_non_admin(
        self, client: AsyncClient, auth_headers: dict[str, str], method, path
    ):
        body = {"role_name": "GURU", "resource": "x", "action": "view", "name": "X"}
        response = await client.request(
            method,
            path,
            headers=auth_headers,
            json=body if method == "POST" else None,
        )

        assert response.status_code == 403
        assert response.json()["type"].endswith("/admin_required")

    async def test_unauthenticated(self, client: AsyncClient):
        response = await client.get(BASE)

        assert response.status_code == 401


class TestRolePermissionRoutes:
    """Tests for rule CRUD."""

    async def test_overview(
        self,
        client: AsyncClient,
        db: AsyncSession,
        admin_headers: dict[str, str],
        guru_rules,
    ):
        db.add(Role(name="GURU", description="Guru"))
        db.add(Permission(resource="jurnal", action="view", label="Jurnal Guru"))
        await db.flush()

        response = await client.get(BASE, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert len(data["permissions"]) == len(guru_rules)
        assert data["roles"][0]["name"] == "GURU"
        assert data["roles"][0]["label"] == "Guru"
        assert data["catalog"][0]["category"] == "HALAMAN"

    async def test_create_rule(self, client: AsyncClient, admin_headers: dict[str, str]):
        response = await client.post(
            BASE,
            headers=admin_headers,
            json={"role_name": " guru ", "resource": "nilai", "action": "view"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["role_name"] == "GURU"
        assert data["is_allowed"] is True

    async def test_update_rule(
        self, client: AsyncClient, db: AsyncSession, admin_headers: dict[str, str]
    ):
        rule = await make_rule(db, "GURU", "nilai", "view")

        response = await client.post(
            BASE,
            headers=admin_headers,
            json={
                "role_name": "GURU",
                "resource": "nilai",
                "action": "view",
                "is_allowed": False,
            },
        )

        assert response.status_code == 200
        assert response.json()["id"] == str(rule.id)
        assert response.json()["is_allowed"] is False

    @pytest.mark.parametrize(
        "body",
        [
            {"resource": "nilai", "action": "view"},
            {"role_name": "GURU", "action": "view"},
            {"role_name": "GURU", "resource": "   ", "action": "view"},
            {"role_name": "GURU,WAKA", "resource": "nilai", "action": "view"},
            {"role_name": "guru | waka", "resource": "nilai", "action": "view"},
        ],
    )
    async def test_invalid_rule(
        self, client: AsyncClient, admin_headers: dict[str, str], body
    ):
        response = await client.post(BASE, headers=admin_headers, json=body)

        assert response.status_code == 422
        assert response.json()["errors"]

    async def test_delete_rule(
        self, client: AsyncClient, db: AsyncSession, admin_headers: dict[str, str]
    ):
        rule = await make_rule(db, "GURU", "nilai", "view")

        response = await client.delete(f"{BASE}/{rule.id}", headers=admin_headers)

        assert response.status_code == 204

    async def test_delete_missing_rule(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        response = await client.delete(f"{BASE}/{uuid4()}", headers=admin_headers)

        assert response.status_code == 404

    async def test_saved_rule_takes_effect(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        auth_headers: dict[str, str],
    ):
        """A rule saved by an admin applies to the next request."""
        check = {"resource": "nilai", "action": "view"}

        before = await client.post(f"{BASE}/check", headers=auth_headers, json=check)
        assert before.json()["allowed"] is False

        await client.post(
            BASE,
            headers=admin_headers,
            json={"role_name": "GURU", "resource": "nilai", "action": "view"},
        )

        after = await client.post(f"{BASE}/check", headers=auth_headers, json=check)
        assert after.json()["allowed"] is True


class TestRoleRoutes:
    """Tests for role endpoints."""

    async def test_create_and_list(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        response = await client.post(
            "/api/v1/roles",
            headers=admin_headers,
            json={"name": "op_absensi", "description": "Operator absensi"},
        )

        assert response.status_code == 201
        assert response.json()["name"] == "OP_ABSENSI"
        assert response.json()["label"] == "OP_Absensi"

        response = await client.get("/api/v1/roles", headers=admin_headers)
        assert [r["name"] for r in response.json()] == ["OP_ABSENSI"]

    async def test_duplicate_role(
        self, client: AsyncClient, db: AsyncSession, admin_headers: dict[str, str]
    ):
        db.add(Role(name="GURU"))
        await db.flush()

        response = await client.post(
            "/api/v1/roles", headers=admin_headers, json={"name": "guru"}
        )

        assert response.status_code == 409
        assert response.json()["type"].endswith("/role_exists")

    async def test_role_name_with_delimiter(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        response = await client.post(
            "/api/v1/roles", headers=admin_headers, json={"name": "GURU|WAKA"}
        )

        assert response.status_code == 422


class TestAccessCheck:
    """Tests for the access check endpoint."""

    async def test_check_own_access(
        self, client: AsyncClient, auth_headers: dict[str, str], guru_rules
    ):
        response = await client.post(
            f"{BASE}/check",
            headers=auth_headers,
            json={"resource": "jurnal.harian", "action": "delete"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["allowed"] is True
        assert data["reason"] == "granted"
        assert data["roles"] == ["GURU"]
        assert data["matched_rule"] == {
            "role_name": "GURU",
            "resource": "jurnal",
            "action": "manage",
            "is_allowed": True,
        }

    async def test_check_denied(
        self, client: AsyncClient, auth_headers: dict[str, str], guru_rules
    ):
        response = await client.post(
            f"{BASE}/check",
            headers=auth_headers,
            json={"resource": "rekap_jurnal", "action": "view"},
        )

        data = response.json()
        assert data["allowed"] is False
        assert data["reason"] == "no_matching_rule"
        assert data["matched_rule"] is None

    async def test_non_admin_cannot_check_other_roles(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        response = await client.post(
            f"{BASE}/check",
            headers=auth_headers,
            json={"resource": "jurnal", "action": "view", "roles": ["WAKA"]},
        )

        assert response.status_code == 403

    async def test_admin_checks_other_roles(
        self, client: AsyncClient, admin_headers: dict[str, str], guru_rules
    ):
        response = await client.post(
            f"{BASE}/check",
            headers=admin_headers,
            json={"resource": "rekap_jurnal", "action": "view", "roles": ["waka"]},
        )

        data = response.json()
        assert data["allowed"] is True
        assert data["is_admin"] is False
        assert data["roles"] == ["WAKA"]

    async def test_admin_own_check_is_override(
        self, client: AsyncClient, admin_headers: dict[str, str], admin: User
    ):
        response = await client.post(
            f"{BASE}/check",
            headers=admin_headers,
            json={"resource": "anything", "action": "delete"},
        )

        data = response.json()
        assert data["allowed"] is True
        assert data["reason"] == "admin_override"
        assert data["is_admin"] is True
