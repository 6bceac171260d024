"""Integration tests for user endpoints."""

from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from sekolah.modules.users.models import User
from tests.helpers import bearer, make_rule, make_user


pytestmark = pytest.mark.integration


class TestMe:
    """Tests for GET /users/me."""

    async def test_me_returns_roles_and_permissions(
        self, client: AsyncClient, db: AsyncSession
    ):
        await make_rule(db, "GURU", "jurnal", "manage")
        await make_rule(db, "WALI_KELAS", "ketidakhadiran", "view")
        await make_rule(db, "GURU", "nilai", "view", is_allowed=False)
        user = await make_user(db, "guru | wali_kelas, GURU")

        response = await client.get("/api/v1/users/me", headers=bearer(user))

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["auth_id"] == user.auth_id
        assert data["roles"] == ["GURU", "WALI_KELAS"]
        assert data["role_labels"] == ["Guru", "Wali Kelas"]
        assert data["is_admin"] is False
        assert data["permissions"] == ["jurnal:manage", "ketidakhadiran:view"]
        assert len(data["rules"]) == 3

    async def test_me_admin(self, client: AsyncClient, admin_headers: dict[str, str]):
        response = await client.get("/api/v1/users/me", headers=admin_headers)

        data = response.json()
        assert data["is_admin"] is True
        assert data["rules"] == []

    async def test_me_requires_token(self, client: AsyncClient):
        response = await client.get("/api/v1/users/me")

        assert response.status_code == 401
        assert response.json()["type"].endswith("/missing_token")

    async def test_me_rejects_bad_token(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/users/me", headers={"Authorization": "Bearer nope"}
        )

        assert response.status_code == 401
        assert response.json()["type"].endswith("/invalid_token")


class TestUserAdministration:
    """Tests for listing users and assigning roles."""

    async def test_list_requires_page_permission(
        self, client: AsyncClient, auth_headers: dict[str, str], guru_rules
    ):
        response = await client.get("/api/v1/users", headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["resource"] == "pengaturan_users"

    async def test_list_with_page_permission(
        self, client: AsyncClient, db: AsyncSession, guru: User
    ):
        await make_rule(db, "KAMAD", "pengaturan_users", "view")
        kamad = await make_user(db, "KAMAD", full_name="Aa Kamad")

        response = await client.get(
            "/api/v1/users", params={"page_size": 1}, headers=bearer(kamad)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [u["full_name"] for u in data["items"]] == ["Aa Kamad"]

    async def test_get_user(
        self, client: AsyncClient, admin_headers: dict[str, str], guru: User
    ):
        response = await client.get(f"/api/v1/users/{guru.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["roles"] == ["GURU"]

    async def test_get_missing_user(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        response = await client.get(f"/api/v1/users/{uuid4()}", headers=admin_headers)

        assert response.status_code == 404

    async def test_update_roles(
        self, client: AsyncClient, admin_headers: dict[str, str], guru: User
    ):
        response = await client.put(
            f"/api/v1/users/{guru.id}/roles",
            headers=admin_headers,
            json={"roles": ["guru", " waka ", "GURU|wali_kelas"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "GURU,WAKA,WALI_KELAS"
        assert data["roles"] == ["GURU", "WAKA", "WALI_KELAS"]

    async def test_update_roles_too_long(
        self,
        client: AsyncClient,
        db: AsyncSession,
        admin_headers: dict[str, str],
        guru: User,
    ):
        roles = [f"ROLE_NUMBER_{i:02d}" for i in range(40)]

        response = await client.put(
            f"/api/v1/users/{guru.id}/roles",
            headers=admin_headers,
            json={"roles": roles},
        )

        assert response.status_code == 422
        await db.refresh(guru)
        assert guru.role == "GURU"

    async def test_update_roles_at_length_limit(
        self, client: AsyncClient, admin_headers: dict[str, str], guru: User
    ):
        # 50 roles of 9 characters plus 49 commas is exactly 499
        roles = [f"ROLE_{i:04d}" for i in range(50)]

        response = await client.put(
            f"/api/v1/users/{guru.id}/roles",
            headers=admin_headers,
            json={"roles": roles},
        )

        assert response.status_code == 200
        assert response.json()["roles"] == roles

    async def test_update_roles_requires_admin(
        self, client: AsyncClient, auth_headers: dict[str, str], guru: User
    ):
        response = await client.put(
            f"/api/v1/users/{guru.id}/roles",
            headers=auth_headers,
            json={"roles": ["ADMIN"]},
        )

        assert response.status_code == 403
