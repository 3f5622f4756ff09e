"""Tests for admin user management."""


class TestListUsers:
    async def test_admin_lists_users(self, admin_client, member_client):
        response = await admin_client.get("/api/admin/users")
        assert response.status_code == 200
        emails = {u["email"] for u in response.json()}
        assert emails == {"admin@example.com", "member@example.com"}

    async def test_member_forbidden(self, member_client):
        response = await member_client.get("/api/admin/users")
        assert response.status_code == 403
        assert response.json() == {"error": "Admin access required", "code": "forbidden"}

    async def test_anonymous_unauthorized(self, client):
        response = await client.get("/api/admin/users")
        assert response.status_code == 401


class TestUpdatePermissions:
    async def _member_id(self, admin_client) -> str:
        users = (await admin_client.get("/api/admin/users")).json()
        return next(u["id"] for u in users if u["email"] == "member@example.com")

    async def test_grant_event_creation(self, admin_client, member_client):
        member_id = await self._member_id(admin_client)

        response = await admin_client.put(
            f"/api/admin/users/{member_id}", json={"can_create_events": True}
        )
        assert response.status_code == 200
        assert response.json()["can_create_events"] is True
        assert response.json()["is_admin"] is False

    async def test_promote_to_admin(self, admin_client, member_client):
        member_id = await self._member_id(admin_client)

        await admin_client.put(f"/api/admin/users/{member_id}", json={"is_admin": True})

        assert (await member_client.get("/api/admin/users")).status_code == 200

    async def test_cannot_revoke_own_admin(self, admin_client):
        me = (await admin_client.get("/auth/me")).json()["user"]

        response = await admin_client.put(
            f"/api/admin/users/{me['id']}", json={"is_admin": False}
        )
        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    async def test_unknown_user(self, admin_client):
        response = await admin_client.put(
            "/api/admin/users/nope", json={"can_create_events": True}
        )
        assert response.status_code == 404

    async def test_member_cannot_update(self, admin_client, member_client):
        me = (await member_client.get("/auth/me")).json()["user"]

        response = await member_client.put(
            f"/api/admin/users/{me['id']}", json={"is_admin": True}
        )
        assert response.status_code == 403
