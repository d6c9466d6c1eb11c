"""API resource tests."""

from datetime import UTC, datetime
from uuid import uuid4

import falcon.asgi
from falcon.testing import TestClient

from rolegate.domain.value_objects import Actor
from rolegate.interfaces.api.errors import register_error_handlers
from rolegate.interfaces.api.middleware.cors import CORSMiddleware
from rolegate.interfaces.api.resources.health import HealthResource

from tests.conftest import FakeStore, make_role


def _assert_error(r, status_code: int) -> dict:
    assert r.status_code == status_code
    assert r.json["statusCode"] == status_code
    assert r.json["success"] is False
    return r.json


class TestHealth:
    def test_health_ok(self, client: TestClient) -> None:
        r = client.simulate_get("/v1/health")
        assert r.status_code == 200
        assert r.json["status"] == "ok"

    def test_ready(self, client: TestClient) -> None:
        r = client.simulate_get("/v1/health/ready")
        assert r.status_code == 200
        assert r.json["checks"] == {"database": True, "redis": True}


class TestRoles:
    def test_create_role(self, client: TestClient) -> None:
        r = client.simulate_post(
            "/v1/roles",
            json={
                "name": "content editor",
                "defaultPermissions": [
                    {"name": "product", "canRead": True, "canUpdate": True},
                ],
            },
        )
        assert r.status_code == 201
        assert r.json["statusCode"] == 201
        assert r.json["success"] is True
        role = r.json["role"]
        assert role["name"] == "CONTENT EDITOR"
        [permission] = role["defaultPermissions"]
        assert permission["entityName"] == "Product"
        assert permission["canUpdate"] is True
        assert permission["canDelete"] is False

    def test_create_duplicate_conflicts(self, client: TestClient) -> None:
        r = client.simulate_post("/v1/roles", json={"name": "admin"})
        _assert_error(r, 409)

    def test_create_invalid_body(self, client: TestClient) -> None:
        r = client.simulate_post("/v1/roles", json={"description": "no name"})
        body = _assert_error(r, 400)
        assert body["message"] == "Invalid request body"
        assert any(e["field"] == "name" for e in body["errors"])

    def test_create_unknown_entity(self, client: TestClient) -> None:
        r = client.simulate_post(
            "/v1/roles",
            json={"name": "X", "defaultPermissions": [{"entityName": "Rocket"}]},
        )
        body = _assert_error(r, 400)
        assert "Rocket" in body["message"]

    def test_list_roles(self, client: TestClient, store: FakeStore, customer_role) -> None:
        store.add_role(make_role("EDITOR"))
        r = client.simulate_get("/v1/roles", params={"sortBy": "name", "sortOrder": "asc"})
        assert r.status_code == 200
        assert [role["name"] for role in r.json["roles"]] == ["ADMIN", "CUSTOMER", "EDITOR"]
        assert r.json["pagination"] == {"page": 1, "limit": 10, "total": 3, "totalPages": 1}

    def test_list_roles_search_and_limit(
        self, client: TestClient, store: FakeStore, customer_role
    ) -> None:
        r = client.simulate_get("/v1/roles", params={"search": "cust", "limit": 1})
        assert [role["name"] for role in r.json["roles"]] == ["CUSTOMER"]
        assert r.json["pagination"]["totalPages"] == 1

    def test_list_roles_bad_sort(self, client: TestClient) -> None:
        r = client.simulate_get("/v1/roles", params={"sortBy": "password"})
        _assert_error(r, 400)

    def test_get_role(self, client: TestClient, admin_role) -> None:
        r = client.simulate_get(f"/v1/roles/{admin_role.id}")
        assert r.status_code == 200
        assert r.json["role"]["id"] == str(admin_role.id)

    def test_get_missing_role(self, client: TestClient) -> None:
        missing = uuid4()
        body = _assert_error(client.simulate_get(f"/v1/roles/{missing}"), 404)
        assert body["errors"] == [{"kind": "Role", "ids": [str(missing)]}]

    def test_get_role_bad_id_is_not_routed(self, client: TestClient) -> None:
        _assert_error(client.simulate_get("/v1/roles/not-a-uuid"), 404)

    def test_update_role(self, client: TestClient, customer_role) -> None:
        r = client.simulate_patch(
            f"/v1/roles/{customer_role.id}",
            json={
                "description": "Shoppers",
                "defaultPermissions": [{"entityName": "Order", "canCreate": True}],
            },
        )
        assert r.status_code == 200
        role = r.json["role"]
        assert role["description"] == "Shoppers"
        assert {p["entityName"] for p in role["defaultPermissions"]} == {"Product", "Order"}

    def test_rename_reserved_role_refused(self, client: TestClient, customer_role) -> None:
        r = client.simulate_patch(f"/v1/roles/{customer_role.id}", json={"name": "SHOPPER"})
        _assert_error(r, 403)

    def test_trash_delete_restore_flow(self, client: TestClient, store: FakeStore) -> None:
        role = store.add_role(make_role("TEMP"))

        r = client.simulate_delete(f"/v1/roles/{role.id}")
        assert r.status_code == 200
        assert r.json["role"]["deletedAt"] is not None
        listed = client.simulate_get("/v1/roles").json["roles"]
        assert "TEMP" not in [x["name"] for x in listed]

        r = client.simulate_post("/v1/roles/restore", json={"ids": [str(role.id)]})
        assert r.status_code == 200
        assert r.json["roles"][0]["deletedAt"] is None

        client.simulate_delete(f"/v1/roles/{role.id}")
        r = client.simulate_post("/v1/roles/trash/delete", json={"ids": [str(role.id)]})
        assert r.status_code == 200
        assert r.json["ids"] == [str(role.id)]
        _assert_error(client.simulate_get(f"/v1/roles/{role.id}"), 404)

    def test_hard_delete_active_role(self, client: TestClient, store: FakeStore) -> None:
        role = store.add_role(make_role("TEMP"))
        r = client.simulate_post("/v1/roles/trash/delete", json={"ids": [str(role.id)]})
        body = _assert_error(r, 400)
        assert body["errors"] == [{"kind": "Role", "ids": [str(role.id)]}]

    def test_hard_delete_assigned_role(self, client: TestClient, store: FakeStore, customer) -> None:
        [role_id] = store.user_roles[customer.id]
        store.roles[role_id].name = "LEGACY"
        store.roles[role_id].deleted_at = datetime.now(UTC)
        r = client.simulate_post("/v1/roles/trash/delete", json={"ids": [str(role_id)]})
        _assert_error(r, 409)

    def test_hard_delete_requires_ids(self, client: TestClient) -> None:
        _assert_error(client.simulate_post("/v1/roles/trash/delete", json={"ids": []}), 400)

    def test_delete_reserved_role_refused(self, client: TestClient, admin_role) -> None:
        _assert_error(client.simulate_delete(f"/v1/roles/{admin_role.id}"), 403)


class TestAuthorization:
    def test_anonymous_gets_401(self, client: TestClient, auth) -> None:
        auth.actor = None
        body = _assert_error(client.simulate_get("/v1/roles"), 401)
        assert body["message"] == "Authentication required"

    def test_missing_permission_gets_403(self, client: TestClient, auth, customer) -> None:
        auth.actor = customer.as_actor()
        body = _assert_error(client.simulate_post("/v1/roles", json={"name": "X"}), 403)
        assert body["message"] == "You do not have permission to create roles"

    def test_username_availability_is_public(self, client: TestClient, auth, customer) -> None:
        auth.actor = None
        r = client.simulate_get(
            "/v1/users/username-availability", params={"username": "CAROL"}
        )
        assert r.status_code == 200
        assert r.json["available"] is False

        r = client.simulate_get(
            "/v1/users/username-availability",
            params={"username": "carol", "exclude": str(customer.id)},
        )
        assert r.json["available"] is True

    def test_username_required(self, client: TestClient) -> None:
        _assert_error(client.simulate_get("/v1/users/username-availability"), 400)


class TestUserPermissions:
    def test_replace_get_and_revoke(self, client: TestClient, customer) -> None:
        url = f"/v1/users/{customer.id}/permissions"
        r = client.simulate_put(
            url, json={"permissions": [{"entityName": "Order", "canRead": True}]}
        )
        assert r.status_code == 200
        assert [p["entityName"] for p in r.json["permissions"]] == ["Order"]

        r = client.simulate_get(url)
        assert r.status_code == 200
        assert r.json["permissions"][0]["canRead"] is True

        r = client.simulate_delete(url)
        assert r.status_code == 200
        assert client.simulate_get(url).json["permissions"] == []

    def test_denied_all_blocks_role_defaults(
        self, client: TestClient, auth, admin_user, customer
    ) -> None:
        r = client.simulate_put(
            f"/v1/users/{customer.id}/permissions", json={"deniedAll": True}
        )
        assert r.status_code == 200

        auth.actor = customer.as_actor()
        r = client.simulate_get(
            "/v1/me/permissions/check", params={"entity": "Product", "action": "read"}
        )
        assert r.json["allowed"] is False

    def test_conflicting_flags(self, client: TestClient, customer) -> None:
        r = client.simulate_put(
            f"/v1/users/{customer.id}/permissions",
            json={"accessAll": True, "deniedAll": True},
        )
        _assert_error(r, 400)

    def test_own_permissions_refused(self, client: TestClient, admin_user) -> None:
        r = client.simulate_put(
            f"/v1/users/{admin_user.id}/permissions", json={"accessAll": True}
        )
        _assert_error(r, 403)

    def test_unknown_user(self, client: TestClient) -> None:
        _assert_error(client.simulate_get(f"/v1/users/{uuid4()}/permissions"), 404)


class TestUserRoles:
    def test_assign_roles(self, client: TestClient, store: FakeStore, customer) -> None:
        store.add_role(make_role("EDITOR"))
        r = client.simulate_put(
            f"/v1/users/{customer.id}/roles", json={"roles": ["customer", "editor"]}
        )
        assert r.status_code == 200
        assert sorted(r.json["user"]["roles"]) == ["CUSTOMER", "EDITOR"]

    def test_assign_unknown_role(self, client: TestClient, customer) -> None:
        r = client.simulate_put(f"/v1/users/{customer.id}/roles", json={"roles": ["GHOST"]})
        body = _assert_error(r, 404)
        assert body["errors"] == [{"kind": "Role", "ids": ["GHOST"]}]

    def test_assign_own_roles_refused(self, client: TestClient, admin_user) -> None:
        r = client.simulate_put(f"/v1/users/{admin_user.id}/roles", json={"roles": ["CUSTOMER"]})
        _assert_error(r, 403)


class TestMyPermissions:
    def test_effective_permissions(self, client: TestClient, auth, customer) -> None:
        auth.actor = customer.as_actor()
        r = client.simulate_get("/v1/me/permissions/effective")
        assert r.status_code == 200
        [product] = r.json["permissions"]
        assert product["entityName"] == "Product"
        assert product["canRead"] is True

    def test_own_overrides(self, client: TestClient, auth) -> None:
        auth.actor = Actor(id=uuid4(), roles=[])
        r = client.simulate_get("/v1/me/permissions")
        assert r.status_code == 200
        assert r.json["permissions"] == []

    def test_check(self, client: TestClient, auth, customer) -> None:
        auth.actor = customer.as_actor()
        r = client.simulate_get(
            "/v1/me/permissions/check", params={"entity": "product", "action": "canRead"}
        )
        assert r.status_code == 200
        assert r.json["allowed"] is True

        r = client.simulate_get(
            "/v1/me/permissions/check", params={"entity": "Product", "action": "canDelete"}
        )
        assert r.json["allowed"] is False

    def test_check_bad_action(self, client: TestClient) -> None:
        r = client.simulate_get(
            "/v1/me/permissions/check", params={"entity": "Product", "action": "approve"}
        )
        _assert_error(r, 400)


class TestCORS:
    def _client(self, cache) -> TestClient:
        async def database_check() -> bool:
            return True

        app = falcon.asgi.App(middleware=[CORSMiddleware(["https://shop.example"])])
        app.add_route("/v1/health", HealthResource(database_check, cache))
        return TestClient(app)

    def test_allowed_origin_echoed(self, cache) -> None:
        r = self._client(cache).simulate_get(
            "/v1/health", headers={"Origin": "https://shop.example"}
        )
        assert r.headers["access-control-allow-origin"] == "https://shop.example"
        assert r.headers["access-control-allow-credentials"] == "true"

    def test_other_origin_ignored(self, cache) -> None:
        r = self._client(cache).simulate_get(
            "/v1/health", headers={"Origin": "https://evil.example"}
        )
        assert "access-control-allow-origin" not in r.headers

    def test_preflight(self, cache) -> None:
        r = self._client(cache).simulate_options(
            "/v1/health", headers={"Origin": "https://shop.example"}
        )
        assert r.status_code == 204
        assert "PATCH" in r.headers["access-control-allow-methods"]


class _Boom:
    async def on_get(self, req, resp):
        raise RuntimeError("db password leaked")


class TestUnexpectedErrors:
    def _client(self, production: bool) -> TestClient:
        app = falcon.asgi.App()
        register_error_handlers(app, production=production)
        app.add_route("/boom", _Boom())
        return TestClient(app)

    def test_details_hidden_in_production(self) -> None:
        body = _assert_error(self._client(True).simulate_get("/boom"), 500)
        assert body["message"] == "Internal server error"

    def test_details_shown_in_development(self) -> None:
        body = _assert_error(self._client(False).simulate_get("/boom"), 500)
        assert body["message"] == "db password leaked"
