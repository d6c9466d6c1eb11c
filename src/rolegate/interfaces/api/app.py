"""Falcon ASGI application."""

from dataclasses import dataclass

import falcon.asgi
from falcon.asgi import App

from rolegate.interfaces.api.errors import register_error_handlers
from rolegate.interfaces.api.resources.health import HealthResource
from rolegate.interfaces.api.resources.me import MyPermissionsResource
from rolegate.interfaces.api.resources.permissions import UserPermissionsResource
from rolegate.interfaces.api.resources.roles import (
    RoleResource,
    RoleRestoreResource,
    RolesResource,
    RoleTrashResource,
)
from rolegate.interfaces.api.resources.users import (
    UsernameAvailabilityResource,
    UserRolesResource,
)


@dataclass
class Resources:
    """Every HTTP resource the app routes to."""

    health: HealthResource
    roles: RolesResource
    role: RoleResource
    role_trash: RoleTrashResource
    role_restore: RoleRestoreResource
    user_permissions: UserPermissionsResource
    user_roles: UserRolesResource
    username_availability: UsernameAvailabilityResource
    my_permissions: MyPermissionsResource


def create_app(
    resources: Resources,
    middleware: list | None = None,
    production: bool = False,
) -> App:
    """Create Falcon ASGI app with routes and error handlers."""
    app = falcon.asgi.App(middleware=middleware or [])
    register_error_handlers(app, production=production)
    app.add_route("/v1/health", resources.health)
    app.add_route("/v1/health/ready", resources.health, suffix="ready")
    app.add_route("/v1/roles", resources.roles)
    app.add_route("/v1/roles/trash/delete", resources.role_trash)
    app.add_route("/v1/roles/restore", resources.role_restore)
    app.add_route("/v1/roles/{role_id:uuid}", resources.role)
    app.add_route("/v1/users/username-availability", resources.username_availability)
    app.add_route("/v1/users/{user_id:uuid}/permissions", resources.user_permissions)
    app.add_route("/v1/users/{user_id:uuid}/roles", resources.user_roles)
    app.add_route("/v1/me/permissions", resources.my_permissions)
    app.add_route(
        "/v1/me/permissions/effective", resources.my_permissions, suffix="effective"
    )
    app.add_route("/v1/me/permissions/check", resources.my_permissions, suffix="check")
    return app
