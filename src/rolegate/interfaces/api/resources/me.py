"""Calling actor's own permissions."""

import falcon.asgi

from rolegate.application.use_cases.permission.get_effective_permissions import (
    CheckPermissionUseCase,
    GetEffectivePermissionsUseCase,
)
from rolegate.application.use_cases.permission.get_user_permissions import (
    GetUserPermissionsUseCase,
)
from rolegate.infrastructure.cache.serialization import permissions_to_list
from rolegate.interfaces.api.responses import actor_from, respond


class MyPermissionsResource:
    """GET /v1/me/permissions[/effective|/check]."""

    def __init__(
        self,
        get_user_permissions: GetUserPermissionsUseCase,
        get_effective_permissions: GetEffectivePermissionsUseCase,
        check_permission: CheckPermissionUseCase,
    ) -> None:
        self._personal = get_user_permissions
        self._effective = get_effective_permissions
        self._check = check_permission

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Raw personal overrides only."""
        records = await self._personal.execute(actor_from(req))
        respond(resp, "Permissions fetched successfully", permissions=permissions_to_list(records))

    async def on_get_effective(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        records = await self._effective.execute(actor_from(req))
        respond(resp, "Permissions fetched successfully", permissions=permissions_to_list(records))

    async def on_get_check(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        entity = req.get_param("entity", required=True)
        action = req.get_param("action", required=True)
        allowed = await self._check.execute(actor_from(req), entity, action)
        respond(resp, "Permission checked", entity=entity, action=action, allowed=allowed)
