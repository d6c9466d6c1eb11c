"""Personalized permissions API resources."""

from uuid import UUID

import falcon.asgi

from rolegate.application.use_cases.permission.get_user_permissions import (
    GetUserPermissionsUseCase,
)
from rolegate.application.use_cases.permission.revoke_user_permissions import (
    RevokeUserPermissionsUseCase,
)
from rolegate.application.use_cases.permission.update_user_permission import (
    UpdateUserPermissionUseCase,
)
from rolegate.infrastructure.cache.serialization import permissions_to_list
from rolegate.interfaces.api.responses import actor_from, respond
from rolegate.interfaces.api.schemas import UserPermissionBody


class UserPermissionsResource:
    """GET/PUT/DELETE /v1/users/{user_id}/permissions - a user's overrides."""

    def __init__(
        self,
        get_user_permissions: GetUserPermissionsUseCase,
        update_user_permission: UpdateUserPermissionUseCase,
        revoke_user_permissions: RevokeUserPermissionsUseCase,
    ) -> None:
        self._get = get_user_permissions
        self._update = update_user_permission
        self._revoke = revoke_user_permissions

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: UUID
    ) -> None:
        records = await self._get.execute(actor_from(req), user_id)
        respond(resp, "Permissions fetched successfully", permissions=permissions_to_list(records))

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: UUID
    ) -> None:
        """Body: accessAll | deniedAll | permissions[]. The stored set becomes exactly this."""
        body = UserPermissionBody.model_validate(await req.get_media())
        records = await self._update.execute(actor_from(req), body.to_input(user_id))
        respond(resp, "Permissions updated successfully", permissions=permissions_to_list(records))

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: UUID
    ) -> None:
        await self._revoke.execute(actor_from(req), user_id)
        respond(resp, "User specific permissions removed")
