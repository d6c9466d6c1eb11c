"""Users API resources."""

from uuid import UUID

import falcon
import falcon.asgi

from rolegate.application.use_cases.user.assign_user_roles import AssignUserRolesUseCase
from rolegate.application.use_cases.user.check_username import (
    CheckUsernameAvailabilityUseCase,
)
from rolegate.interfaces.api.responses import actor_from, respond
from rolegate.interfaces.api.schemas import UserRolesBody


class UserRolesResource:
    """PUT /v1/users/{user_id}/roles - replace the roles a user holds."""

    def __init__(self, assign_user_roles: AssignUserRolesUseCase) -> None:
        self._assign = assign_user_roles

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: UUID
    ) -> None:
        body = UserRolesBody.model_validate(await req.get_media())
        user = await self._assign.execute(actor_from(req), user_id, body.roles)
        respond(
            resp,
            "User roles updated successfully",
            user={
                "id": str(user.id),
                "username": user.username,
                "roles": user.roles,
                "roleIds": [str(i) for i in user.role_ids],
            },
        )


class UsernameAvailabilityResource:
    """GET /v1/users/username-availability?username=&exclude= - public check."""

    def __init__(self, check_username: CheckUsernameAvailabilityUseCase) -> None:
        self._check = check_username

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        username = req.get_param("username", required=True)
        exclude = req.get_param_as_uuid("exclude")
        available = await self._check.execute(username, exclude)
        respond(
            resp,
            "Username is available" if available else "Username is already taken",
            available=available,
        )
