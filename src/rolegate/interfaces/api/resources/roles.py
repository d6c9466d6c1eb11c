"""Roles API resources."""

from uuid import UUID

import falcon.asgi

from rolegate.application.use_cases.role.create_role import CreateRoleUseCase
from rolegate.application.use_cases.role.get_role import GetRoleUseCase
from rolegate.application.use_cases.role.hard_delete_roles import HardDeleteRolesUseCase
from rolegate.application.use_cases.role.list_roles import ListRolesUseCase
from rolegate.application.use_cases.role.restore_roles import RestoreRolesUseCase
from rolegate.application.use_cases.role.soft_delete_roles import SoftDeleteRolesUseCase
from rolegate.application.use_cases.role.update_role import UpdateRoleUseCase
from rolegate.infrastructure.cache.serialization import role_to_dict
from rolegate.interfaces.api.responses import actor_from, respond
from rolegate.interfaces.api.schemas import RoleCreateBody, RoleIdsBody, RoleUpdateBody


class RolesResource:
    """GET/POST /v1/roles - paginate and create roles."""

    def __init__(self, list_roles: ListRolesUseCase, create_role: CreateRoleUseCase) -> None:
        self._list = list_roles
        self._create = create_role

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Query: page, limit, search, sortBy (name|createdAt), sortOrder (asc|desc)."""
        result = await self._list.execute(
            actor_from(req),
            page=req.get_param_as_int("page", default=1),
            limit=req.get_param_as_int("limit", default=10),
            search=req.get_param("search"),
            sort_by=req.get_param("sortBy", default="createdAt"),
            sort_order=req.get_param("sortOrder", default="desc"),
        )
        respond(
            resp,
            "Roles fetched successfully",
            roles=[role_to_dict(r) for r in result.items],
            pagination={
                "page": result.page,
                "limit": result.limit,
                "total": result.total,
                "totalPages": result.total_pages,
            },
        )

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = RoleCreateBody.model_validate(await req.get_media())
        role = await self._create.execute(actor_from(req), body.to_input())
        respond(resp, "Role created successfully", 201, role=role_to_dict(role))


class RoleResource:
    """GET/PATCH/DELETE /v1/roles/{role_id} - read, update, move to trash."""

    def __init__(
        self,
        get_role: GetRoleUseCase,
        update_role: UpdateRoleUseCase,
        soft_delete_roles: SoftDeleteRolesUseCase,
    ) -> None:
        self._get = get_role
        self._update = update_role
        self._soft_delete = soft_delete_roles

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: UUID
    ) -> None:
        role = await self._get.execute(actor_from(req), role_id)
        respond(resp, "Role fetched successfully", role=role_to_dict(role))

    async def on_patch(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: UUID
    ) -> None:
        body = RoleUpdateBody.model_validate(await req.get_media())
        role = await self._update.execute(actor_from(req), role_id, body.to_input())
        respond(resp, "Role updated successfully", role=role_to_dict(role))

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: UUID
    ) -> None:
        roles = await self._soft_delete.execute(actor_from(req), [role_id])
        respond(resp, "Role moved to trash", role=role_to_dict(roles[0]))


class RoleTrashResource:
    """POST /v1/roles/trash/delete - permanently delete trashed roles."""

    def __init__(self, hard_delete_roles: HardDeleteRolesUseCase) -> None:
        self._hard_delete = hard_delete_roles

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = RoleIdsBody.model_validate(await req.get_media())
        deleted = await self._hard_delete.execute(actor_from(req), body.ids)
        respond(resp, "Roles permanently deleted", ids=[str(i) for i in deleted])


class RoleRestoreResource:
    """POST /v1/roles/restore - take roles out of the trash."""

    def __init__(self, restore_roles: RestoreRolesUseCase) -> None:
        self._restore = restore_roles

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = RoleIdsBody.model_validate(await req.get_media())
        roles = await self._restore.execute(actor_from(req), body.ids)
        respond(resp, "Roles restored successfully", roles=[role_to_dict(r) for r in roles])
