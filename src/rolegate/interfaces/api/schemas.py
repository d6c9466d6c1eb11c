"""Request body schemas (camelCase JSON)."""

from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from rolegate.application.dto.permission_dto import UserPermissionUpdateInput
from rolegate.application.dto.role_dto import PermissionInput, RoleCreateInput, RoleUpdateInput


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PermissionBody(_Body):
    entity_name: str = Field(
        validation_alias=AliasChoices("entityName", "entity_name", "name"),
        min_length=1,
    )
    can_create: bool = False
    can_read: bool = False
    can_update: bool = False
    can_delete: bool = False
    description: str | None = None

    def to_input(self) -> PermissionInput:
        return PermissionInput(
            entity_name=self.entity_name,
            can_create=self.can_create,
            can_read=self.can_read,
            can_update=self.can_update,
            can_delete=self.can_delete,
            description=self.description,
        )


class RoleCreateBody(_Body):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    default_permissions: list[PermissionBody] = Field(default_factory=list)
    system_delete_protection: bool = False
    system_update_protection: bool = False
    system_permanent_delete_protection: bool = False
    system_permanent_update_protection: bool = False

    def to_input(self) -> RoleCreateInput:
        return RoleCreateInput(
            name=self.name,
            description=self.description,
            default_permissions=[p.to_input() for p in self.default_permissions],
            system_delete_protection=self.system_delete_protection,
            system_update_protection=self.system_update_protection,
            system_permanent_delete_protection=self.system_permanent_delete_protection,
            system_permanent_update_protection=self.system_permanent_update_protection,
        )


class RoleUpdateBody(_Body):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    default_permissions: list[PermissionBody] | None = None
    system_delete_protection: bool | None = None
    system_update_protection: bool | None = None
    system_permanent_delete_protection: bool | None = None
    system_permanent_update_protection: bool | None = None

    def to_input(self) -> RoleUpdateInput:
        return RoleUpdateInput(
            name=self.name,
            description=self.description,
            default_permissions=(
                [p.to_input() for p in self.default_permissions]
                if self.default_permissions is not None
                else None
            ),
            system_delete_protection=self.system_delete_protection,
            system_update_protection=self.system_update_protection,
            system_permanent_delete_protection=self.system_permanent_delete_protection,
            system_permanent_update_protection=self.system_permanent_update_protection,
        )


class RoleIdsBody(_Body):
    ids: list[UUID] = Field(min_length=1)


class UserPermissionBody(_Body):
    access_all: bool = False
    denied_all: bool = False
    permissions: list[PermissionBody] = Field(default_factory=list)

    def to_input(self, user_id: UUID) -> UserPermissionUpdateInput:
        return UserPermissionUpdateInput(
            user_id=user_id,
            access_all=self.access_all,
            denied_all=self.denied_all,
            permissions=[p.to_input() for p in self.permissions],
        )


class UserRolesBody(_Body):
    roles: list[str] = Field(min_length=1)
