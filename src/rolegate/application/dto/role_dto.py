"""Role DTOs."""

from dataclasses import dataclass, field

from rolegate.domain.entities import Role


@dataclass
class PermissionInput:
    """CRUD flags for one entity, as sent by a caller."""

    entity_name: str
    can_create: bool = False
    can_read: bool = False
    can_update: bool = False
    can_delete: bool = False
    description: str | None = None


@dataclass
class RoleCreateInput:
    """Input for creating a role."""

    name: str
    description: str | None = None
    default_permissions: list[PermissionInput] = field(default_factory=list)
    system_delete_protection: bool = False
    system_update_protection: bool = False
    system_permanent_delete_protection: bool = False
    system_permanent_update_protection: bool = False


@dataclass
class RoleUpdateInput:
    """Partial update of a role; None means leave unchanged."""

    name: str | None = None
    description: str | None = None
    default_permissions: list[PermissionInput] | None = None
    system_delete_protection: bool | None = None
    system_update_protection: bool | None = None
    system_permanent_delete_protection: bool | None = None
    system_permanent_update_protection: bool | None = None


@dataclass
class RolePage:
    """One page of roles."""

    items: list[Role]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0
