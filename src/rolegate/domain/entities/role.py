"""Role entity for RBAC."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from rolegate.domain.entities.permission import PermissionRecord

PROTECTED_ROLE_NAMES = frozenset(
    {"SUPER ADMIN", "ADMIN", "INVENTORY MANAGER", "CUSTOMER SUPPORT", "CUSTOMER"}
)


@dataclass
class Role:
    """Role with default permissions inherited by every holder."""

    id: UUID
    name: str
    description: str | None = None
    default_permissions: list[PermissionRecord] = field(default_factory=list)
    system_delete_protection: bool = False
    system_update_protection: bool = False
    system_permanent_delete_protection: bool = False
    system_permanent_update_protection: bool = False
    created_by: UUID | None = None
    created_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def in_trash(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_reserved(self) -> bool:
        """One of the five system roles that can never be renamed or deleted."""
        return self.name.upper() in PROTECTED_ROLE_NAMES


def normalize_role_name(name: str) -> str:
    """Canonical (uppercase) role name used for case-insensitive uniqueness."""
    return name.strip().upper()
