"""Permission record - CRUD rights on one entity."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from rolegate.domain.value_objects import PermissionAction


@dataclass
class PermissionRecord:
    """One row of CRUD rights scoped to exactly one entity name.

    Owned either by a role (default permission) or by a user (personalized
    override), never both.
    """

    id: UUID
    entity_name: str
    can_create: bool = False
    can_read: bool = False
    can_update: bool = False
    can_delete: bool = False
    description: str | None = None
    created_at: datetime | None = None
    created_by: UUID | None = None

    def allows(self, action: PermissionAction) -> bool:
        """Return the flag for action."""
        return bool(getattr(self, action.field))

    def matches(self, entity_name: str) -> bool:
        """Case-insensitive entity name comparison."""
        return self.entity_name.lower() == entity_name.lower()
