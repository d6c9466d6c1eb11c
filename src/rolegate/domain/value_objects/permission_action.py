"""Permission actions for RBAC."""

from enum import StrEnum

from rolegate.domain.exceptions import ValidationError


class PermissionAction(StrEnum):
    """CRUD actions that can be granted on an entity."""

    CREATE = "canCreate"
    READ = "canRead"
    UPDATE = "canUpdate"
    DELETE = "canDelete"

    @property
    def verb(self) -> str:
        """Human verb used in denial messages."""
        return self.value[3:].lower()

    @property
    def field(self) -> str:
        """Attribute name on PermissionRecord."""
        return _FIELDS[self]

    @classmethod
    def parse(cls, value: str) -> "PermissionAction":
        """Accept canRead, can_read or read, any case."""
        wanted = value.strip().lower().replace("_", "")
        for member in cls:
            if wanted in (member.value.lower(), member.verb):
                return member
        raise ValidationError(f"Invalid permission action: {value}")


_FIELDS = {
    PermissionAction.CREATE: "can_create",
    PermissionAction.READ: "can_read",
    PermissionAction.UPDATE: "can_update",
    PermissionAction.DELETE: "can_delete",
}
