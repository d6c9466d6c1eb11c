"""Domain entities."""

from rolegate.domain.entities.permission import PermissionRecord
from rolegate.domain.entities.role import (
    PROTECTED_ROLE_NAMES,
    Role,
    normalize_role_name,
)
from rolegate.domain.entities.user import User

__all__ = [
    "PROTECTED_ROLE_NAMES",
    "PermissionRecord",
    "Role",
    "User",
    "normalize_role_name",
]
