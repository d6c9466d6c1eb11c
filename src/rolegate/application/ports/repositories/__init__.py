"""Repository ports."""

from rolegate.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from rolegate.application.ports.repositories.role_repository import RoleRepository
from rolegate.application.ports.repositories.user_repository import UserRepository

__all__ = [
    "PermissionRepository",
    "RoleRepository",
    "UserRepository",
]
