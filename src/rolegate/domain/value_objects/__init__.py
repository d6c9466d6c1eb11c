"""Domain value objects."""

from rolegate.domain.value_objects.actor import SUPER_ADMIN_ROLE, Actor
from rolegate.domain.value_objects.entity_name import EntityName
from rolegate.domain.value_objects.permission_action import PermissionAction

__all__ = [
    "SUPER_ADMIN_ROLE",
    "Actor",
    "EntityName",
    "PermissionAction",
]
