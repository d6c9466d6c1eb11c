"""Personalized permission DTOs."""

from dataclasses import dataclass, field
from uuid import UUID

from rolegate.application.dto.role_dto import PermissionInput


@dataclass
class UserPermissionUpdateInput:
    """Replace a user's personal overrides.

    access_all / denied_all expand to one all-true / all-false record per
    entity name and exclude each other.
    """

    user_id: UUID
    access_all: bool = False
    denied_all: bool = False
    permissions: list[PermissionInput] = field(default_factory=list)
