"""Authenticated actor descriptor."""

from dataclasses import dataclass, field
from uuid import UUID

SUPER_ADMIN_ROLE = "SUPER ADMIN"


@dataclass(frozen=True)
class Actor:
    """Who is making the request: user id plus held role names."""

    id: UUID
    roles: list[str] = field(default_factory=list)
    username: str | None = None

    @property
    def is_super_admin(self) -> bool:
        return any(r.upper() == SUPER_ADMIN_ROLE for r in self.roles)
