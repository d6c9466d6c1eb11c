"""User entity - role holder."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from rolegate.domain.value_objects import SUPER_ADMIN_ROLE, Actor


@dataclass
class User:
    """User holding one or more roles."""

    id: UUID
    username: str
    email: str | None = None
    roles: list[str] = field(default_factory=list)
    role_ids: list[UUID] = field(default_factory=list)
    can_update_permissions: bool = True
    can_update_role: bool = True
    created_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def display_name(self) -> str:
        return self.username or str(self.id)

    @property
    def is_super_admin(self) -> bool:
        return any(r.upper() == SUPER_ADMIN_ROLE for r in self.roles)

    def shares_role_with(self, actor: Actor) -> bool:
        held = {r.upper() for r in self.roles}
        return any(r.upper() in held for r in actor.roles)

    def as_actor(self) -> Actor:
        return Actor(id=self.id, roles=list(self.roles), username=self.username)
