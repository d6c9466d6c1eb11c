"""Protection rules for role mutations."""

from rolegate.domain.entities import Role
from rolegate.domain.exceptions import ProtectedResource
from rolegate.domain.value_objects import Actor


def ensure_deletable(role: Role, actor: Actor) -> None:
    """Raise ProtectedResource if role may not be trashed or deleted by actor."""
    if role.is_reserved:
        raise ProtectedResource(f"{role.name} is a system role and cannot be deleted")
    if role.system_permanent_delete_protection:
        raise ProtectedResource(f"Role {role.name} is permanently protected from deletion")
    if role.system_delete_protection and not actor.is_super_admin:
        raise ProtectedResource(
            f"Role {role.name} is protected; only a super administrator can delete it"
        )
