"""Who may change whose personal permissions."""

from uuid import UUID

from rolegate.domain.entities import User
from rolegate.domain.exceptions import NotFound, PermissionDenied, ProtectedResource
from rolegate.domain.value_objects import Actor


def ensure_manageable(actor: Actor, target: User | None, user_id: UUID) -> User:
    """Return target if actor may edit its overrides, raise otherwise."""
    if target is None:
        raise NotFound("User", [user_id])
    if target.id == actor.id:
        raise PermissionDenied("You cannot change your own permissions")
    if target.is_super_admin:
        raise ProtectedResource("Permissions of a super administrator cannot be changed")
    if not target.can_update_permissions and not actor.is_super_admin:
        raise ProtectedResource(f"Permissions of {target.display_name} are locked")
    if target.shares_role_with(actor):
        raise PermissionDenied("You cannot change permissions of a user who shares your role")
    return target
