"""Authorization gate shared by every use case."""

from rolegate.application.ports import PermissionChecker
from rolegate.domain.exceptions import AuthenticationRequired, PermissionDenied
from rolegate.domain.value_objects import Actor, EntityName, PermissionAction


async def authorize(
    permission_checker: PermissionChecker,
    actor: Actor | None,
    entity: EntityName,
    action: PermissionAction,
) -> Actor:
    """Return actor if it may perform action on entity, raise otherwise."""
    if actor is None:
        raise AuthenticationRequired()
    if not await permission_checker.check(actor, entity, action):
        raise PermissionDenied.for_action(entity, action)
    return actor
