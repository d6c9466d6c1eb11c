"""Domain exceptions."""

from collections.abc import Iterable


class RoleGateError(Exception):
    """Base exception for RoleGate."""

    pass


class AuthenticationRequired(RoleGateError):
    """Request has no authenticated actor."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class PermissionDenied(RoleGateError):
    """User does not have permission for the requested action."""

    @classmethod
    def for_action(cls, entity: str, action) -> "PermissionDenied":
        """Uniform denial message, e.g. "You do not have permission to delete roles"."""
        return cls(f"You do not have permission to {action.verb} {_plural(entity)}")


class ProtectedResource(RoleGateError):
    """Operation targets a system-protected resource."""

    pass


class NotFound(RoleGateError):
    """Requested resource was not found."""

    def __init__(self, kind: str, identifiers: str | Iterable[object]) -> None:
        if isinstance(identifiers, str):
            identifiers = [identifiers]
        self.kind = kind
        self.identifiers = [str(i) for i in identifiers]
        super().__init__(f"{kind} not found: {', '.join(self.identifiers)}")


class NotInTrash(RoleGateError):
    """Hard delete requested for records that are not soft-deleted."""

    def __init__(self, kind: str, identifiers: Iterable[object]) -> None:
        self.kind = kind
        self.identifiers = [str(i) for i in identifiers]
        super().__init__(f"{kind} not in the trash: {', '.join(self.identifiers)}")


class HasDependents(RoleGateError):
    """Hard delete requested for records that are still referenced."""

    def __init__(self, kind: str, identifiers: Iterable[object]) -> None:
        self.kind = kind
        self.identifiers = [str(i) for i in identifiers]
        super().__init__(
            f"{kind} still assigned to users: {', '.join(self.identifiers)}"
        )


class Conflict(RoleGateError):
    """Resource with the same unique key already exists."""

    pass


class ValidationError(RoleGateError):
    """Validation failed for input data."""

    pass


_IRREGULAR_PLURALS = {
    "faq": "FAQs",
    "media": "media",
    "privacy & policy": "privacy & policy entries",
    "terms & conditions": "terms & conditions",
}


def _plural(entity: str) -> str:
    name = entity.lower()
    if name in _IRREGULAR_PLURALS:
        return _IRREGULAR_PLURALS[name]
    if name.endswith("s"):
        return name
    if name.endswith("y") and name[-2:-1] not in ("a", "e", "o", "u"):
        return name[:-1] + "ies"
    return name + "s"
