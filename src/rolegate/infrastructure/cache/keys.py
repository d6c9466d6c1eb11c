"""Deterministic cache key builder."""

from uuid import UUID

from rolegate.domain.entities import normalize_role_name


class CacheKeys:
    """Builds every cache key under one prefix."""

    def __init__(self, prefix: str) -> None:
        self._prefix = prefix.rstrip(":")

    def user_permissions(self, user_id: UUID) -> str:
        return f"{self._prefix}:user-permissions:{user_id}"

    def user_info(self, user_id: UUID) -> str:
        return f"{self._prefix}:user-info:{user_id}"

    def session_revoked(self, user_id: UUID) -> str:
        return f"{self._prefix}:session-revoked:{user_id}"

    def role(self, role_id: UUID) -> str:
        return f"{self._prefix}:role:{role_id}"

    def role_name(self, name: str) -> str:
        return f"{self._prefix}:role-name:{normalize_role_name(name)}"

    def role_permissions(self, name: str) -> str:
        return f"{self._prefix}:role-permissions:{normalize_role_name(name)}"

    def roles_page(
        self,
        page: int,
        limit: int,
        search: str | None,
        sort_by: str,
        sort_order: str,
    ) -> str:
        term = (search or "").strip().lower()
        return (
            f"{self._prefix}:roles:page:{page}:limit:{limit}"
            f":search:{term}:sort:{sort_by}:{sort_order}"
        )

    def roles_pattern(self) -> str:
        """Wildcard matching every paginated role listing."""
        return f"{self._prefix}:roles:*"
