"""List roles use case."""

from rolegate.application.dto.role_dto import RolePage
from rolegate.application.ports import PermissionChecker, RoleReader
from rolegate.application.use_cases.authorization import authorize
from rolegate.domain.exceptions import ValidationError
from rolegate.domain.value_objects import Actor, EntityName, PermissionAction

SORT_FIELDS = ("name", "createdAt")
SORT_ORDERS = ("asc", "desc")
MAX_LIMIT = 100


class ListRolesUseCase:
    """Paginate non-trashed roles with optional search."""

    def __init__(self, role_reader: RoleReader, permission_checker: PermissionChecker) -> None:
        self._roles = role_reader
        self._permission_checker = permission_checker

    async def execute(
        self,
        actor: Actor | None,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> RolePage:
        """Limit is clamped to 1..100 and page to >= 1."""
        await authorize(self._permission_checker, actor, EntityName.ROLE, PermissionAction.READ)
        if sort_by not in SORT_FIELDS:
            raise ValidationError(f"sortBy must be one of: {', '.join(SORT_FIELDS)}")
        sort_order = sort_order.lower()
        if sort_order not in SORT_ORDERS:
            raise ValidationError(f"sortOrder must be one of: {', '.join(SORT_ORDERS)}")
        page = max(1, page)
        limit = min(max(1, limit), MAX_LIMIT)
        search = search.strip() if search and search.strip() else None

        items, total = await self._roles.page(
            page=page,
            limit=limit,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        return RolePage(items=items, total=total, page=page, limit=limit)
