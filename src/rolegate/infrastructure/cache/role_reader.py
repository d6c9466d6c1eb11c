"""Cache-then-database role reads."""

from typing import Any
from uuid import UUID

from rolegate.domain.entities import Role
from rolegate.infrastructure.cache.keys import CacheKeys
from rolegate.infrastructure.cache.redis_cache import RedisCacheStore
from rolegate.infrastructure.cache.serialization import (
    optional_role_from_dict,
    optional_role_to_dict,
    role_from_dict,
    role_to_dict,
)


def _page_to_dict(result: tuple[list[Role], int]) -> dict[str, Any]:
    roles, total = result
    return {"items": [role_to_dict(r) for r in roles], "total": total}


def _page_from_dict(d: dict[str, Any]) -> tuple[list[Role], int]:
    return [role_from_dict(r) for r in d["items"]], int(d["total"])


class CachedRoleReader:
    """Serves role:{id} and paginated listings from Redis, loading on miss."""

    def __init__(
        self,
        unit_of_work_factory: type,
        cache: RedisCacheStore,
        keys: CacheKeys,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = cache
        self._keys = keys

    async def get(self, role_id: UUID) -> Role | None:
        async def load() -> Role | None:
            async with self._uow_factory() as uow:
                return await uow.roles.get_by_id(role_id)

        return await self._cache.get_or_load(
            self._keys.role(role_id),
            load,
            encode=optional_role_to_dict,
            decode=optional_role_from_dict,
        )

    async def page(
        self,
        *,
        page: int,
        limit: int,
        search: str | None,
        sort_by: str,
        sort_order: str,
    ) -> tuple[list[Role], int]:
        async def load() -> tuple[list[Role], int]:
            async with self._uow_factory() as uow:
                return await uow.roles.paginate(
                    page=page,
                    limit=limit,
                    search=search,
                    sort_by=sort_by,
                    sort_order=sort_order,
                )

        return await self._cache.get_or_load(
            self._keys.roles_page(page, limit, search, sort_by, sort_order),
            load,
            encode=_page_to_dict,
            decode=_page_from_dict,
        )
