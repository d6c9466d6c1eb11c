"""PostgreSQL Unit of Work implementation."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool

from rolegate.infrastructure.persistence.postgres.permission_repository import (
    PostgresPermissionRepository,
)
from rolegate.infrastructure.persistence.postgres.role_repository import (
    PostgresRoleRepository,
)
from rolegate.infrastructure.persistence.postgres.user_repository import (
    PostgresUserRepository,
)

logger = logging.getLogger(__name__)


class PostgresUnitOfWork:
    """Role, user and permission repositories sharing one pooled connection.

    Everything done through one instance belongs to a single transaction;
    the factory below decides whether it is committed.
    """

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn
        self.roles = PostgresRoleRepository(conn)
        self.users = PostgresUserRepository(conn)
        self.permissions = PostgresPermissionRepository(conn)

    async def commit(self) -> None:
        await self._conn.commit()

    async def rollback(self) -> None:
        await self._conn.rollback()


def create_uow_factory(
    pool: AsyncConnectionPool, *, timeout: float | None = None
) -> object:
    """Factory of units of work: commit when the block exits cleanly, roll back otherwise.

    timeout bounds the wait for a free pool connection.
    """

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        async with pool.connection(timeout=timeout) as conn:
            uow = PostgresUnitOfWork(conn)
            try:
                yield uow
            except BaseException:
                logger.debug("Rolling back unit of work")
                await uow.rollback()
                raise
            await uow.commit()

    return factory
