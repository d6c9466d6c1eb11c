"""Unit of Work port - transactional boundary."""

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from rolegate.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from rolegate.application.ports.repositories.role_repository import RoleRepository
from rolegate.application.ports.repositories.user_repository import UserRepository


class UnitOfWork(Protocol):
    """Role, user and personalized-permission stores inside one transaction."""

    roles: RoleRepository
    users: UserRepository
    permissions: PermissionRepository

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Opens a unit of work; leaving the block commits, an exception rolls back."""

    def __call__(self) -> AbstractAsyncContextManager[UnitOfWork]: ...
