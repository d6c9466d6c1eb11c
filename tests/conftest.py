"""Pytest fixtures for RoleGate tests."""

from __future__ import annotations

import copy
import fnmatch
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from rolegate.domain.entities import PermissionRecord, Role, User, normalize_role_name
from rolegate.domain.exceptions import Conflict
from rolegate.domain.value_objects import Actor, EntityName
from rolegate.infrastructure.cache.coherency import RedisCacheCoherency
from rolegate.infrastructure.cache.keys import CacheKeys
from rolegate.infrastructure.cache.redis_cache import RedisCacheStore
from rolegate.infrastructure.cache.session_revocation import SessionRevocationStore
from rolegate.infrastructure.permission.permission_checker import RoleGatePermissionChecker


# --- Fake storage ---


@dataclass
class FakeStore:
    """Shared in-memory tables behind every fake repository."""

    roles: dict[UUID, Role] = field(default_factory=dict)
    users: dict[UUID, User] = field(default_factory=dict)
    user_roles: dict[UUID, list[UUID]] = field(default_factory=dict)
    permissions: dict[UUID, list[PermissionRecord]] = field(default_factory=dict)
    locked_roles: list[UUID] = field(default_factory=list)

    def add_role(self, role: Role) -> Role:
        self.roles[role.id] = copy.deepcopy(role)
        return role

    def add_user(self, user: User, roles: list[Role] | None = None) -> User:
        self.users[user.id] = copy.deepcopy(user)
        self.user_roles[user.id] = [r.id for r in roles or []]
        return user


class FakeRoleRepository:
    """In-memory role repository."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store

    async def get_by_id(self, role_id: UUID, for_update: bool = False) -> Role | None:
        if for_update:
            self._store.locked_roles.append(role_id)
        role = self._store.roles.get(role_id)
        return copy.deepcopy(role) if role else None

    async def get_by_ids(self, role_ids: list[UUID], for_update: bool = False) -> list[Role]:
        if for_update:
            self._store.locked_roles.extend(sorted(role_ids))
        return [copy.deepcopy(self._store.roles[i]) for i in role_ids if i in self._store.roles]

    async def get_by_name(self, name: str, include_deleted: bool = False) -> Role | None:
        wanted = normalize_role_name(name)
        for role in self._store.roles.values():
            if role.name.upper() == wanted and (include_deleted or not role.in_trash):
                return copy.deepcopy(role)
        return None

    async def get_by_names(self, names: list[str]) -> list[Role]:
        wanted = {normalize_role_name(n) for n in names}
        return [
            copy.deepcopy(r)
            for r in self._store.roles.values()
            if r.name.upper() in wanted and not r.in_trash
        ]

    async def name_taken(self, name: str, exclude_id: UUID | None = None) -> bool:
        wanted = normalize_role_name(name)
        return any(
            r.name.upper() == wanted and r.id != exclude_id for r in self._store.roles.values()
        )

    def _ensure_name_free(self, role: Role) -> None:
        if any(
            r.name.upper() == role.name.upper() and r.id != role.id
            for r in self._store.roles.values()
        ):
            raise Conflict(f"Role already exists: {role.name}")

    async def create(self, role: Role) -> Role:
        self._ensure_name_free(role)
        self._store.roles[role.id] = copy.deepcopy(role)
        return role

    async def update(self, role: Role) -> None:
        self._ensure_name_free(role)
        stored = self._store.roles[role.id]
        updated = copy.deepcopy(role)
        updated.default_permissions = stored.default_permissions
        updated.deleted_at = stored.deleted_at
        self._store.roles[role.id] = updated

    async def replace_default_permissions(
        self, role_id: UUID, permissions: list[PermissionRecord]
    ) -> list[PermissionRecord]:
        self._store.roles[role_id].default_permissions = copy.deepcopy(permissions)
        return permissions

    async def soft_delete(self, role_id: UUID) -> None:
        self._store.roles[role_id].deleted_at = datetime.now(UTC)

    async def restore(self, role_id: UUID) -> None:
        self._store.roles[role_id].deleted_at = None

    async def hard_delete(self, role_id: UUID) -> None:
        self._store.roles.pop(role_id, None)
        for held in self._store.user_roles.values():
            if role_id in held:
                held.remove(role_id)

    async def count_users(self, role_id: UUID) -> int:
        return len(await self.list_user_ids(role_id))

    async def list_user_ids(self, role_id: UUID) -> list[UUID]:
        return [
            user_id
            for user_id, held in self._store.user_roles.items()
            if role_id in held
            and user_id in self._store.users
            and self._store.users[user_id].deleted_at is None
        ]

    async def paginate(
        self,
        *,
        page: int,
        limit: int,
        search: str | None = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> tuple[list[Role], int]:
        items = [r for r in self._store.roles.values() if not r.in_trash]
        if search:
            term = search.lower()
            items = [
                r
                for r in items
                if term in r.name.lower() or term in (r.description or "").lower()
            ]
        if sort_by == "name":
            items.sort(key=lambda r: r.name, reverse=sort_order == "desc")
        else:
            items.sort(
                key=lambda r: r.created_at or datetime.min.replace(tzinfo=UTC),
                reverse=sort_order == "desc",
            )
        start = (page - 1) * limit
        return [copy.deepcopy(r) for r in items[start : start + limit]], len(items)


class FakeUserRepository:
    """In-memory user repository."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store

    async def get_by_id(self, user_id: UUID) -> User | None:
        user = self._store.users.get(user_id)
        if user is None or user.deleted_at is not None:
            return None
        held = [
            self._store.roles[i]
            for i in self._store.user_roles.get(user_id, [])
            if i in self._store.roles and not self._store.roles[i].in_trash
        ]
        held.sort(key=lambda r: r.name)
        result = copy.deepcopy(user)
        result.roles = [r.name for r in held]
        result.role_ids = [r.id for r in held]
        return result

    async def is_username_available(
        self, username: str, exclude_user_id: UUID | None = None
    ) -> bool:
        wanted = username.strip().lower()
        return not any(
            u.username.lower() == wanted and u.id != exclude_user_id
            for u in self._store.users.values()
        )

    async def set_roles(self, user_id: UUID, role_ids: list[UUID]) -> None:
        self._store.user_roles[user_id] = list(dict.fromkeys(role_ids))


class FakePermissionRepository:
    """In-memory personalized permission repository."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store

    async def list_by_user(self, user_id: UUID) -> list[PermissionRecord]:
        records = self._store.permissions.get(user_id, [])
        return sorted(copy.deepcopy(records), key=lambda p: p.entity_name)

    async def upsert_many(
        self, user_id: UUID, permissions: list[PermissionRecord]
    ) -> list[PermissionRecord]:
        rows = self._store.permissions.setdefault(user_id, [])
        saved = []
        for p in permissions:
            existing = next((r for r in rows if r.entity_name == p.entity_name), None)
            if existing is None:
                existing = copy.deepcopy(p)
                rows.append(existing)
            else:
                existing.can_create = p.can_create
                existing.can_read = p.can_read
                existing.can_update = p.can_update
                existing.can_delete = p.can_delete
                existing.description = p.description
            saved.append(copy.deepcopy(existing))
        return saved

    async def delete_for_user(
        self, user_id: UUID, keep_entity_names: set[str] | None = None
    ) -> None:
        if keep_entity_names is None:
            self._store.permissions.pop(user_id, None)
            return
        self._store.permissions[user_id] = [
            p for p in self._store.permissions.get(user_id, [])
            if p.entity_name in keep_entity_names
        ]


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories over one FakeStore."""

    def __init__(self, store: FakeStore | None = None) -> None:
        self.store = store or FakeStore()
        self.roles = FakeRoleRepository(self.store)
        self.users = FakeUserRepository(self.store)
        self.permissions = FakePermissionRepository(self.store)
        self.committed = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        pass


def make_uow_factory(store: FakeStore):
    """Factory yielding a FakeUnitOfWork over store; counts opened units."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        _factory.opened += 1
        uow = FakeUnitOfWork(store)
        yield uow
        await uow.commit()

    _factory.opened = 0
    return _factory


# --- Fake Redis ---


class FakeRedis:
    """The redis.asyncio subset RedisCacheStore uses. Set ``fail`` to simulate an outage."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise RedisConnectionError("redis is down")

    async def get(self, key: str) -> str | None:
        self._check()
        return self.data.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self._check()
        self.data[key] = value
        self.ttls[key] = ex
        return True

    async def delete(self, *keys: str) -> int:
        self._check()
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                self.ttls.pop(key, None)
                removed += 1
        return removed

    async def scan_iter(self, match: str | None = None, count: int | None = None):
        self._check()
        for key in list(self.data):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key

    async def ping(self) -> bool:
        self._check()
        return True

    async def aclose(self) -> None:
        pass


# --- Builders ---


def make_record(entity: str, *flags: str, description: str | None = None) -> PermissionRecord:
    """PermissionRecord with the given flags set, e.g. make_record("Product", "can_read")."""
    record = PermissionRecord(id=uuid4(), entity_name=entity, description=description)
    for flag in flags:
        setattr(record, flag, True)
    return record


def make_role(name: str, *records: PermissionRecord, **kwargs) -> Role:
    return Role(
        id=uuid4(),
        name=name,
        default_permissions=list(records),
        created_at=kwargs.pop("created_at", datetime.now(UTC)),
        **kwargs,
    )


ALL_FLAGS = ("can_create", "can_read", "can_update", "can_delete")


def full_access_records() -> list[PermissionRecord]:
    return [make_record(e.value, *ALL_FLAGS) for e in EntityName]


# --- Fixtures ---


@pytest.fixture
def store() -> FakeStore:
    """Fresh in-memory tables for each test."""
    return FakeStore()


@pytest.fixture
def uow_factory(store: FakeStore):
    """Factory returning async context manager with FakeUnitOfWork."""
    return make_uow_factory(store)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def keys() -> CacheKeys:
    return CacheKeys("test")


@pytest.fixture
def cache(fake_redis: FakeRedis) -> RedisCacheStore:
    return RedisCacheStore(fake_redis, default_ttl=60)


@pytest.fixture
def sessions(cache: RedisCacheStore, keys: CacheKeys) -> SessionRevocationStore:
    return SessionRevocationStore(cache, keys, ttl_seconds=3600)


@pytest.fixture
def coherency(
    cache: RedisCacheStore, keys: CacheKeys, sessions: SessionRevocationStore
) -> RedisCacheCoherency:
    return RedisCacheCoherency(cache, keys, sessions)


@pytest.fixture
def permission_checker(uow_factory, cache: RedisCacheStore, keys: CacheKeys):
    """Real merge engine over the fake store and fake Redis."""
    return RoleGatePermissionChecker(uow_factory, cache, keys)


@pytest.fixture
def mock_permission_checker():
    """AsyncMock for PermissionChecker - returns True by default."""
    mock = AsyncMock()
    mock.check.return_value = True
    return mock


@pytest.fixture
def mock_coherency():
    """AsyncMock for CacheCoherency - records invalidation calls."""
    return AsyncMock()


@pytest.fixture
def super_admin_role(store: FakeStore) -> Role:
    return store.add_role(make_role("SUPER ADMIN", *full_access_records()))


@pytest.fixture
def admin_actor() -> Actor:
    """Actor holding ADMIN; authorization is mocked in use case tests."""
    return Actor(id=uuid4(), roles=["ADMIN"], username="admin")


@pytest.fixture
def super_admin_actor() -> Actor:
    return Actor(id=uuid4(), roles=["SUPER ADMIN"], username="root")
