"""Fixtures for API tests."""

from uuid import uuid4

import pytest
from falcon.testing import TestClient

from rolegate.application.use_cases.permission.get_effective_permissions import (
    CheckPermissionUseCase,
    GetEffectivePermissionsUseCase,
)
from rolegate.application.use_cases.permission.get_user_permissions import (
    GetUserPermissionsUseCase,
)
from rolegate.application.use_cases.permission.revoke_user_permissions import (
    RevokeUserPermissionsUseCase,
)
from rolegate.application.use_cases.permission.update_user_permission import (
    UpdateUserPermissionUseCase,
)
from rolegate.application.use_cases.role.create_role import CreateRoleUseCase
from rolegate.application.use_cases.role.get_role import GetRoleUseCase
from rolegate.application.use_cases.role.hard_delete_roles import HardDeleteRolesUseCase
from rolegate.application.use_cases.role.list_roles import ListRolesUseCase
from rolegate.application.use_cases.role.restore_roles import RestoreRolesUseCase
from rolegate.application.use_cases.role.soft_delete_roles import SoftDeleteRolesUseCase
from rolegate.application.use_cases.role.update_role import UpdateRoleUseCase
from rolegate.application.use_cases.user.assign_user_roles import AssignUserRolesUseCase
from rolegate.application.use_cases.user.check_username import (
    CheckUsernameAvailabilityUseCase,
)
from rolegate.domain.entities import User
from rolegate.domain.value_objects import Actor
from rolegate.infrastructure.cache.role_reader import CachedRoleReader
from rolegate.interfaces.api.app import Resources, create_app
from rolegate.interfaces.api.resources.health import HealthResource
from rolegate.interfaces.api.resources.me import MyPermissionsResource
from rolegate.interfaces.api.resources.permissions import UserPermissionsResource
from rolegate.interfaces.api.resources.roles import (
    RoleResource,
    RoleRestoreResource,
    RolesResource,
    RoleTrashResource,
)
from rolegate.interfaces.api.resources.users import (
    UsernameAvailabilityResource,
    UserRolesResource,
)

from tests.conftest import FakeStore, full_access_records, make_record, make_role


class AuthBypassMiddleware:
    """Middleware that sets context.user to a fixed actor (None = anonymous)."""

    def __init__(self, actor: Actor | None) -> None:
        self.actor = actor

    async def process_request(self, req, resp):
        req.context.user = self.actor


@pytest.fixture
def admin_role(store: FakeStore):
    return store.add_role(make_role("ADMIN", *full_access_records()))


@pytest.fixture
def customer_role(store: FakeStore):
    return store.add_role(make_role("CUSTOMER", make_record("Product", "can_read")))


@pytest.fixture
def admin_user(store: FakeStore, admin_role) -> User:
    return store.add_user(User(id=uuid4(), username="admin", roles=["ADMIN"]), [admin_role])


@pytest.fixture
def customer(store: FakeStore, customer_role) -> User:
    return store.add_user(
        User(id=uuid4(), username="carol", roles=["CUSTOMER"]), [customer_role]
    )


@pytest.fixture
def auth(admin_user: User) -> AuthBypassMiddleware:
    """Requests run as admin_user unless a test swaps auth.actor."""
    return AuthBypassMiddleware(admin_user.as_actor())


@pytest.fixture
def app(uow_factory, cache, keys, coherency, permission_checker, auth):
    """Falcon ASGI app over the in-memory store and fake Redis."""
    writes = dict(
        unit_of_work_factory=uow_factory,
        permission_checker=permission_checker,
        cache_coherency=coherency,
    )
    role_reader = CachedRoleReader(uow_factory, cache, keys)
    get_user_permissions = GetUserPermissionsUseCase(uow_factory, permission_checker)

    async def database_check() -> bool:
        return True

    resources = Resources(
        health=HealthResource(database_check, cache),
        roles=RolesResource(
            ListRolesUseCase(role_reader, permission_checker),
            CreateRoleUseCase(**writes),
        ),
        role=RoleResource(
            GetRoleUseCase(role_reader, permission_checker),
            UpdateRoleUseCase(**writes),
            SoftDeleteRolesUseCase(**writes),
        ),
        role_trash=RoleTrashResource(HardDeleteRolesUseCase(**writes)),
        role_restore=RoleRestoreResource(RestoreRolesUseCase(**writes)),
        user_permissions=UserPermissionsResource(
            get_user_permissions,
            UpdateUserPermissionUseCase(**writes),
            RevokeUserPermissionsUseCase(**writes),
        ),
        user_roles=UserRolesResource(AssignUserRolesUseCase(**writes)),
        username_availability=UsernameAvailabilityResource(
            CheckUsernameAvailabilityUseCase(uow_factory)
        ),
        my_permissions=MyPermissionsResource(
            get_user_permissions,
            GetEffectivePermissionsUseCase(permission_checker),
            CheckPermissionUseCase(permission_checker),
        ),
    )
    return create_app(resources, middleware=[auth], production=True)


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)
