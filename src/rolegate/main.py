"""Application entry point and composition root."""

import argparse
import logging
import sys

from rolegate import __version__
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
from rolegate.config import Settings, get_settings
from rolegate.infrastructure.auth.keycloak_provider import KeycloakProvider
from rolegate.infrastructure.auth.session_resolver import SessionResolver
from rolegate.infrastructure.cache.coherency import RedisCacheCoherency
from rolegate.infrastructure.cache.keys import CacheKeys
from rolegate.infrastructure.cache.redis_cache import RedisCacheStore
from rolegate.infrastructure.cache.redis_client import create_redis
from rolegate.infrastructure.cache.role_reader import CachedRoleReader
from rolegate.infrastructure.cache.session_revocation import SessionRevocationStore
from rolegate.infrastructure.permission.permission_checker import RoleGatePermissionChecker
from rolegate.infrastructure.persistence.postgres.connection import (
    check_connection,
    create_pool,
)
from rolegate.infrastructure.persistence.postgres.unit_of_work import (
    create_uow_factory,
)
from rolegate.interfaces.api.app import Resources, create_app
from rolegate.interfaces.api.middleware.auth import AuthMiddleware
from rolegate.interfaces.api.middleware.cors import CORSMiddleware
from rolegate.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
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

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Root handler on stderr with a timestamped format."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
        force=True,
    )


def create_rolegate_app(settings: Settings | None = None):
    """Composition root - build Falcon app with all dependencies."""
    settings = settings or get_settings()
    pool = create_pool(
        settings.database_url,
        min_size=settings.database_pool_min_size,
        max_size=settings.database_pool_max_size,
    )
    uow_factory = create_uow_factory(pool, timeout=settings.database_pool_timeout_seconds)

    redis = create_redis(settings.redis_url, max_connections=settings.redis_max_connections)
    cache = RedisCacheStore(redis, default_ttl=settings.cache_ttl_seconds)
    keys = CacheKeys(settings.cache_prefix)
    sessions = SessionRevocationStore(
        cache, keys, ttl_seconds=settings.session_revocation_ttl_seconds
    )
    coherency = RedisCacheCoherency(cache, keys, sessions)
    permission_checker = RoleGatePermissionChecker(uow_factory, cache, keys)
    role_reader = CachedRoleReader(uow_factory, cache, keys)
    session_resolver = SessionResolver(uow_factory, cache, keys, sessions)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("KEYCLOAK_CLIENT_SECRET is not set; every request is anonymous")

    writes = dict(
        unit_of_work_factory=uow_factory,
        permission_checker=permission_checker,
        cache_coherency=coherency,
    )
    get_user_permissions = GetUserPermissionsUseCase(uow_factory, permission_checker)

    resources = Resources(
        health=HealthResource(lambda: check_connection(pool), cache),
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

    return create_app(
        resources,
        middleware=[
            CORSMiddleware(settings.cors_origin_list),
            PoolLifespanMiddleware(pool, redis),
            AuthMiddleware(keycloak, session_resolver),
        ],
        production=settings.is_production,
    )


def run_server(host: str, port: int) -> None:
    """Run uvicorn server."""
    import uvicorn

    uvicorn.run(create_rolegate_app(), host=host, port=port, log_config=None)


def main() -> None:
    """CLI entry point."""
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="rolegate", description="RoleGate RBAC service")
    parser.add_argument("--version", action="version", version=f"rolegate {__version__}")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    args = parser.parse_args()

    configure_logging(settings.log_level)
    logger.info("Starting RoleGate v%s (%s)", __version__, settings.environment)
    run_server(args.host, args.port)
