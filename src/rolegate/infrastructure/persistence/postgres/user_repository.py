"""PostgreSQL user repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from rolegate.domain.entities import User


class PostgresUserRepository:
    """User repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, user_id: UUID) -> User | None:
        """Get active user with the names of its active roles."""
        cur = await self._conn.execute(
            "SELECT id, username, email, can_update_permissions, can_update_role, "
            "created_at, deleted_at FROM users WHERE id = %s AND deleted_at IS NULL",
            (user_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        cur = await self._conn.execute(
            "SELECT r.id, r.name FROM user_roles ur JOIN roles r ON r.id = ur.role_id "
            "WHERE ur.user_id = %s AND r.deleted_at IS NULL ORDER BY r.name",
            (user_id,),
        )
        roles = await cur.fetchall()
        return User(
            id=r[0],
            username=r[1],
            email=r[2],
            can_update_permissions=r[3],
            can_update_role=r[4],
            created_at=r[5],
            deleted_at=r[6],
            role_ids=[row[0] for row in roles],
            roles=[row[1] for row in roles],
        )

    async def is_username_available(
        self, username: str, exclude_user_id: UUID | None = None
    ) -> bool:
        """True if no other user (trashed included) has username, case-insensitive."""
        cur = await self._conn.execute(
            "SELECT 1 FROM users WHERE lower(username) = lower(%s) "
            "AND (%s::uuid IS NULL OR id <> %s::uuid)",
            (username.strip(), exclude_user_id, exclude_user_id),
        )
        return await cur.fetchone() is None

    async def set_roles(self, user_id: UUID, role_ids: list[UUID]) -> None:
        """Replace the roles held by user."""
        await self._conn.execute(
            "DELETE FROM user_roles WHERE user_id = %s",
            (user_id,),
        )
        for role_id in dict.fromkeys(role_ids):
            await self._conn.execute(
                "INSERT INTO user_roles (user_id, role_id) VALUES (%s, %s)",
                (user_id, role_id),
            )
