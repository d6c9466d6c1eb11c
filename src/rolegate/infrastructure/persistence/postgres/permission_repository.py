"""PostgreSQL personalized permission repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from rolegate.domain.entities import PermissionRecord

_COLUMNS = (
    "id, entity_name, description, can_create, can_read, can_update, can_delete, "
    "created_at, created_by"
)


def _from_row(r: tuple) -> PermissionRecord:
    return PermissionRecord(
        id=r[0],
        entity_name=r[1],
        description=r[2],
        can_create=r[3],
        can_read=r[4],
        can_update=r[5],
        can_delete=r[6],
        created_at=r[7],
        created_by=r[8],
    )


class PostgresPermissionRepository:
    """Permission repository implementation (user overrides)."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_by_user(self, user_id: UUID) -> list[PermissionRecord]:
        """List personalized permissions for user."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permissions WHERE user_id = %s ORDER BY entity_name",
            (user_id,),
        )
        rows = await cur.fetchall()
        return [_from_row(r) for r in rows]

    async def upsert_many(
        self, user_id: UUID, permissions: list[PermissionRecord]
    ) -> list[PermissionRecord]:
        """Insert or update one row per (user, entity); existing ids are kept."""
        saved: list[PermissionRecord] = []
        for p in permissions:
            cur = await self._conn.execute(
                "INSERT INTO permissions (id, user_id, entity_name, description, "
                "can_create, can_read, can_update, can_delete, created_at, created_by) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, coalesce(%s, now()), %s) "
                "ON CONFLICT (user_id, entity_name) DO UPDATE SET "
                "description = EXCLUDED.description, can_create = EXCLUDED.can_create, "
                "can_read = EXCLUDED.can_read, can_update = EXCLUDED.can_update, "
                f"can_delete = EXCLUDED.can_delete RETURNING {_COLUMNS}",
                (
                    p.id,
                    user_id,
                    p.entity_name,
                    p.description,
                    p.can_create,
                    p.can_read,
                    p.can_update,
                    p.can_delete,
                    p.created_at,
                    p.created_by,
                ),
            )
            r = await cur.fetchone()
            saved.append(_from_row(r))
        return saved

    async def delete_for_user(
        self, user_id: UUID, keep_entity_names: set[str] | None = None
    ) -> None:
        """Delete user's overrides, optionally keeping some entities."""
        if keep_entity_names is None:
            await self._conn.execute(
                "DELETE FROM permissions WHERE user_id = %s",
                (user_id,),
            )
            return
        await self._conn.execute(
            "DELETE FROM permissions WHERE user_id = %s AND NOT (entity_name = ANY(%s))",
            (user_id, sorted(keep_entity_names)),
        )
