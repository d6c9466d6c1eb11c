"""PostgreSQL role repository implementation."""

from collections import defaultdict
from uuid import UUID

from psycopg import AsyncConnection, sql
from psycopg.errors import UniqueViolation

from rolegate.domain.entities import PermissionRecord, Role, normalize_role_name
from rolegate.domain.exceptions import Conflict

_ROLE_COLUMNS = (
    "id, name, description, system_delete_protection, system_update_protection, "
    "system_permanent_delete_protection, system_permanent_update_protection, "
    "created_by, created_at, deleted_at"
)

_PERMISSION_COLUMNS = (
    "id, role_id, entity_name, description, can_create, can_read, can_update, "
    "can_delete, created_at"
)

_SORT_COLUMNS = {"name": "name", "createdAt": "created_at"}

_NAME_INDEX = "ix_roles_name_upper"


def _build_listing_conditions(search: str | None) -> tuple[list[str], list[object]]:
    """WHERE conditions and params for the active role listing."""
    conditions = ["deleted_at IS NULL"]
    params: list[object] = []
    term = search.strip() if search else ""
    if term:
        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        conditions.append("(name ILIKE %s OR description ILIKE %s)")
        params.extend([f"%{escaped}%", f"%{escaped}%"])
    return conditions, params


def _build_order_by(sort_by: str, sort_order: str) -> sql.Composed:
    """ORDER BY clause; id breaks ties so pages never overlap."""
    direction = sql.SQL("ASC" if sort_order.lower() == "asc" else "DESC")
    return sql.SQL("{} {}, id {}").format(
        sql.Identifier(_SORT_COLUMNS.get(sort_by, "created_at")), direction, direction
    )


def _role_from_row(r: tuple, permissions: list[PermissionRecord]) -> Role:
    return Role(
        id=r[0],
        name=r[1],
        description=r[2],
        system_delete_protection=r[3],
        system_update_protection=r[4],
        system_permanent_delete_protection=r[5],
        system_permanent_update_protection=r[6],
        created_by=r[7],
        created_at=r[8],
        deleted_at=r[9],
        default_permissions=permissions,
    )


def _permission_from_row(r: tuple) -> PermissionRecord:
    return PermissionRecord(
        id=r[0],
        entity_name=r[2],
        description=r[3],
        can_create=r[4],
        can_read=r[5],
        can_update=r[6],
        can_delete=r[7],
        created_at=r[8],
    )


class PostgresRoleRepository:
    """Role repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, role_id: UUID, for_update: bool = False) -> Role | None:
        """Get role by id, trashed roles included.

        for_update takes the row lock, so concurrent writers of one role
        run one after the other and each sees the permissions the previous
        one committed.
        """
        query = f"SELECT {_ROLE_COLUMNS} FROM roles WHERE id = %s"
        if for_update:
            query += " FOR UPDATE"
        cur = await self._conn.execute(query, (role_id,))
        r = await cur.fetchone()
        if not r:
            return None
        permissions = await self._permissions_for([r[0]])
        return _role_from_row(r, permissions.get(r[0], []))

    async def get_by_ids(
        self, role_ids: list[UUID], for_update: bool = False
    ) -> list[Role]:
        """Get roles by ids, trashed roles included. Locks are taken in id order."""
        if not role_ids:
            return []
        query = f"SELECT {_ROLE_COLUMNS} FROM roles WHERE id = ANY(%s)"
        if for_update:
            query += " ORDER BY id FOR UPDATE"
        cur = await self._conn.execute(query, (list(role_ids),))
        return await self._with_permissions(await cur.fetchall())

    async def get_by_name(self, name: str, include_deleted: bool = False) -> Role | None:
        """Get role by name (case-insensitive)."""
        query = f"SELECT {_ROLE_COLUMNS} FROM roles WHERE upper(name) = %s"
        if not include_deleted:
            query += " AND deleted_at IS NULL"
        cur = await self._conn.execute(query, (normalize_role_name(name),))
        r = await cur.fetchone()
        if not r:
            return None
        permissions = await self._permissions_for([r[0]])
        return _role_from_row(r, permissions.get(r[0], []))

    async def get_by_names(self, names: list[str]) -> list[Role]:
        """Get active roles matching any of names (case-insensitive)."""
        if not names:
            return []
        cur = await self._conn.execute(
            f"SELECT {_ROLE_COLUMNS} FROM roles "
            "WHERE upper(name) = ANY(%s) AND deleted_at IS NULL",
            ([normalize_role_name(n) for n in names],),
        )
        return await self._with_permissions(await cur.fetchall())

    async def name_taken(self, name: str, exclude_id: UUID | None = None) -> bool:
        """Whether another role (trashed included) already uses name."""
        cur = await self._conn.execute(
            "SELECT 1 FROM roles WHERE upper(name) = %s "
            "AND (%s::uuid IS NULL OR id <> %s::uuid)",
            (normalize_role_name(name), exclude_id, exclude_id),
        )
        return await cur.fetchone() is not None

    async def create(self, role: Role) -> Role:
        """Create role with its default permissions.

        Raises Conflict when another transaction committed the same name first.
        """
        await self._write_role(
            "INSERT INTO roles (id, name, description, system_delete_protection, "
            "system_update_protection, system_permanent_delete_protection, "
            "system_permanent_update_protection, created_by, created_at, deleted_at) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                role.id,
                role.name,
                role.description,
                role.system_delete_protection,
                role.system_update_protection,
                role.system_permanent_delete_protection,
                role.system_permanent_update_protection,
                role.created_by,
                role.created_at,
                role.deleted_at,
            ),
            role.name,
        )
        await self._insert_permissions(role.id, role.default_permissions)
        return role

    async def update(self, role: Role) -> None:
        """Update role columns (not permissions). A rename onto a taken name raises Conflict."""
        await self._write_role(
            "UPDATE roles SET name=%s, description=%s, system_delete_protection=%s, "
            "system_update_protection=%s, system_permanent_delete_protection=%s, "
            "system_permanent_update_protection=%s WHERE id=%s",
            (
                role.name,
                role.description,
                role.system_delete_protection,
                role.system_update_protection,
                role.system_permanent_delete_protection,
                role.system_permanent_update_protection,
                role.id,
            ),
            role.name,
        )

    async def replace_default_permissions(
        self, role_id: UUID, permissions: list[PermissionRecord]
    ) -> list[PermissionRecord]:
        """Delete all owned permission rows, then insert permissions."""
        await self._conn.execute(
            "DELETE FROM role_permissions WHERE role_id = %s",
            (role_id,),
        )
        await self._insert_permissions(role_id, permissions)
        return permissions

    async def soft_delete(self, role_id: UUID) -> None:
        """Move role to the trash."""
        await self._conn.execute(
            "UPDATE roles SET deleted_at = now() WHERE id = %s",
            (role_id,),
        )

    async def restore(self, role_id: UUID) -> None:
        """Take role out of the trash."""
        await self._conn.execute(
            "UPDATE roles SET deleted_at = NULL WHERE id = %s",
            (role_id,),
        )

    async def hard_delete(self, role_id: UUID) -> None:
        """Delete owned permissions, then the role."""
        await self._conn.execute(
            "DELETE FROM role_permissions WHERE role_id = %s",
            (role_id,),
        )
        await self._conn.execute("DELETE FROM roles WHERE id = %s", (role_id,))

    async def count_users(self, role_id: UUID) -> int:
        """Number of active users holding role."""
        cur = await self._conn.execute(
            "SELECT count(*) FROM user_roles ur JOIN users u ON u.id = ur.user_id "
            "WHERE ur.role_id = %s AND u.deleted_at IS NULL",
            (role_id,),
        )
        r = await cur.fetchone()
        return int(r[0]) if r else 0

    async def list_user_ids(self, role_id: UUID) -> list[UUID]:
        """Ids of active users holding role."""
        cur = await self._conn.execute(
            "SELECT u.id FROM user_roles ur JOIN users u ON u.id = ur.user_id "
            "WHERE ur.role_id = %s AND u.deleted_at IS NULL",
            (role_id,),
        )
        rows = await cur.fetchall()
        return [r[0] for r in rows]

    async def paginate(
        self,
        *,
        page: int,
        limit: int,
        search: str | None = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> tuple[list[Role], int]:
        """Page of non-trashed roles, optionally filtered by name/description."""
        conditions, params = _build_listing_conditions(search)
        where = sql.SQL(" AND ".join(conditions))
        query = sql.SQL(
            "SELECT {cols} FROM roles WHERE {where} ORDER BY {order} LIMIT %s OFFSET %s"
        ).format(
            cols=sql.SQL(_ROLE_COLUMNS),
            where=where,
            order=_build_order_by(sort_by, sort_order),
        )
        cur = await self._conn.execute(query, (*params, limit, (page - 1) * limit))
        roles = await self._with_permissions(await cur.fetchall())

        count_query = sql.SQL("SELECT count(*) FROM roles WHERE {where}").format(where=where)
        cur = await self._conn.execute(count_query, params)
        total = await cur.fetchone()
        return roles, int(total[0]) if total else 0

    async def _write_role(self, query: str, params: tuple, name: str) -> None:
        try:
            await self._conn.execute(query, params)
        except UniqueViolation as e:
            if e.diag.constraint_name == _NAME_INDEX:
                raise Conflict(f"Role already exists: {name}") from e
            raise

    async def _insert_permissions(
        self, role_id: UUID, permissions: list[PermissionRecord]
    ) -> None:
        for p in permissions:
            await self._conn.execute(
                "INSERT INTO role_permissions (id, role_id, entity_name, description, "
                "can_create, can_read, can_update, can_delete, created_at) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, coalesce(%s, now()))",
                (
                    p.id,
                    role_id,
                    p.entity_name,
                    p.description,
                    p.can_create,
                    p.can_read,
                    p.can_update,
                    p.can_delete,
                    p.created_at,
                ),
            )

    async def _permissions_for(self, role_ids: list[UUID]) -> dict[UUID, list[PermissionRecord]]:
        cur = await self._conn.execute(
            f"SELECT {_PERMISSION_COLUMNS} FROM role_permissions "
            "WHERE role_id = ANY(%s) ORDER BY entity_name",
            (list(role_ids),),
        )
        grouped: dict[UUID, list[PermissionRecord]] = defaultdict(list)
        for r in await cur.fetchall():
            grouped[r[1]].append(_permission_from_row(r))
        return grouped

    async def _with_permissions(self, rows: list[tuple]) -> list[Role]:
        if not rows:
            return []
        permissions = await self._permissions_for([r[0] for r in rows])
        return [_role_from_row(r, permissions.get(r[0], [])) for r in rows]
