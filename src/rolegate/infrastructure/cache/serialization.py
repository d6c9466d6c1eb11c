"""Projection <-> JSON dict conversion for cached values."""

from datetime import datetime
from typing import Any
from uuid import UUID

from rolegate.domain.entities import PermissionRecord, Role, User


def _dt(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _uuid(value: str | None) -> UUID | None:
    return UUID(value) if value else None


def permission_to_dict(p: PermissionRecord) -> dict[str, Any]:
    return {
        "id": str(p.id),
        "entityName": p.entity_name,
        "description": p.description,
        "canCreate": p.can_create,
        "canRead": p.can_read,
        "canUpdate": p.can_update,
        "canDelete": p.can_delete,
        "createdAt": _dt(p.created_at),
        "createdBy": str(p.created_by) if p.created_by else None,
    }


def permission_from_dict(d: dict[str, Any]) -> PermissionRecord:
    return PermissionRecord(
        id=UUID(d["id"]),
        entity_name=d["entityName"],
        description=d.get("description"),
        can_create=bool(d.get("canCreate")),
        can_read=bool(d.get("canRead")),
        can_update=bool(d.get("canUpdate")),
        can_delete=bool(d.get("canDelete")),
        created_at=_parse_dt(d.get("createdAt")),
        created_by=_uuid(d.get("createdBy")),
    )


def permissions_to_list(records: list[PermissionRecord]) -> list[dict[str, Any]]:
    return [permission_to_dict(p) for p in records]


def permissions_from_list(items: list[dict[str, Any]]) -> list[PermissionRecord]:
    return [permission_from_dict(d) for d in items]


def role_to_dict(r: Role) -> dict[str, Any]:
    return {
        "id": str(r.id),
        "name": r.name,
        "description": r.description,
        "defaultPermissions": permissions_to_list(r.default_permissions),
        "systemDeleteProtection": r.system_delete_protection,
        "systemUpdateProtection": r.system_update_protection,
        "systemPermanentDeleteProtection": r.system_permanent_delete_protection,
        "systemPermanentUpdateProtection": r.system_permanent_update_protection,
        "createdBy": str(r.created_by) if r.created_by else None,
        "createdAt": _dt(r.created_at),
        "deletedAt": _dt(r.deleted_at),
    }


def role_from_dict(d: dict[str, Any]) -> Role:
    return Role(
        id=UUID(d["id"]),
        name=d["name"],
        description=d.get("description"),
        default_permissions=permissions_from_list(d.get("defaultPermissions") or []),
        system_delete_protection=bool(d.get("systemDeleteProtection")),
        system_update_protection=bool(d.get("systemUpdateProtection")),
        system_permanent_delete_protection=bool(d.get("systemPermanentDeleteProtection")),
        system_permanent_update_protection=bool(d.get("systemPermanentUpdateProtection")),
        created_by=_uuid(d.get("createdBy")),
        created_at=_parse_dt(d.get("createdAt")),
        deleted_at=_parse_dt(d.get("deletedAt")),
    )


def optional_role_to_dict(r: Role | None) -> dict[str, Any] | None:
    return role_to_dict(r) if r else None


def optional_role_from_dict(d: dict[str, Any] | None) -> Role | None:
    return role_from_dict(d) if d else None


def user_to_dict(u: User) -> dict[str, Any]:
    return {
        "id": str(u.id),
        "username": u.username,
        "email": u.email,
        "roles": list(u.roles),
        "roleIds": [str(i) for i in u.role_ids],
        "canUpdatePermissions": u.can_update_permissions,
        "canUpdateRole": u.can_update_role,
        "createdAt": _dt(u.created_at),
    }


def user_from_dict(d: dict[str, Any]) -> User:
    return User(
        id=UUID(d["id"]),
        username=d["username"],
        email=d.get("email"),
        roles=list(d.get("roles") or []),
        role_ids=[UUID(i) for i in d.get("roleIds") or []],
        can_update_permissions=bool(d.get("canUpdatePermissions")),
        can_update_role=bool(d.get("canUpdateRole")),
        created_at=_parse_dt(d.get("createdAt")),
    )
