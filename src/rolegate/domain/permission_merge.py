"""Permission merge rules.

Pure functions shared by the permission checker and the role use cases:

* role defaults are OR-merged per entity across every held role;
* a personalized record for an entity overrides the role result for that
  entity, both to allow and to deny;
* role updates fold the caller's records into the existing set by entity
  name, so a role never holds two records for the same entity.
"""

from collections.abc import Iterable
from dataclasses import replace

from rolegate.domain.entities import PermissionRecord
from rolegate.domain.value_objects import PermissionAction


def find_for_entity(
    records: Iterable[PermissionRecord], entity_name: str
) -> PermissionRecord | None:
    """First record whose entity name matches (case-insensitive)."""
    for record in records:
        if record.matches(entity_name):
            return record
    return None


def merge_role_permissions(
    records: Iterable[PermissionRecord],
) -> dict[str, PermissionRecord]:
    """Group by entity name and OR every CRUD flag.

    Keys are lowercased entity names. Id and description come from the
    first record seen for the entity.
    """
    merged: dict[str, PermissionRecord] = {}
    for record in records:
        key = record.entity_name.lower()
        current = merged.get(key)
        if current is None:
            merged[key] = replace(record)
            continue
        merged[key] = replace(
            current,
            description=current.description or record.description,
            can_create=current.can_create or record.can_create,
            can_read=current.can_read or record.can_read,
            can_update=current.can_update or record.can_update,
            can_delete=current.can_delete or record.can_delete,
        )
    return merged


def decide(
    personalized: list[PermissionRecord],
    role_records: Iterable[PermissionRecord],
    entity_name: str,
    action: PermissionAction,
) -> bool:
    """Authorization decision for one entity and action."""
    override = find_for_entity(personalized, entity_name)
    if override is not None:
        return override.allows(action)
    merged = merge_role_permissions(role_records)
    record = merged.get(entity_name.lower())
    return record.allows(action) if record else False


def effective_permissions(
    personalized: list[PermissionRecord],
    role_records: Iterable[PermissionRecord],
) -> list[PermissionRecord]:
    """Merged role view with personalized records replacing their entity."""
    merged = merge_role_permissions(role_records)
    for record in personalized:
        merged[record.entity_name.lower()] = record
    return sorted(merged.values(), key=lambda r: r.entity_name.lower())


def fold_role_permissions(
    existing: Iterable[PermissionRecord],
    incoming: Iterable[PermissionRecord],
) -> list[PermissionRecord]:
    """Existing records not mentioned by incoming are kept; incoming wins per entity."""
    folded: dict[str, PermissionRecord] = {}
    for record in existing:
        folded[record.entity_name.lower()] = record
    for record in incoming:
        folded[record.entity_name.lower()] = record
    return list(folded.values())
