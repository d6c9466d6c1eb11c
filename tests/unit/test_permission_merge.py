"""Unit tests for the pure permission merge rules."""

from rolegate.domain.permission_merge import (
    decide,
    effective_permissions,
    find_for_entity,
    fold_role_permissions,
    merge_role_permissions,
)
from rolegate.domain.value_objects import PermissionAction

from tests.conftest import make_record


def test_merge_ors_flags_across_roles() -> None:
    merged = merge_role_permissions(
        [
            make_record("Product", "can_read"),
            make_record("product", "can_update"),
            make_record("Order", "can_read"),
        ]
    )
    assert set(merged) == {"product", "order"}
    product = merged["product"]
    assert product.can_read and product.can_update
    assert not product.can_create and not product.can_delete


def test_merge_keeps_first_id_and_fills_description() -> None:
    first = make_record("Product", "can_read")
    second = make_record("Product", "can_delete", description="from second")
    merged = merge_role_permissions([first, second])["product"]
    assert merged.id == first.id
    assert merged.description == "from second"


def test_merge_does_not_mutate_inputs() -> None:
    first = make_record("Product", "can_read")
    merge_role_permissions([first, make_record("Product", "can_delete")])
    assert not first.can_delete


def test_decide_role_or_merge() -> None:
    roles = [make_record("Product", "can_read"), make_record("Product", "can_update")]
    assert decide([], roles, "Product", PermissionAction.UPDATE)
    assert decide([], roles, "product", PermissionAction.READ)
    assert not decide([], roles, "Product", PermissionAction.DELETE)


def test_decide_entity_not_mentioned_is_denied() -> None:
    assert not decide([], [make_record("Order", "can_read")], "Product", PermissionAction.READ)
    assert not decide([], [], "Product", PermissionAction.READ)


def test_personal_override_denies_despite_role_grant() -> None:
    personal = [make_record("Product")]
    roles = [make_record("Product", "can_read", "can_update")]
    assert not decide(personal, roles, "Product", PermissionAction.READ)


def test_personal_override_grants_despite_role_denial() -> None:
    personal = [make_record("Product", "can_delete")]
    assert decide(personal, [make_record("Product")], "Product", PermissionAction.DELETE)


def test_override_for_other_entity_falls_through_to_roles() -> None:
    personal = [make_record("Order")]
    roles = [make_record("Product", "can_read")]
    assert decide(personal, roles, "Product", PermissionAction.READ)


def test_find_for_entity_case_insensitive() -> None:
    record = make_record("Tax Class")
    assert find_for_entity([record], "TAX CLASS") is record
    assert find_for_entity([record], "Tax Status") is None


def test_effective_permissions_one_record_per_entity() -> None:
    personal = [make_record("Product")]
    roles = [
        make_record("Product", "can_read"),
        make_record("Order", "can_read"),
        make_record("order", "can_update"),
    ]
    result = effective_permissions(personal, roles)
    assert [r.entity_name.lower() for r in result] == ["order", "product"]
    order, product = result
    assert order.can_read and order.can_update
    assert product is personal[0]


def test_fold_keeps_unmentioned_and_replaces_mentioned() -> None:
    keep = make_record("Order", "can_read")
    old = make_record("Product", "can_read")
    new = make_record("PRODUCT", "can_delete")
    folded = fold_role_permissions([keep, old], [new])
    assert len(folded) == 2
    assert keep in folded
    assert new in folded
    assert old not in folded


def test_fold_never_duplicates_entity() -> None:
    folded = fold_role_permissions([], [make_record("Brand"), make_record("brand", "can_read")])
    assert len(folded) == 1
    assert folded[0].can_read
