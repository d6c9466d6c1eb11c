"""Initial schema - roles, role permissions, users, user roles, overrides.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ENTITY_NAMES = (
    "User", "Brand", "Category", "Permission", "Product", "Product Review",
    "Shipping Class", "Sub Category", "Tax Class", "Tax Status", "FAQ",
    "News Letter", "Pop Up Banner", "Privacy & Policy", "Terms & Conditions",
    "Order", "Role", "Notification", "Media",
)

# name, description, delete, update, permanent delete, permanent update
SYSTEM_ROLES = (
    ("SUPER ADMIN", "Unrestricted access to every entity", True, True, True, True),
    ("ADMIN", "Store administration", True, False, False, False),
    ("INVENTORY MANAGER", "Catalog and stock management", True, False, False, False),
    ("CUSTOMER SUPPORT", "Order and customer assistance", True, False, False, False),
    ("CUSTOMER", "Registered shopper", True, False, False, False),
)


def _crud_columns() -> list[sa.Column]:
    return [
        sa.Column("can_create", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("can_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("can_update", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("can_delete", sa.Boolean(), nullable=False, server_default=sa.false()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("can_update_permissions", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("can_update_role", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.execute("CREATE UNIQUE INDEX ix_users_username_lower ON users (lower(username))")

    op.create_table(
        "roles",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("system_delete_protection", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("system_update_protection", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("system_permanent_delete_protection", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("system_permanent_update_protection", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_by", sa.UUID(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.execute("CREATE UNIQUE INDEX ix_roles_name_upper ON roles (upper(name))")
    op.create_index("ix_roles_deleted_at", "roles", ["deleted_at"])

    op.create_table(
        "role_permissions",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("roles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("entity_name", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_crud_columns(),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("role_id", "entity_name", name="uq_role_permissions_role_entity"),
    )

    op.create_table(
        "user_roles",
        sa.Column("user_id", sa.UUID(), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_index("ix_user_roles_role_id", "user_roles", ["role_id"])

    op.create_table(
        "permissions",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("user_id", sa.UUID(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("entity_name", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_crud_columns(),
        sa.Column("created_by", sa.UUID(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "entity_name", name="uq_permissions_user_entity"),
    )

    role_rows = ",\n".join(
        f"(gen_random_uuid(), '{name}', '{description}', {d}, {u}, {pd}, {pu})"
        for name, description, d, u, pd, pu in SYSTEM_ROLES
    )
    op.execute(f"""
        INSERT INTO roles (id, name, description, system_delete_protection,
            system_update_protection, system_permanent_delete_protection,
            system_permanent_update_protection)
        VALUES {role_rows}
    """)
    entities = ", ".join(f"('{e}')" for e in ENTITY_NAMES)
    op.execute(f"""
        INSERT INTO role_permissions (id, role_id, entity_name, description,
            can_create, can_read, can_update, can_delete)
        SELECT gen_random_uuid(), r.id, e.name, e.name || ' permission for ' || r.name,
            true, true, true, true
        FROM roles r CROSS JOIN (VALUES {entities}) AS e(name)
        WHERE r.name = 'SUPER ADMIN'
    """)


def downgrade() -> None:
    op.drop_table("permissions")
    op.drop_table("user_roles")
    op.drop_table("role_permissions")
    op.drop_table("roles")
    op.drop_table("users")
