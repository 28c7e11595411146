"""Initial schema: users and generations.

Idempotent: app startup runs Base.metadata.create_all before upgrading, so
tables that already exist are left alone.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    existing = set(sa.inspect(op.get_bind()).get_table_names())

    if "users" not in existing:
        op.create_table(
            "users",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("email", sa.String(255), nullable=False),
            sa.Column("name", sa.String(50), nullable=False),
            sa.Column("hashed_password", sa.String(), nullable=False),
            sa.Column("plan_tier", sa.String(), nullable=False, server_default="free"),
            sa.Column("generations_count", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        )
        op.create_index("ix_users_id", "users", ["id"])
        op.create_index("ix_users_email", "users", ["email"], unique=True)

    if "generations" not in existing:
        op.create_table(
            "generations",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
            sa.Column("prompt", sa.Text(), nullable=False),
            sa.Column("tone", sa.String(32), nullable=False),
            sa.Column("audience", sa.String(200), nullable=False),
            sa.Column("content_json", sa.Text(), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index("ix_generations_id", "generations", ["id"])
        op.create_index("ix_generations_user_id", "generations", ["user_id"])
        op.create_index("ix_generations_created_at", "generations", ["created_at"])


def downgrade() -> None:
    op.drop_table("generations")
    op.drop_table("users")
