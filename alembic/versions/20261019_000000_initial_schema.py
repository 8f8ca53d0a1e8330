"""
Initial schema: users, folders and aspirations.

Revision ID: 20261019_000000_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00
"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "20261019_000000_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("aspiration_ids", sa.JSON(), nullable=False),
        sa.Column("folder_ids", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.PrimaryKeyConstraint("id", name="users_pkey"),
        sa.UniqueConstraint("username", name="users_username_key"),
        sa.UniqueConstraint("email", name="users_email_key"),
    )

    op.create_table(
        "folders",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("aspiration_ids", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.PrimaryKeyConstraint("id", name="folders_pkey"),
    )
    op.create_index("idx_folders_username", "folders", ["username"])
    op.create_index("idx_folders_created_at", "folders", ["created_at"])

    op.create_table(
        "aspirations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("folder_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.ForeignKeyConstraint(
            ["folder_id"],
            ["folders.id"],
            ondelete="CASCADE",
            name="aspirations_folder_id_fkey",
        ),
        sa.PrimaryKeyConstraint("id", name="aspirations_pkey"),
    )
    op.create_index("idx_aspirations_username", "aspirations", ["username"])
    op.create_index("idx_aspirations_folder_id", "aspirations", ["folder_id"])
    op.create_index("idx_aspirations_created_at", "aspirations", ["created_at"])


def downgrade() -> None:
    op.drop_table("aspirations")
    op.drop_table("folders")
    op.drop_table("users")
