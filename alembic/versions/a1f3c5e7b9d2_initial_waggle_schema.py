"""Initial Waggle schema

Revision ID: a1f3c5e7b9d2
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1f3c5e7b9d2"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "dog_likes",
        sa.Column("dog_id", sa.String(128), primary_key=True),
        sa.Column("likes", sa.JSON(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")),
    )

    op.create_table(
        "dogs",
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("name", sa.String(100), nullable=True),
        sa.Column("owner_id", sa.String(128), nullable=True),
        sa.Column("breed", sa.String(100), nullable=True),
        sa.Column("gender", sa.String(20), nullable=True),
        sa.Column("photo_url", sa.String(500), nullable=True),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("display_name", sa.String(100), nullable=True),
        sa.Column("push_token", sa.String(255), nullable=True),
    )

    op.create_table(
        "matches",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("pair_key", sa.String(300), nullable=True, unique=True),
        sa.Column("participants", sa.JSON(), nullable=False),
        sa.Column("dog1_id", sa.String(128), nullable=False),
        sa.Column("dog2_id", sa.String(128), nullable=False),
        sa.Column("dog1_owner_id", sa.String(128), nullable=False),
        sa.Column("dog2_owner_id", sa.String(128), nullable=False),
        sa.Column("initiated_by", sa.String(128), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")),
        sa.Column("last_activity", sa.DateTime(), nullable=False, server_default=sa.text("now()")),
        sa.Column("responded_at", sa.DateTime(), nullable=True),
        sa.Column("responded_by", sa.String(128), nullable=True),
    )

    op.create_index("idx_dogs_owner_id", "dogs", ["owner_id"])
    op.create_index("idx_matches_dog1_id", "matches", ["dog1_id"])
    op.create_index("idx_matches_dog2_id", "matches", ["dog2_id"])
    op.create_index("idx_matches_dog1_owner_id", "matches", ["dog1_owner_id"])
    op.create_index("idx_matches_dog2_owner_id", "matches", ["dog2_owner_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_matches_dog2_owner_id", table_name="matches")
    op.drop_index("idx_matches_dog1_owner_id", table_name="matches")
    op.drop_index("idx_matches_dog2_id", table_name="matches")
    op.drop_index("idx_matches_dog1_id", table_name="matches")
    op.drop_index("idx_dogs_owner_id", table_name="dogs")
    op.drop_table("matches")
    op.drop_table("users")
    op.drop_table("dogs")
    op.drop_table("dog_likes")
