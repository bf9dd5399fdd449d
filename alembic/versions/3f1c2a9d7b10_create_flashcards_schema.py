"""create flashcards schema

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2025-12-11 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    table_names = inspector.get_table_names()

    if "users" not in table_names:
        op.create_table(
            "users",
            sa.Column("id", sa.Uuid(), primary_key=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        )

    if "flashcards_gen_sessions" not in table_names:
        op.create_table(
            "flashcards_gen_sessions",
            sa.Column("id", sa.Uuid(), primary_key=True),
            sa.Column("user_id", sa.Uuid(), nullable=False),
            sa.Column("source_text", sa.Text(), nullable=False),
            sa.Column(
                "proposals",
                sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
                nullable=False,
                server_default=sa.text("'[]'"),
            ),
            sa.Column("generated_count", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("accepted_count", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.CheckConstraint(
                "length(source_text) >= 1000 AND length(source_text) <= 10000",
                name="source_text_length",
            ),
            sa.CheckConstraint("generated_count >= 0", name="generated_count_non_negative"),
            sa.CheckConstraint("accepted_count >= 0", name="accepted_count_non_negative"),
            sa.ForeignKeyConstraint(
                ["user_id"], ["users.id"], name="fk_gen_sessions_user", ondelete="CASCADE"
            ),
        )

    if "flashcards" not in table_names:
        op.create_table(
            "flashcards",
            sa.Column("id", sa.Uuid(), primary_key=True),
            sa.Column("user_id", sa.Uuid(), nullable=False),
            sa.Column("front", sa.String(length=500), nullable=False),
            sa.Column("back", sa.String(length=2000), nullable=False),
            sa.Column("source", sa.String(length=20), nullable=False),
            sa.Column("generation_id", sa.Uuid(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.CheckConstraint("source IN ('manual', 'ai_generated')", name="source_enum"),
            sa.ForeignKeyConstraint(
                ["user_id"], ["users.id"], name="fk_flashcards_user", ondelete="CASCADE"
            ),
            sa.ForeignKeyConstraint(
                ["generation_id"],
                ["flashcards_gen_sessions.id"],
                name="fk_flashcards_generation",
                ondelete="SET NULL",
            ),
        )

    session_indexes = {idx["name"] for idx in sa.inspect(bind).get_indexes("flashcards_gen_sessions")}
    if "idx_flashcards_gen_sessions_user_id" not in session_indexes:
        op.create_index("idx_flashcards_gen_sessions_user_id", "flashcards_gen_sessions", ["user_id"])

    card_indexes = {idx["name"] for idx in sa.inspect(bind).get_indexes("flashcards")}
    if "idx_flashcards_user_id" not in card_indexes:
        op.create_index("idx_flashcards_user_id", "flashcards", ["user_id"])
    if "idx_flashcards_generation_id" not in card_indexes:
        op.create_index("idx_flashcards_generation_id", "flashcards", ["generation_id"])


def downgrade() -> None:
    op.drop_index("idx_flashcards_generation_id", table_name="flashcards")
    op.drop_index("idx_flashcards_user_id", table_name="flashcards")
    op.drop_index("idx_flashcards_gen_sessions_user_id", table_name="flashcards_gen_sessions")
    op.drop_table("flashcards")
    op.drop_table("flashcards_gen_sessions")
    op.drop_table("users")
