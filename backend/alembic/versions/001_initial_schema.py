"""Initial schema: users, folders, blocks, topics, quizzes, questions, fill_in_the_blanks, points_updates.

Revision ID: 001
Revises:
Create Date: Initial

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ID = sa.String(36)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", ID, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("mode", sa.String(20), nullable=False, server_default="STUDENT"),
        *_timestamps(),
        sa.CheckConstraint("mode IN ('STUDENT', 'TEACHER', 'ADMIN')", name="users_mode_check"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "folders",
        sa.Column("id", ID, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("author_id", ID, nullable=False),
        sa.Column("parent_id", ID, nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["parent_id"], ["folders.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_folders_author_id", "folders", ["author_id"], unique=False)
    op.create_index("ix_folders_parent_id", "folders", ["parent_id"], unique=False)

    op.create_table(
        "blocks",
        sa.Column("id", ID, nullable=False),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author_id", ID, nullable=False),
        sa.Column("folder_id", ID, nullable=True),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["folder_id"], ["folders.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_blocks_author_id", "blocks", ["author_id"], unique=False)
    op.create_index("ix_blocks_folder_id", "blocks", ["folder_id"], unique=False)
    op.create_index("ix_blocks_published", "blocks", ["published"], unique=False)

    op.create_table(
        "topics",
        sa.Column("id", ID, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("examples", sa.JSON(), nullable=True),
        sa.Column("block_id", ID, nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["block_id"], ["blocks.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_topics_name", "topics", ["name"], unique=False)
    op.create_index("ix_topics_block_id", "topics", ["block_id"], unique=False)

    op.create_table(
        "quizzes",
        sa.Column("id", ID, nullable=False),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("block_id", ID, nullable=True),
        sa.Column("topic_id", ID, nullable=True),
        sa.Column("time_limit", sa.Integer(), nullable=True),
        sa.Column("passing_score", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("time_limit IS NULL OR time_limit > 0", name="quizzes_time_limit_check"),
        sa.CheckConstraint(
            "passing_score IS NULL OR (passing_score >= 0 AND passing_score <= 100)",
            name="quizzes_passing_score_check",
        ),
        sa.ForeignKeyConstraint(["block_id"], ["blocks.id"]),
        sa.ForeignKeyConstraint(["topic_id"], ["topics.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_quizzes_block_id", "quizzes", ["block_id"], unique=False)
    op.create_index("ix_quizzes_topic_id", "quizzes", ["topic_id"], unique=False)

    op.create_table(
        "questions",
        sa.Column("id", ID, nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("block_id", ID, nullable=True),
        sa.Column("type", sa.String(50), nullable=True),
        sa.Column("difficulty", sa.String(20), nullable=True),
        sa.Column("points", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "difficulty IS NULL OR difficulty IN ('easy', 'medium', 'hard')", name="questions_difficulty_check"
        ),
        sa.CheckConstraint("points IS NULL OR points >= 0", name="questions_points_check"),
        sa.ForeignKeyConstraint(["block_id"], ["blocks.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_questions_block_id", "questions", ["block_id"], unique=False)

    op.create_table(
        "fill_in_the_blanks",
        sa.Column("id", ID, nullable=False),
        sa.Column("sentence", sa.Text(), nullable=False),
        sa.Column("answer", sa.String(512), nullable=False),
        sa.Column("block_id", ID, nullable=True),
        sa.Column("hint", sa.Text(), nullable=True),
        sa.Column("difficulty", sa.String(20), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "difficulty IS NULL OR difficulty IN ('easy', 'medium', 'hard')",
            name="fill_in_the_blanks_difficulty_check",
        ),
        sa.ForeignKeyConstraint(["block_id"], ["blocks.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_fill_in_the_blanks_block_id", "fill_in_the_blanks", ["block_id"], unique=False)

    op.create_table(
        "points_updates",
        sa.Column("id", ID, nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("block_id", ID, nullable=True),
        sa.Column("user_id", ID, nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("points >= 0", name="points_updates_points_check"),
        sa.ForeignKeyConstraint(["block_id"], ["blocks.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_points_updates_block_id", "points_updates", ["block_id"], unique=False)
    op.create_index("ix_points_updates_user_id", "points_updates", ["user_id"], unique=False)
    op.create_index("ix_points_updates_created_at", "points_updates", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_table("points_updates")
    op.drop_table("fill_in_the_blanks")
    op.drop_table("questions")
    op.drop_table("quizzes")
    op.drop_table("topics")
    op.drop_table("blocks")
    op.drop_table("folders")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
