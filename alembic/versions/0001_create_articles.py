"""create articles table

Revision ID: 0001_create_articles
Revises: 
Create Date: 2026-10-19

"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_create_articles"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "articles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author", sa.String(), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("published_date", sa.String(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("is_enhanced", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column(
            "original_article_id",
            sa.Integer(),
            sa.ForeignKey("articles.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("reference_links", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=True, server_default=sa.func.now()),
    )
    op.create_index(
        "idx_articles_original_article_id", "articles", ["original_article_id"], unique=False
    )
    op.create_index(
        "idx_articles_is_enhanced_created_at",
        "articles",
        ["is_enhanced", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("idx_articles_is_enhanced_created_at", table_name="articles")
    op.drop_index("idx_articles_original_article_id", table_name="articles")
    op.drop_table("articles")
