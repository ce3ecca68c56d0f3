"""create_kv_entries_table

Revision ID: 5b1e2c7d9a40
Revises:
Create Date: 2026-10-19 10:12:41.503118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "5b1e2c7d9a40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """업그레이드 마이그레이션"""
    op.create_table(
        "kv_entries",
        sa.Column(
            "key",
            sa.String(length=255),
            nullable=False,
            comment="컬렉션:사용자 ID",
        ),
        sa.Column(
            "value",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            comment="JSON 문서",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
            comment="마지막 저장 일시",
        ),
        sa.PrimaryKeyConstraint("key"),
    )


def downgrade() -> None:
    """다운그레이드 마이그레이션"""
    op.drop_table("kv_entries")
