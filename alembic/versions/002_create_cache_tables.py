"""Create cache_entries and cache_versions tables.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create cache tables."""
    # Cached values, keyed by namespace + version + key
    op.create_table(
        'cache_entries',
        sa.Column('key', sa.String(255), primary_key=True),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False, index=True),
    )

    # Generation counters, one row per namespace
    op.create_table(
        'cache_versions',
        sa.Column('name', sa.String(100), primary_key=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
    )


def downgrade() -> None:
    """Drop cache tables."""
    op.drop_table('cache_versions')
    op.drop_table('cache_entries')
