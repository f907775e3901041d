"""Create catalog tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create terms, attribute_taxonomies, products and product_terms tables."""
    # Taxonomy terms (categories and attribute values)
    op.create_table(
        'terms',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('taxonomy', sa.String(64), nullable=False, index=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(200), nullable=False),
        sa.Column('parent_id', sa.Integer(),
                  sa.ForeignKey('terms.id', ondelete='SET NULL'), nullable=True),
    )

    op.create_unique_constraint(
        'uq_terms_taxonomy_slug',
        'terms',
        ['taxonomy', 'slug'],
    )

    # Attribute registry
    op.create_table(
        'attribute_taxonomies',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(64), nullable=False, unique=True),
        sa.Column('label', sa.String(200), nullable=False),
        sa.Column('type', sa.String(20), nullable=False, server_default='select'),
    )

    # Products table
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(500), nullable=False),
        sa.Column('slug', sa.String(200), nullable=False, unique=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='publish', index=True),
        sa.Column('menu_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('regular_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('sale_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, index=True),
        sa.Column('total_sales', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('average_rating', sa.Numeric(3, 2), nullable=False, server_default='0'),
        sa.Column('rating_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('in_stock', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('image_src', sa.String(1000), nullable=True),
        sa.Column('image_srcset', sa.String(2000), nullable=True),
        sa.Column('image_alt', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # Term assignments
    op.create_table(
        'product_terms',
        sa.Column('product_id', sa.Integer(),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('term_id', sa.Integer(),
                  sa.ForeignKey('terms.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_index('ix_product_terms_term_id', 'product_terms', ['term_id'])


def downgrade() -> None:
    """Drop catalog tables."""
    op.drop_index('ix_product_terms_term_id', table_name='product_terms')
    op.drop_table('product_terms')
    op.drop_table('products')
    op.drop_table('attribute_taxonomies')
    op.drop_table('terms')
