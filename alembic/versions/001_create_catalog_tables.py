"""Create categories and products tables.

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
    """Create categories and products tables."""
    # Categories table
    op.create_table(
        'categories',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(200), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # Case-insensitive name uniqueness is enforced on the slug
    op.create_index('ix_categories_slug', 'categories', ['slug'], unique=True)

    # Products table
    op.create_table(
        'products',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(500), nullable=False),
        sa.Column('slug', sa.String(520), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, index=True),
        sa.Column('category_id', sa.String(36),
                  sa.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('photo_data', sa.LargeBinary(), nullable=True),
        sa.Column('photo_content_type', sa.String(100), nullable=True),
        sa.Column('shipping', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()'), index=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint('price > 0', name='ck_products_price_positive'),
        sa.CheckConstraint('quantity >= 0', name='ck_products_quantity_non_negative'),
    )

    # Slug races are settled by this index
    op.create_index('ix_products_slug', 'products', ['slug'], unique=True)


def downgrade() -> None:
    """Drop categories and products tables."""
    op.drop_index('ix_products_slug', table_name='products')
    op.drop_table('products')
    op.drop_index('ix_categories_slug', table_name='categories')
    op.drop_table('categories')
