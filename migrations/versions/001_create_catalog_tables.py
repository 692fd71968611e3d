"""create catalog tables

Revision ID: 001_create_catalog_tables
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


revision = '001_create_catalog_tables'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.current_timestamp(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.current_timestamp(), nullable=True),
    ]


def upgrade():
    """Create categories, subcategories, pdfs, products, product_subcategory and images."""
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('name', name='uq_categories_name')
    )

    op.create_table(
        'subcategories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('category_id', 'name', name='uq_subcategories_category_name')
    )
    op.create_index('ix_subcategories_category_id', 'subcategories', ['category_id'])

    op.create_table(
        'pdfs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('url', sa.String(length=512), nullable=True),
        sa.Column('uploaded_at', sa.DateTime(), nullable=False),
        *_timestamps()
    )

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=256), nullable=False),
        sa.Column('characteristics', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('benefits', sa.Text(), nullable=False),
        sa.Column('compatibility', sa.Text(), nullable=False),
        sa.Column('price', sa.Numeric(8, 2), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id'), nullable=False),
        sa.Column('pdf_id', sa.Integer(), sa.ForeignKey('pdfs.id'), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('name', name='uq_products_name'),
        sa.UniqueConstraint('pdf_id', name='uq_products_pdf_id')
    )
    op.create_index('ix_products_category_id', 'products', ['category_id'])

    op.create_table(
        'product_subcategory',
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('subcategory_id', sa.Integer(), sa.ForeignKey('subcategories.id', ondelete='CASCADE'),
                  primary_key=True)
    )

    op.create_table(
        'images',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('url', sa.String(length=512), nullable=True),
        sa.Column('imageable_type', sa.Enum('PRODUCT', name='imageownertype'), nullable=False),
        sa.Column('imageable_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('imageable_type', 'imageable_id', name='uq_images_owner')
    )
    op.create_index('ix_images_imageable_id', 'images', ['imageable_id'])


def downgrade():
    """Drop the catalog tables."""
    op.drop_index('ix_images_imageable_id', table_name='images')
    op.drop_table('images')
    op.drop_table('product_subcategory')
    op.drop_index('ix_products_category_id', table_name='products')
    op.drop_table('products')
    op.drop_table('pdfs')
    op.drop_index('ix_subcategories_category_id', table_name='subcategories')
    op.drop_table('subcategories')
    op.drop_table('categories')
