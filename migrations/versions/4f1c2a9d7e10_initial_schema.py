"""initial schema: company_settings, materials, projects, line_items

Revision ID: 4f1c2a9d7e10
Revises:
Create Date: 2026-10-19 09:12:40.118204

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4f1c2a9d7e10'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    ]


def upgrade():
    op.create_table(
        'company_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_name', sa.String(length=200), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=False),
        sa.Column('license', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=200), nullable=False),
        sa.Column('website', sa.String(length=200), nullable=False),
        sa.Column('default_labor_rate', sa.Float(), nullable=False),
        sa.Column('default_overhead', sa.Float(), nullable=False),
        sa.Column('default_profit', sa.Float(), nullable=False),
        sa.Column('tax_rate', sa.Float(), nullable=False),
        sa.Column('default_terms', sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'materials',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('sku', sa.String(length=50), nullable=True),
        sa.Column('category', sa.String(length=64), nullable=False),
        sa.Column('unit', sa.String(length=16), nullable=False),
        sa.Column('unit_price', sa.Float(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_materials_lower_name', 'materials', [sa.text('lower(name)')], unique=False)
    op.create_index('ix_materials_category_name', 'materials', ['category', 'name'], unique=False)
    op.create_index('ux_materials_sku', 'materials', ['sku'], unique=True)

    op.create_table(
        'projects',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('client_name', sa.String(length=200), nullable=False),
        sa.Column('client_company', sa.String(length=200), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('state', sa.String(length=2), nullable=False),
        sa.Column('zip', sa.String(length=10), nullable=False),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('status', sa.String(length=32), server_default=sa.text("'draft'"), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('overhead_pct', sa.Float(), nullable=False),
        sa.Column('profit_pct', sa.Float(), nullable=False),
        sa.Column('labor_rate', sa.Float(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('terms', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_projects_lower_name', 'projects', [sa.text('lower(name)')], unique=False)
    op.create_index('ix_projects_status', 'projects', ['status'], unique=False)
    op.create_index('ix_projects_created_at', 'projects', ['created_at'], unique=False)

    op.create_table(
        'line_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=False),
        sa.Column('material_id', sa.Integer(), nullable=True),
        sa.Column('description', sa.String(length=500), nullable=False),
        sa.Column('category', sa.String(length=64), nullable=False),
        sa.Column('unit', sa.String(length=16), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('unit_price', sa.Float(), nullable=False),
        sa.Column('labor_hours', sa.Float(), nullable=False),
        # NULL: inherit projects.labor_rate at rollup time
        sa.Column('labor_rate', sa.Float(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['material_id'], ['materials.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_line_items_project_sort', 'line_items', ['project_id', 'sort_order'], unique=False)
    op.create_index('ix_line_items_material', 'line_items', ['material_id'], unique=False)


def downgrade():
    op.drop_index('ix_line_items_material', table_name='line_items')
    op.drop_index('ix_line_items_project_sort', table_name='line_items')
    op.drop_table('line_items')

    op.drop_index('ix_projects_created_at', table_name='projects')
    op.drop_index('ix_projects_status', table_name='projects')
    op.drop_index('ix_projects_lower_name', table_name='projects')
    op.drop_table('projects')

    op.drop_index('ux_materials_sku', table_name='materials')
    op.drop_index('ix_materials_category_name', table_name='materials')
    op.drop_index('ix_materials_lower_name', table_name='materials')
    op.drop_table('materials')

    op.drop_table('company_settings')
