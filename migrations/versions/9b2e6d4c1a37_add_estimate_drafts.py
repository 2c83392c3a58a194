"""add estimate_drafts: server-side draft payloads keyed by session token

Revision ID: 9b2e6d4c1a37
Revises: 4f1c2a9d7e10
Create Date: 2026-10-19 14:03:11.502817

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '9b2e6d4c1a37'
down_revision = '4f1c2a9d7e10'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'estimate_drafts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('token', sa.String(length=32), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ux_estimate_drafts_token', 'estimate_drafts', ['token'], unique=True)
    op.create_index('ix_estimate_drafts_updated_at', 'estimate_drafts', ['updated_at'], unique=False)


def downgrade():
    op.drop_index('ix_estimate_drafts_updated_at', table_name='estimate_drafts')
    op.drop_index('ux_estimate_drafts_token', table_name='estimate_drafts')
    op.drop_table('estimate_drafts')
