"""create kv_entry table for credentials and save files

Revision ID: 5c2a9e7d41b0
Revises: 
Create Date: 2026-10-18 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2a9e7d41b0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # Tables created through `flask db-reset` already have the final shape
    if 'kv_entry' in set(insp.get_table_names()):
        return

    op.create_table(
        'kv_entry',
        sa.Column('key', sa.String(length=512), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('key'),
    )


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)

    if 'kv_entry' in set(insp.get_table_names()):
        op.drop_table('kv_entry')
