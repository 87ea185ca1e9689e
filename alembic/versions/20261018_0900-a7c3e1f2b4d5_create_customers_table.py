"""create customers table

Revision ID: a7c3e1f2b4d5
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'a7c3e1f2b4d5'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade database schema."""
    op.create_table('customers',
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    # Email is unique among customers that are not soft-deleted
    op.create_index(
        'uq_customers_email_active', 'customers', ['email'], unique=True,
        postgresql_where=sa.text('is_deleted = false'),
        sqlite_where=sa.text('is_deleted = 0'),
    )
    # Default sort and search
    op.create_index('ix_customers_name', 'customers', ['name'], unique=False)
    # Date range filter and createdAt sort
    op.create_index('ix_customers_created_at', 'customers', ['created_at'], unique=False)


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_index('ix_customers_created_at', table_name='customers')
    op.drop_index('ix_customers_name', table_name='customers')
    op.drop_index('uq_customers_email_active', table_name='customers')
    op.drop_table('customers')
