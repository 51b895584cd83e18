"""create_policy_tables

Revision ID: 5c1e7a2b9d40
Revises:
Create Date: 2026-10-18 09:12:44.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1e7a2b9d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('tenants',
        sa.Column('tenant_id', sa.Text(), nullable=False),
        sa.Column('kill_all', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('default_rate_limit', sa.Integer(), server_default='0', nullable=False),
        sa.Column('enable_audit', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('enable_pii', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.PrimaryKeyConstraint('tenant_id')
    )

    op.create_table('endpoint_rules',
        sa.Column('tenant_id', sa.Text(), nullable=False),
        sa.Column('endpoint_id', sa.Text(), nullable=False),
        sa.Column('disabled', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('rate_limit', sa.Integer(), server_default='0', nullable=False),
        sa.Column('requires_feature', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('tenant_id', 'endpoint_id')
    )
    op.create_index('ix_endpoint_rules_tenant', 'endpoint_rules', ['tenant_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_endpoint_rules_tenant', table_name='endpoint_rules')
    op.drop_table('endpoint_rules')
    op.drop_table('tenants')
