"""create_staff_invitations

Revision ID: e7a4b1c9d352
Revises: c5d2f8e4a903
Create Date: 2026-10-01 09:45:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ENUM, UUID

# revision identifiers, used by Alembic.
revision: str = 'e7a4b1c9d352'
down_revision: Union[str, None] = 'c5d2f8e4a903'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create staff_invitations table. Reuses the staff_role enum."""
    op.create_table(
        'staff_invitations',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('org_id', UUID(as_uuid=True), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', ENUM('admin', 'editor', 'viewer', name='staff_role', create_type=False), nullable=False),
        sa.Column('token', sa.String(length=255), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('accepted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_staff_invitations_org_id', 'staff_invitations', ['org_id'])
    op.create_index('ix_staff_invitations_email', 'staff_invitations', ['email'])
    op.create_index('ix_staff_invitations_token', 'staff_invitations', ['token'], unique=True)


def downgrade() -> None:
    """Drop staff_invitations."""
    op.drop_index('ix_staff_invitations_token', table_name='staff_invitations')
    op.drop_index('ix_staff_invitations_email', table_name='staff_invitations')
    op.drop_index('ix_staff_invitations_org_id', table_name='staff_invitations')
    op.drop_table('staff_invitations')
