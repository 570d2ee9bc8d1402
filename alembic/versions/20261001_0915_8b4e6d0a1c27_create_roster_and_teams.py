"""create_roster_and_teams

Revision ID: 8b4e6d0a1c27
Revises: 3f1a9c2b7d10
Create Date: 2026-10-01 09:15:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

# revision identifiers, used by Alembic.
revision: str = '8b4e6d0a1c27'
down_revision: Union[str, None] = '3f1a9c2b7d10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create organization_players, teams and team_members tables."""
    op.create_table(
        'organization_players',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('org_id', UUID(as_uuid=True), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'status',
            sa.Enum('active', 'inactive', 'banned', 'suspended', 'injured', name='player_status'),
            nullable=False,
            server_default='inactive',
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('org_id', 'user_id', name='organization_player_org_user_unique'),
    )
    op.create_index('ix_organization_players_org_id', 'organization_players', ['org_id'])
    op.create_index('ix_organization_players_user_id', 'organization_players', ['user_id'])

    op.create_table(
        'teams',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('org_id', UUID(as_uuid=True), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=50), nullable=False),
        sa.Column(
            'status',
            sa.Enum('active', 'inactive', 'banned', 'suspended', name='team_status'),
            nullable=False,
            server_default='inactive',
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_teams_org_id', 'teams', ['org_id'])
    op.create_index('ix_teams_slug', 'teams', ['slug'], unique=True)

    # user_id is unique on its own: one team per user across all organizations
    op.create_table(
        'team_members',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('team_id', UUID(as_uuid=True), sa.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', sa.Enum('admin', 'member', name='team_member_role'), nullable=False),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('team_id', 'user_id', name='team_member_team_user_unique'),
    )
    op.create_index('ix_team_members_team_id', 'team_members', ['team_id'])
    op.create_index('ix_team_members_user_id', 'team_members', ['user_id'], unique=True)


def downgrade() -> None:
    op.drop_index('ix_team_members_user_id', table_name='team_members')
    op.drop_index('ix_team_members_team_id', table_name='team_members')
    op.drop_table('team_members')
    sa.Enum(name='team_member_role').drop(op.get_bind(), checkfirst=True)

    op.drop_index('ix_teams_slug', table_name='teams')
    op.drop_index('ix_teams_org_id', table_name='teams')
    op.drop_table('teams')
    sa.Enum(name='team_status').drop(op.get_bind(), checkfirst=True)

    op.drop_index('ix_organization_players_user_id', table_name='organization_players')
    op.drop_index('ix_organization_players_org_id', table_name='organization_players')
    op.drop_table('organization_players')
    sa.Enum(name='player_status').drop(op.get_bind(), checkfirst=True)
