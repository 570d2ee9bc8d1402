"""create_leagues_and_facilities

Revision ID: c5d2f8e4a903
Revises: 8b4e6d0a1c27
Create Date: 2026-10-01 09:30:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID

# revision identifiers, used by Alembic.
revision: str = 'c5d2f8e4a903'
down_revision: Union[str, None] = '8b4e6d0a1c27'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

AGE_GROUPS = (
    'toddlers', 'u6', 'u7', 'u8', 'u9', 'u10', 'u11', 'u12', 'u13', 'u14',
    'u15', 'u16', 'u17', 'u18', 'adult', 'o30', 'o50', 'o60',
)


def upgrade() -> None:
    """Create leagues, league_teams, facilities and facility_surfaces tables."""
    op.create_table(
        'leagues',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('org_id', UUID(as_uuid=True), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=120), nullable=False),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('age_group', sa.Enum(*AGE_GROUPS, name='league_age_group'), nullable=True),
        sa.Column('operating_schedule', JSONB(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('org_id', 'name', name='league_org_name_unique'),
        sa.UniqueConstraint('org_id', 'slug', name='league_org_slug_unique'),
    )
    # One league per organization
    op.create_index('ix_leagues_org_id', 'leagues', ['org_id'], unique=True)

    op.create_table(
        'league_teams',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('league_id', UUID(as_uuid=True), sa.ForeignKey('leagues.id', ondelete='CASCADE'), nullable=False),
        sa.Column('team_id', UUID(as_uuid=True), sa.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('league_id', 'team_id', name='league_team_league_team_unique'),
    )
    op.create_index('ix_league_teams_league_id', 'league_teams', ['league_id'])
    op.create_index('ix_league_teams_team_id', 'league_teams', ['team_id'])

    op.create_table(
        'facilities',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('org_id', UUID(as_uuid=True), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=120), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('operating_schedule', JSONB(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('org_id', 'slug', name='facility_org_slug_unique'),
    )
    op.create_index('ix_facilities_org_id', 'facilities', ['org_id'])

    op.create_table(
        'facility_surfaces',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('facility_id', UUID(as_uuid=True), sa.ForeignKey('facilities.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column(
            'type',
            sa.Enum('field', 'court', 'diamond', 'rink', 'other', name='facility_surface_type'),
            nullable=False,
            server_default='other',
        ),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('facility_id', 'name', name='facility_surface_facility_name_unique'),
    )
    op.create_index('ix_facility_surfaces_facility_id', 'facility_surfaces', ['facility_id'])


def downgrade() -> None:
    op.drop_index('ix_facility_surfaces_facility_id', table_name='facility_surfaces')
    op.drop_table('facility_surfaces')
    sa.Enum(name='facility_surface_type').drop(op.get_bind(), checkfirst=True)

    op.drop_index('ix_facilities_org_id', table_name='facilities')
    op.drop_table('facilities')

    op.drop_index('ix_league_teams_team_id', table_name='league_teams')
    op.drop_index('ix_league_teams_league_id', table_name='league_teams')
    op.drop_table('league_teams')

    op.drop_index('ix_leagues_org_id', table_name='leagues')
    op.drop_table('leagues')
    sa.Enum(name='league_age_group').drop(op.get_bind(), checkfirst=True)
