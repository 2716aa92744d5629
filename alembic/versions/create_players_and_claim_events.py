"""Create players and claim_events

Revision ID: create_players_and_claim_events
Revises: 
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'create_players_and_claim_events'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'players',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('total_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    # Name uniqueness is enforced by the store
    op.create_index('ix_players_name', 'players', ['name'], unique=True)

    op.create_table(
        'claim_events',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('player_id', sa.String(length=36), sa.ForeignKey('players.id'), nullable=False),
        sa.Column('points_claimed', sa.Integer(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_claim_events_player_id', 'claim_events', ['player_id'])

def downgrade():
    op.drop_index('ix_claim_events_player_id', table_name='claim_events')
    op.drop_table('claim_events')
    op.drop_index('ix_players_name', table_name='players')
    op.drop_table('players')
