"""create game, match_timer and match_event tables

Revision ID: 1c4e7a9b2d30
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1c4e7a9b2d30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'game' not in existing_tables:
        op.create_table(
            'game',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('home_team', sa.String(length=100), nullable=False),
            sa.Column('away_team', sa.String(length=100), nullable=False),
            sa.Column('home_score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('away_score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('quarter', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('status', sa.String(length=16), nullable=False, server_default='SCHEDULED'),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.CheckConstraint('home_score >= 0 AND away_score >= 0', name='ck_game_scores_non_negative'),
        )
        op.create_index('ix_game_status', 'game', ['status'])

    if 'match_timer' not in existing_tables:
        op.create_table(
            'match_timer',
            sa.Column('game_id', sa.Integer(), sa.ForeignKey('game.id'), primary_key=True),
            sa.Column('quarter', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('quarter_ms', sa.Integer(), nullable=False),
            sa.Column('remaining_ms', sa.Integer(), nullable=False),
            sa.Column('running', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('started_at', sa.DateTime(), nullable=True),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
        )

    if 'match_event' not in existing_tables:
        op.create_table(
            'match_event',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('game_id', sa.Integer(), sa.ForeignKey('game.id'), nullable=False),
            sa.Column('quarter', sa.Integer(), nullable=False),
            sa.Column('team', sa.String(length=8), nullable=False),
            sa.Column('event_type', sa.String(length=16), nullable=False),
            sa.Column('player_id', sa.Integer(), nullable=True),
            sa.Column('player_number', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sqlite_autoincrement=True,
        )
        op.create_index('ix_match_event_game_id', 'match_event', ['game_id'])


def downgrade():
    op.drop_index('ix_match_event_game_id', table_name='match_event')
    op.drop_table('match_event')
    op.drop_table('match_timer')
    op.drop_index('ix_game_status', table_name='game')
    op.drop_table('game')
