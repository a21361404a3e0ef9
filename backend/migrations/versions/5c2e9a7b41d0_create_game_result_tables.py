"""create game_result and game_result_player tables

Revision ID: 5c2e9a7b41d0
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2e9a7b41d0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'game_result' not in existing_tables:
        op.create_table(
            'game_result',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('room_id', sa.String(length=16), nullable=False),
            sa.Column('winner_id', sa.String(length=64), nullable=True),
            sa.Column('winner_name', sa.String(length=64), nullable=True),
            sa.Column('total_turns', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('played_cards', sa.Text(), nullable=True),
            sa.Column('finished_at', sa.Float(), nullable=False),
        )
        op.create_index('ix_game_result_room_id', 'game_result', ['room_id'])

    if 'game_result_player' not in existing_tables:
        op.create_table(
            'game_result_player',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('result_id', sa.Integer(), sa.ForeignKey('game_result.id'), nullable=False),
            sa.Column('player_id', sa.String(length=64), nullable=False),
            sa.Column('player_name', sa.String(length=64), nullable=False),
            sa.Column('position', sa.Integer(), nullable=False),
        )
        op.create_index('ix_game_result_player_result_id', 'game_result_player', ['result_id'])
        op.create_index('ix_game_result_player_player_name', 'game_result_player', ['player_name'])


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'game_result_player' in existing_tables:
        op.drop_index('ix_game_result_player_player_name', table_name='game_result_player')
        op.drop_index('ix_game_result_player_result_id', table_name='game_result_player')
        op.drop_table('game_result_player')
    if 'game_result' in existing_tables:
        op.drop_index('ix_game_result_room_id', table_name='game_result')
        op.drop_table('game_result')
