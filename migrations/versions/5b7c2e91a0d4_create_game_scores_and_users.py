"""create game_scores and users tables

Revision ID: 5b7c2e91a0d4
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5b7c2e91a0d4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    tables = set(insp.get_table_names())
    if 'game_scores' not in tables:
        op.create_table(
            'game_scores',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('player_name', sa.Text(), nullable=False),
            sa.Column('score', sa.Integer(), nullable=False),
            sa.Column('game_mode', sa.Text(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )
        op.create_index('ix_game_scores_player_name', 'game_scores', ['player_name'])
        op.create_index('ix_game_scores_game_mode', 'game_scores', ['game_mode'])
    if 'users' not in tables:
        op.create_table(
            'users',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('username', sa.Text(), nullable=False),
            sa.Column('password', sa.Text(), nullable=False),
        )
        op.create_index('ix_users_username', 'users', ['username'], unique=True)


def downgrade():
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
    op.drop_index('ix_game_scores_game_mode', table_name='game_scores')
    op.drop_index('ix_game_scores_player_name', table_name='game_scores')
    op.drop_table('game_scores')
