"""initial schema: players, stats, leaderboard, comments

Revision ID: 1a2b3c4d5e6f
Revises: 
Create Date: 2026-10-19 15:30:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1a2b3c4d5e6f'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'player' not in existing_tables:
        op.create_table(
            'player',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('acct_name', sa.String(length=64), nullable=False),
            sa.Column('password_hash', sa.String(length=256), nullable=False),
            sa.Column('email', sa.String(length=120), nullable=False, server_default=''),
            sa.Column('real_name', sa.String(length=120), nullable=False, server_default=''),
            sa.Column('bio', sa.Text(), nullable=False, server_default=''),
            sa.Column('profile_picture', sa.String(length=256), nullable=False, server_default='imgs/default.png'),
        )
        op.create_index('ix_player_acct_name', 'player', ['acct_name'], unique=True)

    if 'game_stat' not in existing_tables:
        op.create_table(
            'game_stat',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('player_id', sa.Integer(), sa.ForeignKey('player.id'), nullable=False),
            sa.Column('score', sa.Float(), nullable=False),
            sa.Column('time', sa.Float(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index('ix_game_stat_player_id', 'game_stat', ['player_id'])

    if 'leaderboard_entry' not in existing_tables:
        op.create_table(
            'leaderboard_entry',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('score', sa.Float(), nullable=False),
            sa.Column('time', sa.Float(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index('ix_leaderboard_entry_username', 'leaderboard_entry', ['username'])

    if 'comment' not in existing_tables:
        op.create_table(
            'comment',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('real_name', sa.String(length=120), nullable=False),
            sa.Column('text', sa.Text(), nullable=False),
            sa.Column('likes', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index('ix_comment_timestamp', 'comment', ['timestamp'])

    if 'reply' not in existing_tables:
        op.create_table(
            'reply',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('comment_id', sa.Integer(), sa.ForeignKey('comment.id'), nullable=False),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('real_name', sa.String(length=120), nullable=False),
            sa.Column('text', sa.Text(), nullable=False),
            sa.Column('likes', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index('ix_reply_comment_id', 'reply', ['comment_id'])

    if 'comment_like' not in existing_tables:
        op.create_table(
            'comment_like',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('comment_id', sa.Integer(), sa.ForeignKey('comment.id'), nullable=False),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.UniqueConstraint('comment_id', 'username', name='uq_comment_like_user'),
        )


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    # children before parents
    for table in ('comment_like', 'reply', 'comment', 'leaderboard_entry', 'game_stat', 'player'):
        if table in existing_tables:
            op.drop_table(table)
