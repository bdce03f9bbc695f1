"""Create the breakdown tables: users, movies, characters, scenes, scene_char_map, montages

Revision ID: 20260301_breakdown_tables
Revises:
Create Date: 2026-03-01 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20260301_breakdown_tables'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'movies',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('logline', sa.Text, nullable=True),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('default_flag', sa.String(1), nullable=False, server_default='N'),
        *_timestamps(),
    )
    op.create_index('ix_movies_user_id', 'movies', ['user_id'])

    op.create_table(
        'characters',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('movie_id', sa.String(36), sa.ForeignKey('movies.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('gender', sa.String(1), nullable=False, comment='M, F or O'),
        sa.Column('lower_age', sa.Integer, nullable=True),
        sa.Column('upper_age', sa.Integer, nullable=True),
        sa.Column('type', sa.String(1), nullable=False, comment='Main, Primary, Secondary, Tertiary or Other'),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('exp_screen_time', sa.Integer, nullable=True, comment='Expected screen time in minutes'),
        sa.Column('notes', sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_characters_movie_id', 'characters', ['movie_id'])

    op.create_table(
        'scenes',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('movie_id', sa.String(36), sa.ForeignKey('movies.id'), nullable=False),
        sa.Column('number', sa.Integer, nullable=False),
        sa.Column('act', sa.String(32), nullable=True),
        sa.Column('ie_flag', sa.String(2), nullable=True),
        sa.Column('sl_flag', sa.String(2), nullable=True),
        sa.Column('type', sa.String(1), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('sub_location', sa.String(255), nullable=True),
        sa.Column('weather', sa.String(255), nullable=True),
        sa.Column('time', sa.String(255), nullable=True),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('exp_length', sa.Integer, nullable=True, comment='Expected length in minutes'),
        sa.Column('num_extras', sa.Integer, nullable=True),
        sa.Column('camera_notes', sa.Text, nullable=True),
        sa.Column('lighting_notes', sa.Text, nullable=True),
        sa.Column('sound_notes', sa.Text, nullable=True),
        sa.Column('color_notes', sa.Text, nullable=True),
        sa.Column('prop_notes', sa.Text, nullable=True),
        sa.Column('other_notes', sa.Text, nullable=True),
        sa.Column('relevance_quotient', sa.String(1), nullable=True),
        sa.Column('cost_quotient', sa.String(1), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_scenes_movie_id', 'scenes', ['movie_id'])
    # Not unique: bulk renumbering passes through transient duplicates
    op.create_index('ix_scenes_movie_number', 'scenes', ['movie_id', 'number'])

    op.create_table(
        'scene_char_map',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('scene_id', sa.String(36), sa.ForeignKey('scenes.id'), nullable=False),
        sa.Column('char_id', sa.String(36), sa.ForeignKey('characters.id'), nullable=False),
        sa.Column('type', sa.String(1), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_scene_char_map_scene_id', 'scene_char_map', ['scene_id'])
    op.create_index('ix_scene_char_map_char_id', 'scene_char_map', ['char_id'])

    op.create_table(
        'montages',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('scene_id', sa.String(36), sa.ForeignKey('scenes.id'), nullable=False),
        sa.Column('seq_number', sa.Integer, nullable=False),
        sa.Column('ie_flag', sa.String(2), nullable=True),
        sa.Column('sl_flag', sa.String(2), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('sub_location', sa.String(255), nullable=True),
        sa.Column('weather', sa.String(255), nullable=True),
        sa.Column('time', sa.String(255), nullable=True),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('exp_length', sa.Integer, nullable=True, comment='Expected length in seconds'),
        sa.Column('num_extras', sa.Integer, nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_montages_scene_id', 'montages', ['scene_id'])
    op.create_index('ix_montages_scene_seq', 'montages', ['scene_id', 'seq_number'])


def downgrade():
    # Children before parents
    for table in ('montages', 'scene_char_map', 'scenes', 'characters', 'movies', 'users'):
        op.drop_table(table)
