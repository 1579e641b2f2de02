"""Initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

PitchScout Database Schema
==========================

Profiles: player_profiles, player_achievements, player_videos
AI results: video_analyses, scouting_reports, club_matches
Reference data: clubs
Conversation and quota: chat_messages, api_usage
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    # =========================================================================
    # PROFILES
    # =========================================================================

    op.create_table(
        'player_profiles',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('position', sa.String(10), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('height_cm', sa.Integer(), nullable=True),
        sa.Column('weight_kg', sa.Integer(), nullable=True),
        sa.Column('preferred_foot', sa.String(10), nullable=True),
        sa.Column('nationality', sa.String(100), nullable=True),
        sa.Column('current_club', sa.String(255), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('avatar_url', sa.String(1000), nullable=True),
        sa.Column('pace', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('shooting', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('passing', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('dribbling', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('defending', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('physical', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('instagram_url', sa.String(500), nullable=True),
        sa.Column('youtube_url', sa.String(500), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', name='uq_player_profiles_user'),
        sa.CheckConstraint('pace BETWEEN 0 AND 100', name='ck_player_pace_range'),
        sa.CheckConstraint('shooting BETWEEN 0 AND 100', name='ck_player_shooting_range'),
        sa.CheckConstraint('passing BETWEEN 0 AND 100', name='ck_player_passing_range'),
        sa.CheckConstraint('dribbling BETWEEN 0 AND 100', name='ck_player_dribbling_range'),
        sa.CheckConstraint('defending BETWEEN 0 AND 100', name='ck_player_defending_range'),
        sa.CheckConstraint('physical BETWEEN 0 AND 100', name='ck_player_physical_range'),
    )
    op.create_index('ix_player_profiles_position', 'player_profiles', ['position'])
    op.create_index('ix_player_profiles_public', 'player_profiles', ['is_public'])

    op.create_table(
        'player_achievements',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('player_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('date', sa.Date(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['player_id'], ['player_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_player_achievements_player', 'player_achievements', ['player_id'])

    op.create_table(
        'player_videos',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('player_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('storage_path', sa.String(1000), nullable=False),
        sa.Column('video_url', sa.String(1000), nullable=True),
        sa.Column('thumbnail_url', sa.String(1000), nullable=True),
        sa.Column('content_type', sa.String(100), nullable=True),
        sa.Column('size_bytes', sa.Integer(), nullable=True),
        sa.Column('analysis_data', postgresql.JSONB(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['player_id'], ['player_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_player_videos_player', 'player_videos', ['player_id'])
    op.create_index('ix_player_videos_user', 'player_videos', ['user_id'])

    # =========================================================================
    # REFERENCE CLUBS
    # =========================================================================

    op.create_table(
        'clubs',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('league', sa.String(255), nullable=False),
        sa.Column('level', sa.String(100), nullable=False),
        sa.Column('playing_style', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('positions_needed', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('age_preference', sa.String(20), nullable=True),
        sa.Column('development_focus', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('reputation', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', name='uq_clubs_name'),
        sa.CheckConstraint('reputation BETWEEN 0 AND 100', name='ck_club_reputation_range'),
    )
    op.create_index('ix_clubs_level', 'clubs', ['level'])

    # =========================================================================
    # AI RESULTS
    # =========================================================================

    op.create_table(
        'video_analyses',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('player_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('video_id', sa.String(100), nullable=True),
        sa.Column('video_url', sa.String(1000), nullable=True),
        sa.Column('file_name', sa.String(500), nullable=True),
        sa.Column('position', sa.String(10), nullable=False),
        sa.Column('player_age', sa.Integer(), nullable=True),
        sa.Column('player_height', sa.Integer(), nullable=True),
        sa.Column('analysis_data', postgresql.JSONB(), nullable=False),
        sa.Column('highlights', postgresql.JSONB(), nullable=True),
        sa.Column('overall_score', sa.Integer(), nullable=True),
        sa.Column('model', sa.String(100), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['player_id'], ['player_profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_video_analyses_user', 'video_analyses', ['user_id'])
    op.create_index('ix_video_analyses_player', 'video_analyses', ['player_id'])

    op.create_table(
        'scouting_reports',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('analysis_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('report_data', postgresql.JSONB(), nullable=False),
        sa.Column('scout_classification', sa.String(10), nullable=True),
        sa.Column('recommended_action', sa.String(100), nullable=True),
        sa.Column('model', sa.String(100), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['analysis_id'], ['video_analyses.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_scouting_reports_user', 'scouting_reports', ['user_id'])
    op.create_index('ix_scouting_reports_analysis', 'scouting_reports', ['analysis_id'])

    op.create_table(
        'club_matches',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('player_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('club_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('match_score', sa.Integer(), nullable=True),
        sa.Column('match_grade', sa.String(5), nullable=True),
        sa.Column('match_data', postgresql.JSONB(), nullable=False),
        sa.Column('model', sa.String(100), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['player_id'], ['player_profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['club_id'], ['clubs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_club_matches_user', 'club_matches', ['user_id'])
    op.create_index('ix_club_matches_player', 'club_matches', ['player_id'])
    op.create_index('ix_club_matches_club', 'club_matches', ['club_id'])

    # =========================================================================
    # CHAT AND USAGE
    # =========================================================================

    op.create_table(
        'chat_messages',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('intent', sa.String(20), nullable=False, server_default='GENERAL'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_chat_messages_user_created', 'chat_messages', ['user_id', 'created_at'])

    op.create_table(
        'api_usage',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('endpoint', sa.String(100), nullable=False),
        sa.Column('usage_date', sa.Date(), nullable=False),
        sa.Column('request_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_request_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'endpoint', 'usage_date', name='uq_api_usage_user_endpoint_day'),
        sa.CheckConstraint('request_count >= 0', name='ck_api_usage_count_positive'),
    )
    op.create_index('ix_api_usage_date', 'api_usage', ['usage_date'])


def downgrade() -> None:
    op.drop_table('api_usage')
    op.drop_table('chat_messages')
    op.drop_table('club_matches')
    op.drop_table('scouting_reports')
    op.drop_table('video_analyses')
    op.drop_table('clubs')
    op.drop_table('player_videos')
    op.drop_table('player_achievements')
    op.drop_table('player_profiles')
