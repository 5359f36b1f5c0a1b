"""create learning path schema

Revision ID: 3f1c2b7d9e41
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1c2b7d9e41'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=30), nullable=False, unique=True),
        sa.Column('email', sa.String(length=120), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.Enum('learner', 'instructor', 'admin', name='user_role'), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('profile_picture', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.current_timestamp(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.current_timestamp(), nullable=False),
    )

    op.create_table(
        'learning_paths',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('difficulty', sa.Enum('beginner', 'intermediate', 'advanced', name='path_difficulty'), nullable=False),
        sa.Column('estimated_time_hours', sa.Float(), nullable=False),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('cover_image', sa.String(length=255), nullable=True),
        sa.Column('creator_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.current_timestamp(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.current_timestamp(), nullable=False),
    )

    op.create_table(
        'resources',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('learning_path_id', sa.Integer(),
                  sa.ForeignKey('learning_paths.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.Enum('document', 'video', 'link', 'other', name='resource_type'), nullable=False),
        sa.Column('format', sa.String(length=50), nullable=True),
        sa.Column('url', sa.String(length=500), nullable=True),
        sa.Column('file_path', sa.String(length=255), nullable=True),
        sa.Column('estimated_time_minutes', sa.Integer(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('is_required', sa.Boolean(), nullable=False),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.current_timestamp(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.current_timestamp(), nullable=False),
    )
    op.create_index('ix_resources_learning_path_id', 'resources', ['learning_path_id'])

    op.create_table(
        'progress',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('learning_path_id', sa.Integer(),
                  sa.ForeignKey('learning_paths.id', ondelete='CASCADE'), nullable=False),
        sa.Column('resource_id', sa.Integer(), sa.ForeignKey('resources.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.Enum('not_started', 'in_progress', 'completed', name='progress_status'), nullable=False),
        sa.Column('completion_percentage', sa.Float(), nullable=False),
        sa.Column('time_spent_minutes', sa.Integer(), nullable=False),
        sa.Column('last_accessed_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.current_timestamp(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.current_timestamp(), nullable=False),
        sa.UniqueConstraint('user_id', 'resource_id', name='unique_user_resource_progress'),
        sa.CheckConstraint(
            'completion_percentage >= 0 AND completion_percentage <= 100',
            name='check_completion_percentage_range',
        ),
        sa.CheckConstraint('time_spent_minutes >= 0', name='check_time_spent_non_negative'),
    )
    op.create_index('ix_progress_user_id', 'progress', ['user_id'])
    op.create_index('ix_progress_learning_path_id', 'progress', ['learning_path_id'])


def downgrade():
    op.drop_index('ix_progress_learning_path_id', table_name='progress')
    op.drop_index('ix_progress_user_id', table_name='progress')
    op.drop_table('progress')
    op.drop_index('ix_resources_learning_path_id', table_name='resources')
    op.drop_table('resources')
    op.drop_table('learning_paths')
    op.drop_table('users')
