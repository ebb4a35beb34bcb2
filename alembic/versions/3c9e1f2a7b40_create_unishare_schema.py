"""Create users, resources, staff and chat tables

Revision ID: 3c9e1f2a7b40
Revises:
Create Date: 2026-10-16 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c9e1f2a7b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


user_role = sa.Enum('student', 'instructor', 'admin', name='user_role')
auth_provider = sa.Enum('local', 'google', name='auth_provider')
resource_type = sa.Enum(
    'Assignments', 'Quizzes', 'Projects', 'Presentations', 'Notes', 'Past Papers',
    name='resource_type'
)
resource_status = sa.Enum('pending', 'approved', 'rejected', name='resource_status')
department = sa.Enum(
    'Computer Science', 'Business Administration', 'Engineering', 'Mathematics', 'Physics',
    'Chemistry', 'English', 'Economics', 'Law', 'Medicine',
    name='department'
)
message_type = sa.Enum('text', 'image', 'file', name='message_type')


def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=True),
        sa.Column('role', user_role, nullable=False),
        sa.Column('auth_provider', auth_provider, nullable=False),
        sa.Column('google_id', sa.String(), nullable=True),
        sa.Column('avatar', sa.String(), nullable=True),

        # Email verification
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('verification_token', sa.String(), nullable=True),
        sa.Column('verification_token_expires_at', sa.DateTime(), nullable=True),
        sa.Column('verification_resend_count', sa.Integer(), nullable=False),
        sa.Column('last_verification_resend', sa.DateTime(), nullable=True),

        # Password reset (hash only)
        sa.Column('password_reset_token_hash', sa.String(), nullable=True),
        sa.Column('password_reset_expires_at', sa.DateTime(), nullable=True),

        # Lockout
        sa.Column('login_attempts', sa.Integer(), nullable=False),
        sa.Column('lock_until', sa.DateTime(), nullable=True),

        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('last_active', sa.DateTime(), nullable=True),
        sa.Column('last_chat_visit', sa.DateTime(), nullable=True),
        sa.CheckConstraint('login_attempts >= 0', name='ck_users_login_attempts_non_negative'),
        sa.CheckConstraint(
            'hashed_password IS NOT NULL OR google_id IS NOT NULL',
            name='ck_users_credential_present'
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_google_id'), 'users', ['google_id'], unique=True)
    op.create_index(op.f('ix_users_verification_token'), 'users', ['verification_token'], unique=False)
    op.create_index(op.f('ix_users_password_reset_token_hash'), 'users', ['password_reset_token_hash'], unique=False)

    op.create_table('resources',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('course_name', sa.String(length=200), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('resource_type', resource_type, nullable=False),
        sa.Column('department', sa.String(), nullable=False),
        sa.Column('semester', sa.String(), nullable=False),
        sa.Column('section', sa.String(), nullable=False),
        sa.Column('batch', sa.String(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('file_name', sa.String(), nullable=False),
        sa.Column('file_url', sa.String(), nullable=False),
        sa.Column('file_size', sa.String(), nullable=False),
        sa.Column('file_type', sa.String(), nullable=False),
        sa.Column('storage_path', sa.String(), nullable=True),
        sa.Column('pages', sa.Integer(), nullable=False),
        sa.Column('thumbnail_url', sa.String(), nullable=True),
        sa.Column('uploaded_by', sa.Uuid(), nullable=True),
        sa.Column('uploader_name', sa.String(), nullable=False),
        sa.Column('uploader_email', sa.String(), nullable=False),
        sa.Column('status', resource_status, nullable=False),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('reviewed_by', sa.Uuid(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('download_count', sa.Integer(), nullable=False),
        sa.Column('view_count', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint('download_count >= 0', name='ck_resources_download_count_non_negative'),
        sa.CheckConstraint('view_count >= 0', name='ck_resources_view_count_non_negative'),
        sa.ForeignKeyConstraint(['uploaded_by'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['reviewed_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_resources_resource_type'), 'resources', ['resource_type'], unique=False)
    op.create_index(op.f('ix_resources_year'), 'resources', ['year'], unique=False)
    op.create_index(op.f('ix_resources_uploaded_by'), 'resources', ['uploaded_by'], unique=False)
    op.create_index(op.f('ix_resources_status'), 'resources', ['status'], unique=False)
    op.create_index(op.f('ix_resources_created_at'), 'resources', ['created_at'], unique=False)
    op.create_index(
        'ix_resources_department_semester_status', 'resources',
        ['department', 'semester', 'status'], unique=False
    )

    op.create_table('staff',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('department', department, nullable=False),
        sa.Column('image', sa.String(), nullable=False),
        sa.Column('courses', sa.JSON(), nullable=False),
        sa.Column('qualification', sa.String(), nullable=False),
        sa.Column('office', sa.String(), nullable=False),
        sa.Column('counselling_hours', sa.String(), nullable=False),
        sa.Column('phone_number', sa.String(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('specialization', sa.JSON(), nullable=False),
        sa.Column('years_of_experience', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_staff_name'), 'staff', ['name'], unique=False)
    op.create_index(op.f('ix_staff_email'), 'staff', ['email'], unique=True)
    op.create_index(op.f('ix_staff_department'), 'staff', ['department'], unique=False)
    op.create_index(op.f('ix_staff_created_at'), 'staff', ['created_at'], unique=False)

    op.create_table('chat_messages',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('room_id', sa.String(), nullable=False),
        sa.Column('department', sa.String(), nullable=False),
        sa.Column('semester', sa.String(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('message_type', message_type, nullable=False),
        sa.Column('file_url', sa.String(), nullable=True),
        sa.Column('file_name', sa.String(), nullable=True),
        sa.Column('reply_to', sa.Uuid(), nullable=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('user_name', sa.String(), nullable=False),
        sa.Column('user_email', sa.String(), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['reply_to'], ['chat_messages.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_chat_messages_room_id'), 'chat_messages', ['room_id'], unique=False)
    op.create_index(op.f('ix_chat_messages_user_id'), 'chat_messages', ['user_id'], unique=False)
    op.create_index('ix_chat_messages_room_created', 'chat_messages', ['room_id', 'created_at'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_chat_messages_room_created', table_name='chat_messages')
    op.drop_index(op.f('ix_chat_messages_user_id'), table_name='chat_messages')
    op.drop_index(op.f('ix_chat_messages_room_id'), table_name='chat_messages')
    op.drop_table('chat_messages')

    op.drop_index(op.f('ix_staff_created_at'), table_name='staff')
    op.drop_index(op.f('ix_staff_department'), table_name='staff')
    op.drop_index(op.f('ix_staff_email'), table_name='staff')
    op.drop_index(op.f('ix_staff_name'), table_name='staff')
    op.drop_table('staff')

    op.drop_index('ix_resources_department_semester_status', table_name='resources')
    op.drop_index(op.f('ix_resources_created_at'), table_name='resources')
    op.drop_index(op.f('ix_resources_status'), table_name='resources')
    op.drop_index(op.f('ix_resources_uploaded_by'), table_name='resources')
    op.drop_index(op.f('ix_resources_year'), table_name='resources')
    op.drop_index(op.f('ix_resources_resource_type'), table_name='resources')
    op.drop_table('resources')

    op.drop_index(op.f('ix_users_password_reset_token_hash'), table_name='users')
    op.drop_index(op.f('ix_users_verification_token'), table_name='users')
    op.drop_index(op.f('ix_users_google_id'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (message_type, department, resource_status, resource_type, auth_provider, user_role):
        enum_type.drop(bind, checkfirst=True)
