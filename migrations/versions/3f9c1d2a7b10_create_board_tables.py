"""Create user, habit, card and notification tables

Revision ID: 3f9c1d2a7b10
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f9c1d2a7b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=150), nullable=False),
        sa.Column('password_hash', sa.String(length=200), nullable=False),
        sa.Column('date_joined', sa.DateTime(), nullable=True),
        sa.Column('daily_reminders_enabled', sa.Boolean(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username')
    )
    op.create_table('habit',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('emoji', sa.String(length=16), nullable=True),
        sa.Column('color_hex', sa.String(length=6), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('current_streak', sa.Integer(), nullable=False),
        sa.Column('longest_streak', sa.Integer(), nullable=False),
        sa.Column('last_completed_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('reminder_enabled', sa.Boolean(), nullable=True),
        sa.Column('reminder_time', sa.Time(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('card',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('habit_id', sa.Integer(), nullable=False),
        sa.Column('habit_name', sa.String(length=200), nullable=False),
        sa.Column('emoji', sa.String(length=16), nullable=False),
        sa.Column('color_hex', sa.String(length=6), nullable=False),
        sa.Column('status', sa.String(length=10), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('moved_to_doing_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('timer_duration', sa.Integer(), nullable=True),
        sa.Column('timer_started_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('notification',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=True),
        sa.Column('key', sa.String(length=64), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('scheduled_notification',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=64), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('fire_at', sa.DateTime(), nullable=True),
        sa.Column('daily_at', sa.Time(), nullable=True),
        sa.Column('last_fired_on', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'key', name='_user_notification_key_uc')
    )

    # Indexes on foreign keys and the per-day card lookup
    with op.batch_alter_table('habit', schema=None) as batch_op:
        batch_op.create_index('ix_habit_user_id', ['user_id'], unique=False)

    with op.batch_alter_table('card', schema=None) as batch_op:
        batch_op.create_index('ix_card_user_id', ['user_id'], unique=False)
        batch_op.create_index('ix_card_created_at', ['created_at'], unique=False)

    with op.batch_alter_table('notification', schema=None) as batch_op:
        batch_op.create_index('ix_notification_user_id', ['user_id'], unique=False)

    with op.batch_alter_table('scheduled_notification', schema=None) as batch_op:
        batch_op.create_index('ix_scheduled_notification_user_id', ['user_id'], unique=False)


def downgrade():
    with op.batch_alter_table('scheduled_notification', schema=None) as batch_op:
        batch_op.drop_index('ix_scheduled_notification_user_id')

    with op.batch_alter_table('notification', schema=None) as batch_op:
        batch_op.drop_index('ix_notification_user_id')

    with op.batch_alter_table('card', schema=None) as batch_op:
        batch_op.drop_index('ix_card_created_at')
        batch_op.drop_index('ix_card_user_id')

    with op.batch_alter_table('habit', schema=None) as batch_op:
        batch_op.drop_index('ix_habit_user_id')

    op.drop_table('scheduled_notification')
    op.drop_table('notification')
    op.drop_table('card')
    op.drop_table('habit')
    op.drop_table('user')
