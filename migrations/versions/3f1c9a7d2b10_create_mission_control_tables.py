"""Create agents, tasks, activities and notifications tables

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TASK_STATUSES = ('inbox', 'assigned', 'in_progress', 'review', 'blocked', 'done')


def upgrade() -> None:
    op.create_table(
        'agents',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('status', sa.Enum('idle', 'active', 'blocked', name='agent_status'), nullable=False),
        sa.Column('mention_patterns', sa.JSON(), nullable=False),
        sa.Column('session_key', sa.String(), nullable=True, unique=True),
        sa.Column('model', sa.String(), nullable=True),
        sa.Column('current_task_id', sa.String(), nullable=True),
        sa.Column('last_heartbeat', sa.BigInteger(), nullable=True),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
    )
    op.create_index('ix_agents_name', 'agents', ['name'], unique=True)

    op.create_table(
        'tasks',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('status', sa.Enum(*TASK_STATUSES, name='task_status'), nullable=False),
        sa.Column('priority', sa.Enum('P0', 'P1', 'P2', 'P3', name='task_priority'), nullable=False),
        sa.Column('assignee_ids', sa.JSON(), nullable=False),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('reviewer_id', sa.String(), nullable=True),
        sa.Column('review_comment', sa.Text(), nullable=True),
        sa.Column('reviewed_at', sa.BigInteger(), nullable=True),
        sa.Column('due_date', sa.BigInteger(), nullable=True),
        sa.Column('is_blocked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('original_status', sa.Enum(*TASK_STATUSES, name='task_original_status'), nullable=True),
        sa.Column('state_changed_at', sa.BigInteger(), nullable=False),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
        sa.Column('updated_at', sa.BigInteger(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
    )
    op.create_index('ix_tasks_status', 'tasks', ['status'])
    op.create_index('ix_tasks_created_by', 'tasks', ['created_by'])

    op.create_table(
        'activities',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'type',
            sa.Enum(
                'task_created', 'task_assigned', 'task_updated', 'status_changed',
                'message_sent', 'document_created', 'agent_heartbeat',
                name='activity_type',
            ),
            nullable=False,
        ),
        sa.Column('agent_id', sa.String(), nullable=False),
        sa.Column('task_id', sa.String(), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
    )
    op.create_index('ix_activities_agent_id', 'activities', ['agent_id'])
    op.create_index('ix_activities_task_id', 'activities', ['task_id'])
    op.create_index('ix_activities_created_at', 'activities', ['created_at'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('recipient_id', sa.String(), nullable=False),
        sa.Column('sender_id', sa.String(), nullable=False),
        sa.Column('task_id', sa.String(), nullable=True),
        sa.Column('message_id', sa.String(), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('delivered', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
    )
    op.create_index('ix_notifications_recipient_id', 'notifications', ['recipient_id'])
    op.create_index('ix_notifications_undelivered', 'notifications', ['recipient_id', 'delivered'])


def downgrade() -> None:
    op.drop_table('notifications')
    op.drop_table('activities')
    op.drop_table('tasks')
    op.drop_table('agents')
    sa.Enum(name='activity_type').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='task_original_status').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='task_priority').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='task_status').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='agent_status').drop(op.get_bind(), checkfirst=True)
