"""add_crew_fields_and_adhoc_requests

Revision ID: 9e2f51c7b3a4
Revises: 4b1e7c2a9d10
Create Date: 2026-10-18 14:27:05.118342

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '9e2f51c7b3a4'
down_revision: Union[str, None] = '4b1e7c2a9d10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Crew fields on users
    op.add_column('users', sa.Column('employment_type', sa.String(length=20), nullable=False, server_default='fte'))
    op.add_column('users', sa.Column('start_date', sa.Date(), nullable=True))
    op.add_column('users', sa.Column('end_date', sa.Date(), nullable=True))
    op.add_column('users', sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()))

    op.create_table(
        'adhoc_requests',
        sa.Column('request_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('requestor_name', sa.String(length=255), nullable=False),
        sa.Column('requestor_email', sa.String(length=255), nullable=True),
        sa.Column('requestor_department', sa.String(length=255), nullable=True),
        sa.Column('assigned_to', sa.Integer(), nullable=True),
        sa.Column('priority', sa.String(length=20), nullable=False, server_default='medium'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='new'),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('estimated_hours', sa.Float(), nullable=True),
        sa.Column('actual_hours', sa.Float(), nullable=False, server_default='0'),
        sa.Column('project_id', sa.Integer(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['assigned_to'], ['users.user_id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.project_id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('request_id')
    )
    op.create_index(op.f('ix_adhoc_requests_assigned_to'), 'adhoc_requests', ['assigned_to'], unique=False)

    op.create_table(
        'adhoc_request_comments',
        sa.Column('comment_id', sa.Integer(), nullable=False),
        sa.Column('request_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('comment', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['request_id'], ['adhoc_requests.request_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('comment_id')
    )
    op.create_index(op.f('ix_adhoc_request_comments_request_id'), 'adhoc_request_comments', ['request_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_adhoc_request_comments_request_id'), table_name='adhoc_request_comments')
    op.drop_table('adhoc_request_comments')
    op.drop_index(op.f('ix_adhoc_requests_assigned_to'), table_name='adhoc_requests')
    op.drop_table('adhoc_requests')
    op.drop_column('users', 'updated_at')
    op.drop_column('users', 'end_date')
    op.drop_column('users', 'start_date')
    op.drop_column('users', 'employment_type')
