"""initial schema: accounts, tickets, upvote ledger, counters, audit

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
        sa.Column('bio', sa.Text()),
        sa.Column('avatar_url', sa.String(length=512)),
        sa.Column('contact_number', sa.String(length=32)),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_index('ix_users_created_at', 'users', ['created_at'])

    op.create_table('user_roles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False),
    )
    op.create_index('ix_user_roles_user_id', 'user_roles', ['user_id'])
    # unique constraint handled via batch for sqlite
    with op.batch_alter_table('user_roles') as batch_op:
        batch_op.create_unique_constraint('uq_user_role', ['user_id', 'role'])

    op.create_table('revoked_tokens',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('jti', sa.String(length=64), nullable=False, unique=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_revoked_tokens_jti', 'revoked_tokens', ['jti'])

    op.create_table('tickets',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('display_id', sa.String(length=32), nullable=False, unique=True),
        sa.Column('display_seq', sa.Integer(), nullable=False, unique=True),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=32), nullable=False),
        sa.Column('priority', sa.String(length=16), nullable=False),
        sa.Column('stage', sa.String(length=16), nullable=False, server_default='committed'),
        sa.Column('upvote_count', sa.Integer(), nullable=False, server_default=sa.text('1')),
        sa.Column('mood', sa.String(length=16), nullable=True),
        sa.Column('creator_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('attachment_ref', sa.String(length=512), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.CheckConstraint("stage IN ('committed', 'reviewing', 'patching', 'resolved')", name='ck_tickets_stage'),
        sa.CheckConstraint(
            "category IN ('infrastructure', 'academic', 'mental-health', 'hostel', 'food', 'other')",
            name='ck_tickets_category',
        ),
        sa.CheckConstraint("priority IN ('low', 'medium', 'high', 'critical')", name='ck_tickets_priority'),
        sa.CheckConstraint('upvote_count >= 1', name='ck_tickets_upvotes'),
    )
    for col in ('display_id', 'category', 'priority', 'stage', 'creator_id', 'created_at'):
        op.create_index(f'ix_tickets_{col}', 'tickets', [col])

    op.create_table('ticket_upvotes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ticket_id', sa.String(length=36), sa.ForeignKey('tickets.id', ondelete='CASCADE'), nullable=False),
        sa.Column('actor_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_ticket_upvotes_ticket_id', 'ticket_upvotes', ['ticket_id'])
    op.create_index('ix_ticket_upvotes_actor_id', 'ticket_upvotes', ['actor_id'])

    counters = op.create_table('counters',
        sa.Column('name', sa.String(length=32), primary_key=True),
        sa.Column('value', sa.Integer(), nullable=False, server_default=sa.text('0')),
    )
    op.bulk_insert(counters, [{'name': 'ticket', 'value': 0}])

    op.create_table('audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('actor_user_id', sa.Integer(), nullable=False),
        sa.Column('action', sa.String(length=64), nullable=False),
        sa.Column('entity', sa.String(length=32)),
        sa.Column('entity_id', sa.String(length=36)),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_audit_logs_actor_user_id', 'audit_logs', ['actor_user_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_entity_ref', 'audit_logs', ['entity', 'entity_id'])


def downgrade():
    for tbl in ['audit_logs', 'counters', 'ticket_upvotes', 'tickets', 'revoked_tokens', 'user_roles', 'users']:
        op.drop_table(tbl)
