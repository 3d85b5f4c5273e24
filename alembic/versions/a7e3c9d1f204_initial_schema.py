"""initial_schema

Revision ID: a7e3c9d1f204
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a7e3c9d1f204'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'events',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('max_team_size', sa.Integer(), nullable=False, server_default='4'),
        sa.Column('registration_deadline', sa.DateTime(timezone=True), nullable=True),
        sa.Column('sheet_id', sa.String(length=200), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'problem_statements',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('event_id', sa.String(length=36),
                  sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('sheet_tab_name', sa.String(length=200), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_problem_statements_event', 'problem_statements', ['event_id'])

    op.create_table(
        'registrations',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('event_id', sa.String(length=36),
                  sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('problem_statement_id', sa.String(length=36),
                  sa.ForeignKey('problem_statements.id', ondelete='CASCADE'), nullable=False),
        sa.Column('team_name', sa.String(length=200), nullable=False),
        sa.Column('college_name', sa.String(length=200), nullable=False, server_default=''),
        sa.Column('contact_number', sa.String(length=32), nullable=False, server_default=''),
        sa.Column('email', sa.String(length=254), nullable=False, server_default=''),
        sa.Column('team_size', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('team_members', sa.JSON(), nullable=False),
        sa.Column('reg_code', sa.String(length=64), nullable=False),
        sa.Column('is_locked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('attendance_update_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_registrations_reg_code', 'registrations', ['reg_code'], unique=True)
    op.create_index('idx_registrations_event', 'registrations', ['event_id'])
    op.create_index('idx_registrations_problem', 'registrations', ['problem_statement_id'])

    op.create_table(
        'attendance',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('registration_id', sa.String(length=36),
                  sa.ForeignKey('registrations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('member_name', sa.String(length=120), nullable=False),
        sa.Column('is_present', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('last_updated', sa.DateTime(timezone=True), nullable=False),
        # One row per member; toggles upsert against it
        sa.UniqueConstraint('registration_id', 'member_name', name='uq_attendance_member'),
    )


def downgrade():
    op.drop_table('attendance')
    op.drop_index('idx_registrations_problem', table_name='registrations')
    op.drop_index('idx_registrations_event', table_name='registrations')
    op.drop_index('ix_registrations_reg_code', table_name='registrations')
    op.drop_table('registrations')
    op.drop_index('idx_problem_statements_event', table_name='problem_statements')
    op.drop_table('problem_statements')
    op.drop_table('events')
