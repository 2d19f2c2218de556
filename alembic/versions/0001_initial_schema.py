"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Adds:
- meals table (archived via the deleted flag)
- dinners table, one row per date
- attendance table, one row per (dinner, member)
- sessions table for PIN logins
"""
from alembic import op
import sqlalchemy as sa

revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

MEMBERS = ('Mum', 'Dad', 'Jade', 'Lewis')


def upgrade() -> None:
    op.create_table(
        'meals',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('shopping_list', sa.Text(), nullable=True),
        sa.Column('photo_key', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_meals_deleted_name', 'meals', ['deleted', 'name'], unique=False)

    op.create_table(
        'dinners',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('meal_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('extra_guests', sa.Integer(), nullable=False, server_default='0'),
        sa.CheckConstraint('extra_guests BETWEEN 0 AND 99', name='ck_dinners_extra_guests_range'),
        sa.ForeignKeyConstraint(['meal_id'], ['meals.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('date')
    )
    op.create_index('idx_dinners_meal_id', 'dinners', ['meal_id'], unique=False)

    op.create_table(
        'attendance',
        sa.Column('dinner_id', sa.Integer(), nullable=False),
        sa.Column('member', sa.Enum(*MEMBERS, name='attendance_member'), nullable=False),
        sa.ForeignKeyConstraint(['dinner_id'], ['dinners.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('dinner_id', 'member')
    )

    op.create_table(
        'sessions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('token', sa.String(64), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_sessions_token'), 'sessions', ['token'], unique=True)
    op.create_index(op.f('ix_sessions_expires_at'), 'sessions', ['expires_at'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_sessions_expires_at'), table_name='sessions')
    op.drop_index(op.f('ix_sessions_token'), table_name='sessions')
    op.drop_table('sessions')

    op.drop_table('attendance')
    sa.Enum(name='attendance_member').drop(op.get_bind(), checkfirst=True)

    op.drop_index('idx_dinners_meal_id', table_name='dinners')
    op.drop_table('dinners')

    op.drop_index('idx_meals_deleted_name', table_name='meals')
    op.drop_table('meals')
