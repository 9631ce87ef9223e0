"""initial tables

Revision ID: 0001
Revises:
Create Date: 2025-06-01

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('name', sa.String(120), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('role', sa.String(16), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
        sa.Column('total_reservations', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table('restaurant_tables',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('table_number', sa.Integer(), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False, server_default='4'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
        sa.Column('notes', sa.String(200), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_restaurant_tables_table_number', 'restaurant_tables', ['table_number'], unique=True)

    op.create_table('table_bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('table_id', sa.Integer(), sa.ForeignKey('restaurant_tables.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('booked_slots', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.UniqueConstraint('table_id', 'date', name='uq_table_booking_table_date'),
    )
    op.create_index('ix_table_booking_date', 'table_bookings', ['date'])

    op.create_table('reservations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('reservation_number', sa.String(20), nullable=False, unique=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('slot', sa.Integer(), nullable=False),
        sa.Column('guests', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(16), nullable=False, server_default='pending'),
        sa.Column('table_numbers', sa.JSON(), nullable=False),
        sa.Column('contact_phone', sa.String(20), nullable=False),
        sa.Column('contact_email', sa.String(255), nullable=False),
        sa.Column('special_request', sa.String(200), nullable=True),
        sa.Column('occasion', sa.String(20), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('checked_in_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_reservations_user_id', 'reservations', ['user_id'])
    op.create_index('ix_reservations_status', 'reservations', ['status'])
    op.create_index('ix_reservation_date_slot', 'reservations', ['date', 'slot'])

def downgrade():
    op.drop_table('reservations')
    op.drop_table('table_bookings')
    op.drop_table('restaurant_tables')
    op.drop_table('users')
