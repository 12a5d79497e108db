"""create user, rooms, booking and feedback tables

Revision ID: 0001_initial
Revises:
Create Date: 2024-05-02 10:12:41.503215

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('last_login_at', sa.String(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_id'), 'user', ['id'], unique=False)
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)

    op.create_table(
        'rooms',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('availability', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_rooms_id'), 'rooms', ['id'], unique=False)

    op.create_table(
        'booking',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('room_id', sa.String(length=64), nullable=False),
        sa.Column('check_in', sa.String(), nullable=True),
        sa.Column('check_out', sa.String(), nullable=True),
        sa.Column('adults', sa.Integer(), nullable=True),
        sa.Column('child', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['room_id'], ['rooms.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_booking_id'), 'booking', ['id'], unique=False)
    op.create_index(op.f('ix_booking_email'), 'booking', ['email'], unique=False)
    op.create_index(op.f('ix_booking_room_id'), 'booking', ['room_id'], unique=False)

    op.create_table(
        'feedback',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('booking_id', sa.String(length=64), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_feedback_id'), 'feedback', ['id'], unique=False)
    op.create_index(op.f('ix_feedback_booking_id'), 'feedback', ['booking_id'], unique=False)
    op.create_index(op.f('ix_feedback_timestamp'), 'feedback', ['timestamp'], unique=False)


def downgrade():
    op.drop_table('feedback')
    op.drop_table('booking')
    op.drop_table('rooms')
    op.drop_table('user')
