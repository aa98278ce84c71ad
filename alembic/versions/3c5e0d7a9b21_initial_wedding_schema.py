"""Initial wedding schema: guests, rsvps, settings and admin users

Revision ID: 3c5e0d7a9b21
Revises: 
Create Date: 2026-03-02 19:40:12.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '3c5e0d7a9b21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

RSVP_STATUSES = ('pending', 'attending', 'not_attending', 'maybe')
MEAL_PREFERENCES = ('standard', 'vegetarian', 'vegan', 'gluten_free', 'other')


def upgrade() -> None:
    # Create enums
    postgresql.ENUM('admin', name='approleenum').create(op.get_bind())
    postgresql.ENUM(*RSVP_STATUSES, name='rsvpstatusenum').create(op.get_bind())
    postgresql.ENUM(*MEAL_PREFERENCES, name='mealpreferenceenum').create(op.get_bind())

    op.create_table(
        'admin_users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('role', postgresql.ENUM(name='approleenum', create_type=False), nullable=False, server_default='admin'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    op.create_index('ix_admin_users_email', 'admin_users', ['email'])

    op.create_table(
        'guests',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('invite_code', sa.String(64), nullable=False, unique=True),
        sa.Column('plus_one_allowed', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    op.create_index('idx_guest_created_at', 'guests', ['created_at'])
    op.create_index('idx_guest_name', 'guests', ['name'])

    op.create_table(
        'rsvps',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('guest_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('guests.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', postgresql.ENUM(name='rsvpstatusenum', create_type=False), nullable=False, server_default='pending'),
        sa.Column('dietary_notes', sa.Text, nullable=True),
        sa.Column('plus_one_name', sa.String(255), nullable=True),
        sa.Column('message', sa.Text, nullable=True),
        sa.Column('meal_preference', postgresql.ENUM(name='mealpreferenceenum', create_type=False), nullable=True),
        sa.Column('plus_one_meal_preference', postgresql.ENUM(name='mealpreferenceenum', create_type=False), nullable=True),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    # The RSVP upsert uses this constraint as its conflict target
    op.create_unique_constraint('uq_rsvp_guest', 'rsvps', ['guest_id'])
    op.create_index('idx_rsvp_status', 'rsvps', ['status'])

    op.create_table(
        'wedding_settings',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('key', sa.String(100), nullable=False),
        sa.Column('value', sa.Text, nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    op.create_index('ix_wedding_settings_key', 'wedding_settings', ['key'], unique=True)


def downgrade() -> None:
    # Drop tables
    op.drop_table('wedding_settings')
    op.drop_table('rsvps')
    op.drop_table('guests')
    op.drop_table('admin_users')

    # Drop enums
    sa.Enum(name='mealpreferenceenum').drop(op.get_bind())
    sa.Enum(name='rsvpstatusenum').drop(op.get_bind())
    sa.Enum(name='approleenum').drop(op.get_bind())
