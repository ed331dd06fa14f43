"""initial identity and asset tables

Revision ID: 3b1f0c9d7e21
Revises:
Create Date: 2026-10-19 12:04:31.118240

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '3b1f0c9d7e21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = postgresql.ENUM('COMPANY_MANAGER', 'EMPLOYEE', name='userrole', create_type=False)
entity_state = postgresql.ENUM('ACTIVE', 'PASSIVE', name='entitystate', create_type=False)
membership_type = postgresql.ENUM('MONTHLY', 'QUARTERLY', 'YEARLY', name='membershiptype', create_type=False)
asset_status = postgresql.ENUM('PENDING', 'APPROVED', 'REJECTED', name='assetstatus', create_type=False)


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    for enum_type in (user_role, entity_state, membership_type, asset_status):
        enum_type.create(bind, checkfirst=True)

    op.create_table('address',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('sid', sa.String(length=22), nullable=False),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('district', sa.String(), nullable=True),
        sa.Column('street', sa.String(), nullable=True),
        sa.Column('postal_code', sa.String(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_address_sid'), 'address', ['sid'], unique=True)

    op.create_table('company',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('sid', sa.String(length=22), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('is_mail_verified', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('logo_url', sa.String(), nullable=True),
        sa.Column('address_sid', sa.String(length=22), nullable=True),
        sa.ForeignKeyConstraint(['address_sid'], ['address.sid'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_company_sid'), 'company', ['sid'], unique=True)
    op.create_index(op.f('ix_company_email'), 'company', ['email'], unique=True)

    op.create_table('user',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('sid', sa.String(length=22), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        sa.Column('avatar_url', sa.String(), nullable=True),
        sa.Column('role', user_role, nullable=False),
        sa.Column('state', entity_state, nullable=False),
        sa.Column('company_sid', sa.String(length=22), nullable=False),
        sa.ForeignKeyConstraint(['company_sid'], ['company.sid'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_user_sid'), 'user', ['sid'], unique=True)
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)
    op.create_index(op.f('ix_user_company_sid'), 'user', ['company_sid'], unique=False)

    op.create_table('userdetails',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('sid', sa.String(length=22), nullable=False),
        sa.Column('user_sid', sa.String(length=22), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('address_sid', sa.String(length=22), nullable=True),
        sa.ForeignKeyConstraint(['user_sid'], ['user.sid'], ),
        sa.ForeignKeyConstraint(['address_sid'], ['address.sid'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_sid')
    )
    op.create_index(op.f('ix_userdetails_sid'), 'userdetails', ['sid'], unique=True)

    op.create_table('verificationtoken',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('sid', sa.String(length=22), nullable=False),
        sa.Column('token', sa.Text(), nullable=False),
        sa.Column('company_sid', sa.String(length=22), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('state', entity_state, nullable=False),
        sa.ForeignKeyConstraint(['company_sid'], ['company.sid'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('token')
    )
    op.create_index(op.f('ix_verificationtoken_sid'), 'verificationtoken', ['sid'], unique=True)
    op.create_index(op.f('ix_verificationtoken_company_sid'), 'verificationtoken', ['company_sid'], unique=False)

    op.create_table('membership',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('sid', sa.String(length=22), nullable=False),
        sa.Column('company_sid', sa.String(length=22), nullable=False),
        sa.Column('membership_type', membership_type, nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.ForeignKeyConstraint(['company_sid'], ['company.sid'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('company_sid')
    )
    op.create_index(op.f('ix_membership_sid'), 'membership', ['sid'], unique=True)

    op.create_table('asset',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('sid', sa.String(length=22), nullable=False),
        sa.Column('user_sid', sa.String(length=22), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('serial_number', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('assigned_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', asset_status, nullable=False),
        sa.Column('reject_message', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['user_sid'], ['user.sid'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_asset_sid'), 'asset', ['sid'], unique=True)
    op.create_index(op.f('ix_asset_user_sid'), 'asset', ['user_sid'], unique=False)
    op.create_index(op.f('ix_asset_serial_number'), 'asset', ['serial_number'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('asset')
    op.drop_table('membership')
    op.drop_table('verificationtoken')
    op.drop_table('userdetails')
    op.drop_table('user')
    op.drop_table('company')
    op.drop_table('address')
    asset_status.drop(op.get_bind(), checkfirst=True)
    membership_type.drop(op.get_bind(), checkfirst=True)
    entity_state.drop(op.get_bind(), checkfirst=True)
    user_role.drop(op.get_bind(), checkfirst=True)
