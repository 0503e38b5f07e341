"""Initial schema: members, stations, chargers, charging sessions

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000

Enum columns are stored as VARCHAR (non-native) so the same revision runs on
SQLite and PostgreSQL.
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None

ROLE = sa.Enum('USER', 'ADMIN', name='role', native_enum=False)
CHARGER_TYPE = sa.Enum('AC_SLOW', 'DC_FAST', 'DC_COMBO', name='chargertype', native_enum=False)
CHARGER_STATUS = sa.Enum('AVAILABLE', 'CHARGING', 'OUT_OF_SERVICE', name='chargerstatus', native_enum=False)
CONNECTOR_TYPE = sa.Enum('AC_TYPE_1', 'CHADEMO', 'CCS1', name='connectortype', native_enum=False)
SESSION_STATUS = sa.Enum('IN_PROGRESS', 'COMPLETED', name='sessionstatus', native_enum=False)


def upgrade():
    """Create the four core tables"""
    op.create_table(
        'member',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('role', ROLE, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_member_email', 'member', ['email'], unique=True)

    op.create_table(
        'charging_station',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('station_code', sa.String(64), nullable=True, unique=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('address', sa.String(500), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('operator_name', sa.String(255), nullable=True),
        sa.Column('contact_number', sa.String(64), nullable=True),
        sa.Column('operating_hours', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('idx_station_lat_lng', 'charging_station', ['latitude', 'longitude'])

    op.create_table(
        'charger',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('charger_code', sa.String(64), nullable=True),
        sa.Column('type', CHARGER_TYPE, nullable=False),
        sa.Column('status', CHARGER_STATUS, nullable=False),
        sa.Column('power_kw', sa.Float(), nullable=True),
        sa.Column('connector_type', CONNECTOR_TYPE, nullable=True),
        sa.Column('last_status_changed_at', sa.DateTime(), nullable=False),
        sa.Column('station_id', sa.Integer(), sa.ForeignKey('charging_station.id'), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
    )
    op.create_index('ix_charger_status', 'charger', ['status'])
    op.create_index('ix_charger_station_id', 'charger', ['station_id'])

    op.create_table(
        'charging_session',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('charger_id', sa.Integer(), sa.ForeignKey('charger.id'), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('energy_delivered_kwh', sa.Float(), nullable=True),
        sa.Column('cost', sa.Float(), nullable=True),
        sa.Column('status', SESSION_STATUS, nullable=False),
    )
    op.create_index('idx_session_charger_start', 'charging_session', ['charger_id', 'start_time'])
    op.create_index('ix_charging_session_charger_id', 'charging_session', ['charger_id'])
    op.create_index('ix_charging_session_status', 'charging_session', ['status'])


def downgrade():
    """Drop the core tables, children first"""
    op.drop_index('ix_charging_session_status', table_name='charging_session')
    op.drop_index('ix_charging_session_charger_id', table_name='charging_session')
    op.drop_index('idx_session_charger_start', table_name='charging_session')
    op.drop_table('charging_session')
    op.drop_index('ix_charger_station_id', table_name='charger')
    op.drop_index('ix_charger_status', table_name='charger')
    op.drop_table('charger')
    op.drop_index('idx_station_lat_lng', table_name='charging_station')
    op.drop_table('charging_station')
    op.drop_index('ix_member_email', table_name='member')
    op.drop_table('member')
