"""Initial schema

Revision ID: 3f1c2a7b9d40
Revises: 
Create Date: 2026-10-19 10:12:41.502113

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1c2a7b9d40'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    # Users first, everything else references them or blood_banks
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('blood_group', sa.String(length=8), nullable=True),
        sa.Column('role', sa.String(length=16), nullable=False),
        sa.Column('is_donor', sa.Boolean(), nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=True),
        sa.Column('needs_blood', sa.Boolean(), nullable=True),
        sa.Column('street', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('pincode', sa.String(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('last_donation_date', sa.DateTime(timezone=True), nullable=True),
        *_timestamps()
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_blood_group', 'users', ['blood_group'])

    op.create_table(
        'blood_banks',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('license_number', sa.String(), nullable=False),
        sa.Column('registration_number', sa.String(), nullable=True),
        sa.Column('established_year', sa.Integer(), nullable=True),
        sa.Column('street', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('pincode', sa.String(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('operating_hours', sa.JSON(), nullable=True),
        sa.Column('services', sa.JSON(), nullable=False),
        sa.Column('contact_person', sa.JSON(), nullable=True),
        sa.Column('logo', sa.String(), nullable=True),
        sa.Column('inventory', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=True),
        *_timestamps()
    )
    op.create_index('ix_blood_banks_id', 'blood_banks', ['id'])
    op.create_index('ix_blood_banks_email', 'blood_banks', ['email'], unique=True)
    op.create_index('ix_blood_banks_license_number', 'blood_banks', ['license_number'], unique=True)
    op.create_index('ix_blood_banks_city', 'blood_banks', ['city'])

    op.create_table(
        'inventories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('blood_bank_id', sa.Integer(), sa.ForeignKey('blood_banks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('blood_bank_name', sa.String(), nullable=False),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('last_modified', sa.DateTime(timezone=True), nullable=False),
        *_timestamps()
    )
    op.create_index('ix_inventories_id', 'inventories', ['id'])
    op.create_index('ix_inventories_blood_bank_id', 'inventories', ['blood_bank_id'], unique=True)

    op.create_table(
        'donor_health_forms',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('donor_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('gender', sa.String(length=16), nullable=False),
        sa.Column('blood_group', sa.String(length=8), nullable=False),
        sa.Column('weight', sa.Float(), nullable=False),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('medical_conditions', sa.JSON(), nullable=False),
        sa.Column('recent_activities', sa.JSON(), nullable=False),
        sa.Column('current_health', sa.JSON(), nullable=False),
        sa.Column('lifestyle', sa.JSON(), nullable=False),
        sa.Column('donation_history', sa.JSON(), nullable=False),
        sa.Column('consent', sa.JSON(), nullable=False),
        sa.Column('is_eligible', sa.Boolean(), nullable=False),
        sa.Column('ineligibility_reasons', sa.JSON(), nullable=False),
        sa.Column('eligibility_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('reviewed_by', sa.Integer(), sa.ForeignKey('blood_banks.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('review_notes', sa.Text(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_donor_health_forms_id', 'donor_health_forms', ['id'])
    op.create_index('ix_donor_health_forms_donor_id', 'donor_health_forms', ['donor_id'])
    op.create_index('ix_donor_health_forms_is_eligible', 'donor_health_forms', ['is_eligible'])
    op.create_index('ix_donor_health_forms_status', 'donor_health_forms', ['status'])

    op.create_table(
        'blood_requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('requested_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('patient_name', sa.String(), nullable=False),
        sa.Column('blood_group', sa.String(length=8), nullable=False),
        sa.Column('units', sa.Integer(), nullable=False),
        sa.Column('urgency', sa.String(length=16), nullable=False),
        sa.Column('hospital_name', sa.String(), nullable=True),
        sa.Column('hospital_address', sa.String(), nullable=True),
        sa.Column('hospital_latitude', sa.Float(), nullable=True),
        sa.Column('hospital_longitude', sa.Float(), nullable=True),
        sa.Column('contact_number', sa.String(), nullable=False),
        sa.Column('required_by', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('blood_bank_id', sa.Integer(), sa.ForeignKey('blood_banks.id', ondelete='SET NULL'), nullable=True),
        sa.Column('response_status', sa.String(length=16), nullable=True),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('response_note', sa.Text(), nullable=True),
        *_timestamps()
    )
    op.create_index('ix_blood_requests_id', 'blood_requests', ['id'])
    op.create_index('ix_blood_requests_requested_by', 'blood_requests', ['requested_by'])
    op.create_index('ix_blood_requests_blood_group', 'blood_requests', ['blood_group'])
    op.create_index('ix_blood_requests_status', 'blood_requests', ['status'])
    op.create_index('ix_blood_requests_blood_bank_id', 'blood_requests', ['blood_bank_id'])

    op.create_table(
        'blood_camps',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('organizer_id', sa.Integer(), sa.ForeignKey('blood_banks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('organizer_name', sa.String(), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('start_time', sa.String(length=8), nullable=False),
        sa.Column('end_time', sa.String(length=8), nullable=False),
        sa.Column('venue', sa.String(), nullable=False),
        sa.Column('address', sa.String(), nullable=False),
        sa.Column('city', sa.String(), nullable=False),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('pincode', sa.String(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('target_units', sa.Integer(), nullable=False),
        sa.Column('collected_units', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('contact_phone', sa.String(), nullable=True),
        sa.Column('contact_email', sa.String(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False),
        *_timestamps()
    )
    op.create_index('ix_blood_camps_id', 'blood_camps', ['id'])
    op.create_index('ix_blood_camps_organizer_id', 'blood_camps', ['organizer_id'])
    op.create_index('ix_blood_camps_date', 'blood_camps', ['date'])
    op.create_index('ix_blood_camps_city', 'blood_camps', ['city'])

    op.create_table(
        'camp_registrations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('camp_id', sa.Integer(), sa.ForeignKey('blood_camps.id', ondelete='CASCADE'), nullable=False),
        sa.Column('donor_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('blood_group', sa.String(length=16), nullable=True),
        sa.Column('registered_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('attended', sa.Boolean(), nullable=False),
        sa.UniqueConstraint('camp_id', 'donor_id', name='uq_camp_registration_donor'),
    )
    op.create_index('ix_camp_registrations_id', 'camp_registrations', ['id'])
    op.create_index('ix_camp_registrations_camp_id', 'camp_registrations', ['camp_id'])
    op.create_index('ix_camp_registrations_donor_id', 'camp_registrations', ['donor_id'])

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('organizer', sa.String(), nullable=False),
        sa.Column('organized_by', sa.Integer(), sa.ForeignKey('blood_banks.id', ondelete='CASCADE'), nullable=True),
        sa.Column('event_type', sa.String(length=32), nullable=False),
        sa.Column('location_name', sa.String(), nullable=True),
        sa.Column('location_address', sa.String(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('start_time', sa.String(length=8), nullable=False),
        sa.Column('end_time', sa.String(length=8), nullable=False),
        sa.Column('contact_phone', sa.String(), nullable=True),
        sa.Column('contact_email', sa.String(), nullable=True),
        sa.Column('expected_donors', sa.Integer(), nullable=False),
        sa.Column('registered_donors', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        *_timestamps()
    )
    op.create_index('ix_events_id', 'events', ['id'])
    op.create_index('ix_events_organized_by', 'events', ['organized_by'])
    op.create_index('ix_events_date', 'events', ['date'])


def downgrade() -> None:
    op.drop_table('events')
    op.drop_table('camp_registrations')
    op.drop_table('blood_camps')
    op.drop_table('blood_requests')
    op.drop_table('donor_health_forms')
    op.drop_table('inventories')
    op.drop_table('blood_banks')
    op.drop_table('users')
