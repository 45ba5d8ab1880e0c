"""Initial schema: tenants, pages, credentials

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-01

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001_initial_schema'
down_revision = None


def upgrade():
    op.create_table(
        'tenants',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('domain', sa.String(255), nullable=False),
        sa.Column('api_key', sa.String(64), nullable=False),
        sa.Column('custom_domain', sa.String(255), nullable=True),
        sa.Column('subdomain', sa.String(63), nullable=True),
        sa.Column('subdomain_password_hash', sa.String(255), nullable=True),
        sa.Column('domain_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('domain_settings', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_tenants_name', 'tenants', ['name'], unique=True)
    op.create_index('ix_tenants_api_key', 'tenants', ['api_key'], unique=True)
    op.create_index('ix_tenants_custom_domain', 'tenants', ['custom_domain'], unique=True)
    op.create_index('ix_tenants_subdomain', 'tenants', ['subdomain'], unique=True)

    op.create_table(
        'pages',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('tenant_id', sa.Uuid(), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('weight', sa.Integer(), nullable=False, server_default='999'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_pages_tenant_id', 'pages', ['tenant_id'])
    op.create_index('ix_pages_slug', 'pages', ['slug'])
    op.create_index('ix_pages_category', 'pages', ['category'])

    op.create_table(
        'credentials',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('tenant_id', sa.Uuid(), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('environment', sa.Enum('PRODUCTION', 'STAGING', 'TESTING', name='environment'), nullable=False),
        sa.Column('service_name', sa.String(100), nullable=False),
        sa.Column('credentials', sa.JSON(), nullable=True),
        sa.Column('deployment_info', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_credentials_tenant_id', 'credentials', ['tenant_id'])
    op.create_index('ix_credentials_environment', 'credentials', ['environment'])


def downgrade():
    op.drop_table('credentials')
    sa.Enum(name='environment').drop(op.get_bind(), checkfirst=True)
    op.drop_table('pages')
    op.drop_index('ix_tenants_subdomain', 'tenants')
    op.drop_index('ix_tenants_custom_domain', 'tenants')
    op.drop_index('ix_tenants_api_key', 'tenants')
    op.drop_index('ix_tenants_name', 'tenants')
    op.drop_table('tenants')
