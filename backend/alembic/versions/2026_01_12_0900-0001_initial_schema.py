"""initial_schema

Users, faculty profiles, inventory, projects, resource requests and audit log.

Revision ID: 0001
Revises:
Create Date: 2026-01-12 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


user_role = sa.Enum('STUDENT', 'FACULTY', 'ADMIN', name='userrole')
item_kind = sa.Enum('LAB_COMPONENT', 'LIBRARY_ITEM', name='itemkind')
project_status = sa.Enum('PENDING', 'ONGOING', 'COMPLETED', 'OVERDUE', 'REJECTED', name='projectstatus')
request_status = sa.Enum('PENDING', 'APPROVED', 'REJECTED', 'COLLECTED', 'RETURNED', name='requeststatus')


def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('hashed_password', sa.String(length=255), nullable=True),
        sa.Column('role', user_role, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table('faculty',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('faculty_code', sa.String(length=50), nullable=False),
        sa.Column('department', sa.String(length=255), nullable=False),
        sa.Column('office', sa.String(length=255), nullable=False),
        sa.Column('specialization', sa.String(length=255), nullable=False),
        sa.Column('office_hours', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id')
    )
    op.create_index('ix_faculty_faculty_code', 'faculty', ['faculty_code'], unique=True)

    op.create_table('inventory_items',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('kind', item_kind, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('specification', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('total_quantity', sa.Integer(), nullable=False),
        sa.Column('available_quantity', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('total_quantity >= 0', name='ck_inventory_items_total_non_negative'),
        sa.CheckConstraint('available_quantity >= 0', name='ck_inventory_items_available_non_negative'),
        sa.CheckConstraint('available_quantity <= total_quantity', name='ck_inventory_items_available_le_total'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_inventory_items_kind_category', 'inventory_items', ['kind', 'category'], unique=False)

    op.create_table('projects',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('owner_id', sa.String(length=36), nullable=False),
        sa.Column('guide_id', sa.String(length=36), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', project_status, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['guide_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_projects_owner_id', 'projects', ['owner_id'], unique=False)
    op.create_index('ix_projects_owner_status', 'projects', ['owner_id', 'status'], unique=False)

    op.create_table('project_components',
        sa.Column('project_id', sa.String(length=36), nullable=False),
        sa.Column('item_id', sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['item_id'], ['inventory_items.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('project_id', 'item_id')
    )

    op.create_table('resource_requests',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('item_id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('project_id', sa.String(length=36), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('purpose', sa.Text(), nullable=False),
        sa.Column('request_date', sa.DateTime(), nullable=False),
        sa.Column('required_date', sa.DateTime(), nullable=False),
        sa.Column('status', request_status, nullable=False),
        sa.Column('approved_date', sa.DateTime(), nullable=True),
        sa.Column('approved_by', sa.String(length=36), nullable=True),
        sa.Column('return_date', sa.DateTime(), nullable=True),
        sa.Column('return_verified_at', sa.DateTime(), nullable=True),
        sa.Column('return_verified_by', sa.String(length=36), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('quantity > 0', name='ck_resource_requests_quantity_positive'),
        sa.ForeignKeyConstraint(['item_id'], ['inventory_items.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id']),
        sa.ForeignKeyConstraint(['approved_by'], ['users.id']),
        sa.ForeignKeyConstraint(['return_verified_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_resource_requests_project_id', 'resource_requests', ['project_id'], unique=False)
    op.create_index('ix_resource_requests_user_status', 'resource_requests', ['user_id', 'status'], unique=False)
    op.create_index('ix_resource_requests_item_status', 'resource_requests', ['item_id', 'status'], unique=False)

    op.create_table('audit_logs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('actor_id', sa.String(length=36), nullable=True),
        sa.Column('action', sa.String(length=100), nullable=False),
        sa.Column('target_type', sa.String(length=50), nullable=False),
        sa.Column('target_id', sa.String(length=36), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['actor_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_audit_logs_actor_id', 'audit_logs', ['actor_id'], unique=False)
    op.create_index('ix_audit_logs_target_id', 'audit_logs', ['target_id'], unique=False)
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_audit_logs_created_at', table_name='audit_logs')
    op.drop_index('ix_audit_logs_target_id', table_name='audit_logs')
    op.drop_index('ix_audit_logs_actor_id', table_name='audit_logs')
    op.drop_table('audit_logs')

    op.drop_index('ix_resource_requests_item_status', table_name='resource_requests')
    op.drop_index('ix_resource_requests_user_status', table_name='resource_requests')
    op.drop_index('ix_resource_requests_project_id', table_name='resource_requests')
    op.drop_table('resource_requests')

    op.drop_table('project_components')

    op.drop_index('ix_projects_owner_status', table_name='projects')
    op.drop_index('ix_projects_owner_id', table_name='projects')
    op.drop_table('projects')

    op.drop_index('ix_inventory_items_kind_category', table_name='inventory_items')
    op.drop_table('inventory_items')

    op.drop_index('ix_faculty_faculty_code', table_name='faculty')
    op.drop_table('faculty')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    for enum in (request_status, project_status, item_kind, user_role):
        enum.drop(bind, checkfirst=True)
