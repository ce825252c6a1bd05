"""Initial migration

Revision ID: 001
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create stores table
    op.create_table(
        'stores',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(100), unique=True),
        sa.Column('currency', sa.String(10), default='USD'),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('store_latitude', sa.Float()),
        sa.Column('store_longitude', sa.Float()),
        sa.Column('delivery_fee_cents', sa.Integer(), default=0),
        sa.Column('delivery_radius_km', sa.Float(), default=10.0),
        sa.Column('order_number_format', sa.String(50), default='WO-{number}'),
        sa.Column('order_sequence', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('order_notifications_enabled', sa.Boolean(), default=True),
        sa.Column('whatsapp_number', sa.String(20)),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create delivery_zones table
    op.create_table(
        'delivery_zones',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('store_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stores.id'), nullable=False),
        sa.Column('name', sa.String(100)),
        sa.Column('max_distance_km', sa.Float(), nullable=False),
        sa.Column('fee_cents', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('position', sa.Integer(), default=0),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create users table
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('store_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stores.id')),
        sa.Column('email', sa.String(255), unique=True, nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255)),
        sa.Column('role', sa.String(50), default='STAFF'),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('last_login', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create customers table
    op.create_table(
        'customers',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('store_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stores.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(30), nullable=False),
        sa.Column('canonical_phone', sa.String(20), nullable=False),
        sa.Column('email', sa.String(255)),
        sa.Column('tier', sa.String(20), default='REGULAR'),
        sa.Column('address', sa.Text()),
        sa.Column('address_json', postgresql.JSON()),
        sa.Column('added_by_admin', sa.Boolean(), default=False),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
        sa.UniqueConstraint('store_id', 'canonical_phone', name='uq_customers_store_canonical_phone'),
    )

    # Create products table
    op.create_table(
        'products',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('store_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stores.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('price_cents', sa.Integer(), nullable=False),
        sa.Column('original_price_cents', sa.Integer()),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('track_inventory', sa.Boolean(), default=False),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
        sa.CheckConstraint('track_inventory = false OR stock >= 0', name='ck_products_tracked_stock_non_negative'),
    )

    # Create product_variants table
    op.create_table(
        'product_variants',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('product_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('price_cents', sa.Integer(), nullable=False),
        sa.Column('original_price_cents', sa.Integer()),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create product_modifiers table
    op.create_table(
        'product_modifiers',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('product_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('price_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create orders table
    op.create_table(
        'orders',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('store_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stores.id'), nullable=False),
        sa.Column('order_number', sa.String(50), nullable=False),
        sa.Column('status', sa.String(30), nullable=False, default='PENDING'),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('customers.id'), nullable=False),
        sa.Column('customer_name', sa.String(255), nullable=False),
        sa.Column('subtotal_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('delivery_fee_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('delivery_address', sa.Text()),
        sa.Column('delivery_address_json', postgresql.JSON()),
        sa.Column('customer_latitude', sa.Float()),
        sa.Column('customer_longitude', sa.Float()),
        sa.Column('scheduled_time', sa.DateTime()),
        sa.Column('notes', sa.Text()),
        sa.Column('payment_method', sa.String(50)),
        sa.Column('payment_status', sa.String(20), nullable=False, default='PENDING'),
        sa.Column('created_by', postgresql.UUID(as_uuid=True)),
        sa.Column('created_by_admin', sa.Boolean(), default=True),
        sa.Column('stock_reverted_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
        sa.UniqueConstraint('store_id', 'order_number', name='uq_orders_store_order_number'),
    )

    # Create order_items table
    op.create_table(
        'order_items',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('order_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('orders.id'), nullable=False),
        sa.Column('product_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('variant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('product_variants.id')),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price_cents', sa.Integer(), nullable=False),
        sa.Column('original_price_cents', sa.Integer()),
        sa.Column('modifier_ids', postgresql.JSON(), default=[]),
    )

    # Create inventory_activities table
    op.create_table(
        'inventory_activities',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('store_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stores.id'), nullable=False),
        sa.Column('product_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('variant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('product_variants.id')),
        sa.Column('type', sa.String(30), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('old_stock', sa.Integer(), nullable=False),
        sa.Column('new_stock', sa.Integer(), nullable=False),
        sa.Column('reason', sa.Text()),
        sa.Column('changed_by', postgresql.UUID(as_uuid=True)),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create audit_logs table
    op.create_table(
        'audit_logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('store_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stores.id')),
        sa.Column('actor_id', postgresql.UUID(as_uuid=True)),
        sa.Column('actor_type', sa.String(50)),
        sa.Column('event_type', sa.String(100), nullable=False),
        sa.Column('severity', sa.String(20), default='info'),
        sa.Column('resource_type', sa.String(50)),
        sa.Column('resource_id', postgresql.UUID(as_uuid=True)),
        sa.Column('data_json', postgresql.JSON()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create outbox_events table
    op.create_table(
        'outbox_events',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('store_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stores.id'), nullable=False),
        sa.Column('event_type', sa.String(100), nullable=False),
        sa.Column('payload_json', postgresql.JSON(), nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_error', sa.Text()),
        sa.Column('processed_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create indexes
    op.create_index('ix_customers_canonical_phone', 'customers', ['canonical_phone'])
    op.create_index('ix_delivery_zones_store_position', 'delivery_zones', ['store_id', 'position'])
    op.create_index('ix_orders_store_created', 'orders', ['store_id', 'created_at'])
    op.create_index('ix_orders_customer', 'orders', ['customer_id'])
    op.create_index('ix_inventory_activities_product', 'inventory_activities', ['product_id', 'created_at'])
    op.create_index('ix_audit_logs_store_created', 'audit_logs', ['store_id', 'created_at'])
    op.create_index('ix_outbox_events_pending', 'outbox_events', ['processed_at', 'created_at'])


def downgrade() -> None:
    op.drop_table('outbox_events')
    op.drop_table('audit_logs')
    op.drop_table('inventory_activities')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('product_modifiers')
    op.drop_table('product_variants')
    op.drop_table('products')
    op.drop_table('customers')
    op.drop_table('users')
    op.drop_table('delivery_zones')
    op.drop_table('stores')
