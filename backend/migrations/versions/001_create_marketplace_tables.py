"""Create user, product, buy_request, match and notification tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('first_name', sa.Text(), nullable=True),
        sa.Column('last_name', sa.Text(), nullable=True),
        sa.Column('business_name', sa.Text(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('status', sa.Text(), nullable=False, server_default='ACTIVE'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='uq_user_email'),
        sa.CheckConstraint("status IN ('ACTIVE', 'DISABLED')", name='ck_user_status')
    )

    op.create_table(
        'product',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('category', sa.Text(), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('title_am', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('price', sa.Numeric(18, 2), nullable=False),
        sa.Column('currency', sa.Text(), nullable=False, server_default='ETB'),
        sa.Column('quantity', sa.Integer(), nullable=True),
        sa.Column('unit', sa.Text(), nullable=True),
        sa.Column('location', sa.Text(), nullable=True),
        sa.Column('status', sa.Text(), nullable=False, server_default='ACTIVE'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE')
    )
    op.create_index('ix_product_category_status', 'product', ['category', 'status'])
    op.create_index('ix_product_user_id', 'product', ['user_id'])

    op.create_table(
        'buy_request',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('category', sa.Text(), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('title_am', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('min_budget', sa.Numeric(18, 2), nullable=True),
        sa.Column('max_budget', sa.Numeric(18, 2), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=True),
        sa.Column('unit', sa.Text(), nullable=True),
        sa.Column('location', sa.Text(), nullable=False),
        sa.Column('urgency', sa.Text(), nullable=False, server_default='NORMAL'),
        sa.Column('status', sa.Text(), nullable=False, server_default='ACTIVE'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.CheckConstraint("urgency IN ('LOW', 'NORMAL', 'HIGH', 'URGENT')", name='ck_buy_request_urgency')
    )
    op.create_index('ix_buy_request_status', 'buy_request', ['status'])
    op.create_index('ix_buy_request_user_id', 'buy_request', ['user_id'])

    op.create_table(
        'match',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('buy_request_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('product_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('buyer_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('seller_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('ai_score', sa.Integer(), nullable=False),
        sa.Column('match_reason', sa.Text(), nullable=False),
        sa.Column('status', sa.Text(), nullable=False, server_default='PENDING'),
        sa.Column('buyer_viewed', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('buyer_viewed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('seller_viewed', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('seller_viewed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['buy_request_id'], ['buy_request.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['product.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['buyer_id'], ['user.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['seller_id'], ['user.id'], ondelete='CASCADE'),
        # At most one match per (buy request, listing); concurrent runs rely on this
        sa.UniqueConstraint('buy_request_id', 'product_id', name='uq_match_request_product'),
        sa.CheckConstraint('ai_score >= 0 AND ai_score <= 100', name='ck_match_score_range'),
        sa.CheckConstraint("status IN ('PENDING', 'ACCEPTED', 'REJECTED')", name='ck_match_status'),
        sa.CheckConstraint('buyer_id <> seller_id', name='ck_match_distinct_parties')
    )
    op.create_index('ix_match_buyer_id', 'match', ['buyer_id'])
    op.create_index('ix_match_seller_id', 'match', ['seller_id'])

    op.create_table(
        'notification',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('type', sa.Text(), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('title_am', sa.Text(), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('message_am', sa.Text(), nullable=True),
        sa.Column('action_url', sa.Text(), nullable=True),
        sa.Column('metadata_json', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='{}'),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE')
    )
    op.create_index('ix_notification_user_read', 'notification', ['user_id', 'is_read'])


def downgrade():
    op.drop_index('ix_notification_user_read', table_name='notification')
    op.drop_table('notification')

    op.drop_index('ix_match_seller_id', table_name='match')
    op.drop_index('ix_match_buyer_id', table_name='match')
    op.drop_table('match')

    op.drop_index('ix_buy_request_user_id', table_name='buy_request')
    op.drop_index('ix_buy_request_status', table_name='buy_request')
    op.drop_table('buy_request')

    op.drop_index('ix_product_user_id', table_name='product')
    op.drop_index('ix_product_category_status', table_name='product')
    op.drop_table('product')

    op.drop_table('user')
