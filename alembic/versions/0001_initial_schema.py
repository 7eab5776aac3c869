"""initial_schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 10:00:00.000000

초기 스키마: 사용자, 토큰, 회사, 카테고리, 거래, 반복 규칙, 견적.
Initial schema: users, tokens, companies, categories, transactions,
recurring rules, quote templates, quotes and quote items.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # users — 사용자 계정 (email unique)
    op.create_table(
        'users',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        *_timestamps(),
    )

    # refresh_tokens — 리프레시 토큰 (SHA-256 hash only, rotation + audit)
    op.create_table(
        'refresh_tokens',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token_hash', sa.String(64), nullable=False, unique=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_revoked', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('ip_address', sa.String(64), nullable=True),
        sa.Column('user_agent', sa.String(512), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_refresh_tokens_user_id', 'refresh_tokens', ['user_id'])

    # password_reset_tokens — 비밀번호 재설정 토큰 (single use)
    op.create_table(
        'password_reset_tokens',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token_hash', sa.String(64), nullable=False, unique=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('used', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_password_reset_tokens_user_id', 'password_reset_tokens', ['user_id'])

    # companies — 회사 (owned by one user)
    op.create_table(
        'companies',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('cnpj', sa.String(18), nullable=True),
        sa.Column('legal_name', sa.String(200), nullable=True),
        sa.Column('trade_name', sa.String(200), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('address', sa.String(300), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('state', sa.String(2), nullable=True),
        sa.Column('zip_code', sa.String(10), nullable=True),
        sa.Column('logo_url', sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_companies_user_id', 'companies', ['user_id'])

    # categories — 회사별 카테고리
    op.create_table(
        'categories',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('company_id', UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('type', sa.String(10), server_default='EXPENSE', nullable=False),
        sa.Column('color', sa.String(7), server_default='#78716c', nullable=False),
        sa.Column('budget', sa.Float(), server_default='0', nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_categories_company_id', 'categories', ['company_id'])

    # transactions — 월별 거래 (month name + year)
    op.create_table(
        'transactions',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('company_id', UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('description', sa.String(200), server_default='', nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('month', sa.String(20), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(10), server_default='ABERTO', nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_transactions_company_id', 'transactions', ['company_id'])

    # recurring — 반복 거래 규칙
    op.create_table(
        'recurring',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('company_id', UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('description', sa.String(200), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('day_of_month', sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_recurring_company_id', 'recurring', ['company_id'])

    # quote_templates — 견적서 PDF 양식
    op.create_table(
        'quote_templates',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('company_id', UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('header_text', sa.String(500), server_default='', nullable=False),
        sa.Column('footer_text', sa.String(500), server_default='', nullable=False),
        sa.Column('terms_text', sa.Text(), server_default='', nullable=False),
        sa.Column('primary_color', sa.String(7), server_default='#78716c', nullable=False),
        sa.Column('logo_url', sa.String(), nullable=True),
        sa.Column('is_default', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_quote_templates_company_id', 'quote_templates', ['company_id'])

    # quotes — 견적 (number unique per company)
    op.create_table(
        'quotes',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('company_id', UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('number', sa.String(20), nullable=False),
        sa.Column('client_name', sa.String(100), nullable=False),
        sa.Column('client_email', sa.String(255), server_default='', nullable=False),
        sa.Column('client_phone', sa.String(30), server_default='', nullable=False),
        sa.Column('client_document', sa.String(20), server_default='', nullable=False),
        sa.Column('client_address', sa.String(300), server_default='', nullable=False),
        sa.Column('client_city', sa.String(100), server_default='', nullable=False),
        sa.Column('client_state', sa.String(2), server_default='', nullable=False),
        sa.Column('client_zip_code', sa.String(10), server_default='', nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), server_default='', nullable=False),
        sa.Column('subtotal', sa.Float(), server_default='0', nullable=False),
        sa.Column('discount', sa.Float(), server_default='0', nullable=False),
        sa.Column('discount_type', sa.String(10), server_default='VALUE', nullable=False),
        sa.Column('total', sa.Float(), server_default='0', nullable=False),
        sa.Column('status', sa.String(10), server_default='DRAFT', nullable=False),
        sa.Column('valid_until', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), server_default='', nullable=False),
        sa.Column('template_id', UUID(as_uuid=True), sa.ForeignKey('quote_templates.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('company_id', 'number', name='uq_quote_company_number'),
    )
    op.create_index('ix_quotes_company_id', 'quotes', ['company_id'])

    # quote_items — 견적 항목 (category_id is a loose reference)
    op.create_table(
        'quote_items',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('quote_id', UUID(as_uuid=True), sa.ForeignKey('quotes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('unit_price', sa.Float(), nullable=False),
        sa.Column('total', sa.Float(), nullable=False),
        sa.Column('category_id', UUID(as_uuid=True), nullable=True),
        sa.Column('sort_order', sa.Integer(), server_default='0', nullable=False),
    )
    op.create_index('ix_quote_items_quote_id', 'quote_items', ['quote_id'])


def downgrade() -> None:
    op.drop_table('quote_items')
    op.drop_table('quotes')
    op.drop_table('quote_templates')
    op.drop_table('recurring')
    op.drop_table('transactions')
    op.drop_table('categories')
    op.drop_table('companies')
    op.drop_table('password_reset_tokens')
    op.drop_table('refresh_tokens')
    op.drop_table('users')
