"""Create copy_trading and wallets tables

Revision ID: 0001_copy_trading
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_copy_trading'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    tables = inspector.get_table_names()

    # wallets створює бот; таблиця може вже існувати
    if 'wallets' not in tables:
        op.create_table(
            'wallets',
            sa.Column('id', sa.BigInteger(), nullable=False),
            sa.Column('telegram_id', sa.BigInteger(), nullable=False),
            sa.Column('address', sa.String(66), nullable=False),
            sa.Column('private_key', sa.Text(), nullable=False),
            sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.text('false')),
            sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.text('false')),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_wallets_telegram_id', 'wallets', ['telegram_id'])

    if 'copy_trading' not in tables:
        op.create_table(
            'copy_trading',
            sa.Column('id', sa.BigInteger(), nullable=False),
            sa.Column('telegram_id', sa.BigInteger(), nullable=False),
            sa.Column('master_wallet_address', sa.String(66), nullable=False),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
            sa.Column('last_tx_version', sa.BigInteger(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_copy_trading_telegram_id', 'copy_trading', ['telegram_id'])
        op.create_index('ix_copy_trading_is_active', 'copy_trading', ['is_active'])
    else:
        # Legacy table без watermark колонки
        columns = [c['name'] for c in inspector.get_columns('copy_trading')]
        if 'last_tx_version' not in columns:
            op.add_column('copy_trading', sa.Column('last_tx_version', sa.BigInteger(), nullable=True))

    indexes = [i['name'] for i in inspector.get_indexes('copy_trading')] if 'copy_trading' in tables else []
    if 'uq_copy_trading_active_pair' not in indexes:
        op.create_index(
            'uq_copy_trading_active_pair',
            'copy_trading',
            ['telegram_id', 'master_wallet_address'],
            unique=True,
            postgresql_where=sa.text('is_active'),
        )


def downgrade() -> None:
    op.drop_index('uq_copy_trading_active_pair', table_name='copy_trading')
    op.drop_index('ix_copy_trading_is_active', table_name='copy_trading')
    op.drop_index('ix_copy_trading_telegram_id', table_name='copy_trading')
    op.drop_table('copy_trading')
    op.drop_index('ix_wallets_telegram_id', table_name='wallets')
    op.drop_table('wallets')
