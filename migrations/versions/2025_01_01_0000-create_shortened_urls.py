"""Create shortened_urls

Revision ID: 001_shortened_urls
Revises:
Create Date: 2025-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_shortened_urls'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the shortened_urls table.

    The unique index used by strict dedup mode is not part of the migration:
    the service creates it on startup when STRICT_DEDUP is enabled.
    """
    bind = op.get_bind()
    if 'shortened_urls' in inspect(bind).get_table_names():
        return

    op.create_table(
        'shortened_urls',
        sa.Column(
            'id',
            sa.BigInteger().with_variant(sa.Integer(), 'sqlite'),
            nullable=False,
            autoincrement=True,
        ),
        sa.Column('long_url', sa.Text(), nullable=False),
        sa.Column('long_url_hash', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_index(
        'ix_shortened_urls_long_url_hash',
        'shortened_urls',
        ['long_url_hash']
    )


def downgrade() -> None:
    op.drop_index('ix_shortened_urls_long_url_hash', table_name='shortened_urls')
    op.drop_table('shortened_urls')
