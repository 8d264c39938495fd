"""Add translation cache

Revision ID: add_translation_cache
Revises:
Create Date: 2026-01-05 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'add_translation_cache'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create translation_cache table
    op.create_table(
        'translation_cache',
        sa.Column('content_hash', sa.String(length=64), nullable=False, comment='Digest of the exact source text'),
        sa.Column('target_locale', sa.String(length=10), nullable=False, comment='Locale the text was translated into'),
        sa.Column('source_locale', sa.String(length=10), nullable=True, comment='Locale the text was authored in'),
        sa.Column('source_text', sa.Text(), nullable=False, comment='Truncated source text, for auditing only'),
        sa.Column('translated_text', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('content_hash', 'target_locale'),
    )

    # Create indexes
    op.create_index('ix_translation_cache_target_locale', 'translation_cache', ['target_locale'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_translation_cache_target_locale', table_name='translation_cache')
    op.drop_table('translation_cache')
