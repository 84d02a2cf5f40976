"""Crear tablas del sync FRED

Revision ID: 001_fred_tables
Revises:
Create Date: 2026-10-12

Cambios:
- economic_indicators: catalogo de series rastreadas
- fred_data: observaciones por (series_id, date), value NULL = sin lectura
- function_state: checkpoint del job, con la fila singleton id=1 en offset 0
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '001_fred_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table('economic_indicators'):
        op.create_table('economic_indicators',
        sa.Column('series_id', sa.String(length=64), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('series_id')
        )

    if not inspector.has_table('fred_data'):
        op.create_table('fred_data',
        sa.Column('series_id', sa.String(length=64), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('value', sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(['series_id'], ['economic_indicators.series_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('series_id', 'date')
        )

    if not inspector.has_table('function_state'):
        op.create_table('function_state',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('current_offset', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('last_run_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_run_completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_run_status', sa.String(length=32), nullable=True),
        sa.Column('last_run_error', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
        )

    # Fila singleton del checkpoint
    op.execute(
        "INSERT INTO function_state (id, current_offset) VALUES (1, 0) "
        "ON CONFLICT (id) DO NOTHING"
    )


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    for table in ('fred_data', 'function_state', 'economic_indicators'):
        if inspector.has_table(table):
            op.drop_table(table)
