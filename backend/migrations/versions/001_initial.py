"""Initial migration - create all tables

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates all database tables for ScoreTrack:
- tests: exam attempts with marking configuration and cached percentages
- entries: per-subject raw counts, cascade-deleted with their test
- templates: named presets with a JSON subject list

Also creates the index on entries.test_id.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── Tests Table ───────────────────────────────────────────
    op.create_table(
        'tests',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('date', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=True),
        sa.Column('correct_points', sa.Float(), nullable=False, server_default='0'),
        sa.Column('wrong_points', sa.Float(), nullable=False, server_default='0'),
        sa.Column('is_negative', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('score_pct', sa.Float(), nullable=False, server_default='0'),
        sa.Column('accuracy_pct', sa.Float(), nullable=False, server_default='0'),
    )

    # ── Entries Table ─────────────────────────────────────────
    op.create_table(
        'entries',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('test_id', sa.Integer(),
                  sa.ForeignKey('tests.id', ondelete='CASCADE'), nullable=False),
        sa.Column('subject_name', sa.Text(), nullable=False),
        sa.Column('total_q', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('attempted_q', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('correct_q', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_entries_test_id', 'entries', ['test_id'])

    # ── Templates Table ───────────────────────────────────────
    op.create_table(
        'templates',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.Text(), nullable=False, unique=True),
        sa.Column('correct_points', sa.Float(), nullable=False, server_default='0'),
        sa.Column('wrong_points', sa.Float(), nullable=False, server_default='0'),
        sa.Column('is_negative', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('subjects_json', sa.Text(), nullable=False, server_default='[]'),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table('templates')
    op.drop_index('ix_entries_test_id', table_name='entries')
    op.drop_table('entries')
    op.drop_table('tests')
