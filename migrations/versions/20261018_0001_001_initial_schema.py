"""Initial schema - saved match documents

Revision ID: 001
Revises:
Create Date: 2026-10-18

Creates the single table used by Sideout:
- saved_matches: one JSON match document per match, with summary columns
  for listing saved matches
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ### Saved matches table ###
    op.create_table(
        'saved_matches',
        sa.Column('match_id', sa.String(64), primary_key=True),
        sa.Column('match_name', sa.String(200), nullable=False),
        sa.Column('phase', sa.Enum(
            'PRE_MATCH', 'LINEUP_SETUP', 'PLAYING', 'POST_MATCH',
            name='matchphase'
        ), nullable=False),
        sa.Column('current_set', sa.Integer(), server_default='1'),
        sa.Column('home_sets_won', sa.Integer(), server_default='0'),
        sa.Column('opponent_sets_won', sa.Integer(), server_default='0'),
        sa.Column('last_saved', sa.DateTime(), nullable=True),
        sa.Column('document', sa.JSON(), nullable=False),
    )

    op.create_index('ix_saved_matches_last_saved', 'saved_matches', ['last_saved'])


def downgrade() -> None:
    op.drop_index('ix_saved_matches_last_saved', 'saved_matches')
    op.drop_table('saved_matches')
