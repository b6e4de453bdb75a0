"""Initial voting schema: voters, elections, candidates, voted_elections

Revision ID: 3b7e1c9d2a4f
Revises:
Create Date: 2026-10-18 12:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = '3b7e1c9d2a4f'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('voters',
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )

    op.create_table('elections',
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('thumbnail', sa.String(length=500), nullable=False),
        sa.Column('thumbnail_asset_id', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('candidates',
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('motto', sa.String(length=300), nullable=False),
        sa.Column('image', sa.String(length=500), nullable=False),
        sa.Column('image_asset_id', sa.String(length=255), nullable=True),
        sa.Column('vote_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('election_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.CheckConstraint('vote_count >= 0', name='ck_candidates_vote_count_non_negative'),
        sa.ForeignKeyConstraint(['election_id'], ['elections.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_candidates_election_id', 'candidates', ['election_id'])

    op.create_table('voted_elections',
        sa.Column('voter_id', sa.Uuid(), nullable=False),
        sa.Column('election_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['election_id'], ['elections.id'], ),
        sa.ForeignKeyConstraint(['voter_id'], ['voters.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('voter_id', 'election_id', name='uq_voted_elections_voter_election')
    )
    op.create_index('ix_voted_elections_election_id', 'voted_elections', ['election_id'])


def downgrade() -> None:
    op.drop_index('ix_voted_elections_election_id', table_name='voted_elections')
    op.drop_table('voted_elections')
    op.drop_index('ix_candidates_election_id', table_name='candidates')
    op.drop_table('candidates')
    op.drop_table('elections')
    op.drop_table('voters')
