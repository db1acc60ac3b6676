"""Initial migration - create athlete cache table

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # One activity snapshot per athlete
    op.create_table(
        'athlete_caches',
        sa.Column('athlete_id', sa.String(20), primary_key=True),
        sa.Column('activities', sa.JSON(), nullable=False),
        sa.Column('activity_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_updated', sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('athlete_caches')
