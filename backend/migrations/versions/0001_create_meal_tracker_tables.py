"""Create participants and meal_claims tables."""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from backend.migrations.util import get_false_default, get_timestamp_default


# revision identifiers, used by Alembic.
revision: str = '0001_meal_tracker'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MEALS = ("breakfast", "lunch", "dinner")


def upgrade() -> None:
    """Create the participant store and the claim history log."""

    false_default = get_false_default()
    now_default = get_timestamp_default()

    meal_columns = []
    meal_checks = []
    for meal in MEALS:
        meal_columns.append(sa.Column(f'{meal}_claimed', sa.Boolean(), nullable=False, server_default=false_default))
        meal_columns.append(sa.Column(f'{meal}_claimed_at', sa.DateTime(timezone=True), nullable=True))
        meal_checks.append(
            sa.CheckConstraint(
                f"({meal}_claimed AND {meal}_claimed_at IS NOT NULL) "
                f"OR (NOT {meal}_claimed AND {meal}_claimed_at IS NULL)",
                name=f'ck_participants_{meal}_state',
            )
        )

    op.create_table(
        'participants',
        sa.Column('participant_id', sa.String(length=32), nullable=False),
        sa.Column('team_id', sa.String(length=20), nullable=False),
        sa.Column('team_name', sa.String(length=200), nullable=False),
        sa.Column('member_name', sa.String(length=200), nullable=False),
        sa.Column('member_number', sa.Integer(), nullable=False),
        *meal_columns,
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=now_default),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=now_default),
        sa.CheckConstraint('member_number BETWEEN 1 AND 4', name='ck_participants_member_number'),
        *meal_checks,
        sa.PrimaryKeyConstraint('participant_id'),
    )
    op.create_index('ix_participants_team_id', 'participants', ['team_id'], unique=False)
    op.create_index('ix_participants_team_member', 'participants', ['team_id', 'member_number'], unique=False)

    op.create_table(
        'meal_claims',
        sa.Column('claim_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('participant_id', sa.String(length=32), nullable=False),
        sa.Column('team_id', sa.String(length=20), nullable=False),
        sa.Column('team_name', sa.String(length=200), nullable=False),
        sa.Column('member_name', sa.String(length=200), nullable=False),
        sa.Column('meal_type', sa.String(length=20), nullable=False),
        sa.Column('claimed_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=now_default),
        sa.PrimaryKeyConstraint('claim_id'),
        sa.UniqueConstraint('participant_id', 'meal_type', name='uq_meal_claims_participant_meal'),
    )
    op.create_index('ix_meal_claims_claimed_at', 'meal_claims', ['claimed_at'], unique=False)


def downgrade() -> None:
    """Drop meal tracker tables."""

    op.drop_index('ix_meal_claims_claimed_at', table_name='meal_claims')
    op.drop_table('meal_claims')
    op.drop_index('ix_participants_team_member', table_name='participants')
    op.drop_index('ix_participants_team_id', table_name='participants')
    op.drop_table('participants')
