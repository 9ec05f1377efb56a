"""trip_participants 테이블 및 trips 확정 설정 컬럼 추가

Revision ID: 002
Revises: 001
Create Date: 2026-09-01 00:00:01.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column("trips", sa.Column("confirmation_enabled", sa.Boolean(), nullable=False, server_default=sa.false()))
    op.add_column("trips", sa.Column("confirmation_message", sa.Text(), nullable=True))
    op.add_column("trips", sa.Column("capacity_limit", sa.Integer(), nullable=True))
    op.add_column("trips", sa.Column("confirmation_deadline", sa.DateTime(timezone=True), nullable=True))

    op.create_table(
        "trip_participants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("trip_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="participant"),
        sa.Column("confirmation_status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("confirmation_note", sa.Text(), nullable=True),
        sa.Column("conditional_type", sa.String(length=10), nullable=False, server_default="none"),
        sa.Column("conditional_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("conditional_user_ids", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["trip_id"], ["trips.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("trip_id", "user_id", name="uq_trip_participant_trip_user"),
    )
    op.create_index(op.f("ix_trip_participants_id"), "trip_participants", ["id"], unique=False)
    op.create_index(op.f("ix_trip_participants_trip_id"), "trip_participants", ["trip_id"], unique=False)
    op.create_index(op.f("ix_trip_participants_user_id"), "trip_participants", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_trip_participants_user_id"), table_name="trip_participants")
    op.drop_index(op.f("ix_trip_participants_trip_id"), table_name="trip_participants")
    op.drop_index(op.f("ix_trip_participants_id"), table_name="trip_participants")
    op.drop_table("trip_participants")
    op.drop_column("trips", "confirmation_deadline")
    op.drop_column("trips", "capacity_limit")
    op.drop_column("trips", "confirmation_message")
    op.drop_column("trips", "confirmation_enabled")
