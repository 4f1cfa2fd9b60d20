"""load engine schema"""

from alembic import op
import sqlalchemy as sa


revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "athletes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(length=80), nullable=False),
        sa.Column("last_name", sa.String(length=80), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )

    op.create_table(
        "load_samples",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("athlete_id", sa.Integer(), sa.ForeignKey("athletes.id"), nullable=False),
        sa.Column("muscle_key", sa.String(length=80), nullable=True),
        sa.Column("recorded_at", sa.DateTime(), nullable=False),
        sa.Column("load_value", sa.Float(), nullable=False),
        sa.Column("source", sa.String(length=40), nullable=False, server_default="session"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.CheckConstraint("load_value >= 0", name="ck_load_samples_non_negative"),
    )
    op.create_index("ix_load_samples_athlete_id", "load_samples", ["athlete_id"])
    op.create_index("ix_load_samples_athlete_recorded", "load_samples", ["athlete_id", "recorded_at"])

    op.create_table(
        "readiness_checkins",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("athlete_id", sa.Integer(), sa.ForeignKey("athletes.id"), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("hrv", sa.Float(), nullable=True),
        sa.Column("sleep_score", sa.Float(), nullable=True),
        sa.Column("prior_load", sa.Float(), nullable=True),
        sa.Column("resting_hr", sa.Float(), nullable=True),
        sa.Column("wellness_score", sa.Float(), nullable=True),
        sa.UniqueConstraint("athlete_id", "day", name="uq_readiness_checkins_athlete_day"),
    )
    op.create_index("ix_readiness_checkins_athlete_id", "readiness_checkins", ["athlete_id"])

    op.create_table(
        "activity_metrics",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("athlete_id", sa.Integer(), sa.ForeignKey("athletes.id"), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("hsr_m", sa.Float(), nullable=False, server_default="0"),
        sa.UniqueConstraint("athlete_id", "day", name="uq_activity_metrics_athlete_day"),
    )
    op.create_index("ix_activity_metrics_athlete_id", "activity_metrics", ["athlete_id"])


def downgrade() -> None:
    op.drop_index("ix_activity_metrics_athlete_id", table_name="activity_metrics")
    op.drop_table("activity_metrics")
    op.drop_index("ix_readiness_checkins_athlete_id", table_name="readiness_checkins")
    op.drop_table("readiness_checkins")
    op.drop_index("ix_load_samples_athlete_recorded", table_name="load_samples")
    op.drop_index("ix_load_samples_athlete_id", table_name="load_samples")
    op.drop_table("load_samples")
    op.drop_table("athletes")
