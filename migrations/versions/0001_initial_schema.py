"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

users, workouts, workout_sessions, behavior_states, bricks, milestones,
wellness_logs. Unique (user_id, brick_date) on bricks and
(user_id, log_date) on wellness_logs enforce one-per-day at the DB level.
"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

_fitness = sa.Enum("beginner", "intermediate", "advanced", name="fitness_level_enum")
_goal = sa.Enum("strength", "cardio", "flexibility", "weight_loss", name="primary_goal_enum")
_workout_type = sa.Enum("strength", "cardio", "flexibility", "mixed", name="workout_type_enum")
_difficulty = sa.Enum("beginner", "intermediate", "advanced", name="difficulty_enum")
_session_status = sa.Enum(
    "in_progress", "completed", "partial", "skipped", name="session_status_enum"
)
_motivation = sa.Enum("motivated", "neutral", "struggling", name="motivation_state_enum")
_momentum = sa.Enum("rising", "stable", "falling", name="momentum_trend_enum")
_tone = sa.Enum(
    "encouraging", "challenging", "empathetic", "celebratory", name="coaching_tone_enum"
)
_brick_type = sa.Enum("workout", "streak_bonus", "milestone", name="brick_type_enum")
_milestone_type = sa.Enum(
    "streak", "workout_count", "goal_achieved", "consistency", "personal_record",
    name="milestone_type_enum",
)
_mood = sa.Enum("great", "good", "okay", "low", "stressed", name="mood_enum")


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("created_on", sa.Date(), nullable=False),
        sa.Column("fitness_level", _fitness, nullable=False),
        sa.Column("primary_goal", _goal, nullable=True),
        _created_at(),
    )

    op.create_table(
        "workouts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("workout_type", _workout_type, nullable=False),
        sa.Column("difficulty", _difficulty, nullable=False),
        sa.Column("estimated_duration", sa.Integer(), nullable=False),
        _created_at(),
        sa.CheckConstraint("estimated_duration > 0", name="ck_workout_duration_positive"),
    )

    op.create_table(
        "workout_sessions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("workout_id", sa.Integer(), sa.ForeignKey("workouts.id"), nullable=False),
        sa.Column("status", _session_status, nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("perceived_difficulty", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_workout_sessions_user_id", "workout_sessions", ["user_id"])

    op.create_table(
        "behavior_states",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("consecutive_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_checks_logged", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_event_date", sa.Date(), nullable=True),
        sa.Column("consistency_score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("motivation_state", _motivation, nullable=False),
        sa.Column("momentum_trend", _momentum, nullable=False),
        sa.Column("coaching_tone", _tone, nullable=False),
        sa.Column("last_tone_change", sa.DateTime(timezone=True), nullable=True),
        sa.Column("fatigue_score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("recent_energy_score", sa.Float(), nullable=False, server_default="0.5"),
        sa.Column("version_id", sa.Integer(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint(
            "consistency_score >= 0 AND consistency_score <= 1",
            name="ck_behavior_consistency_range",
        ),
        sa.UniqueConstraint("user_id", name="uq_behavior_state_user"),
    )

    op.create_table(
        "bricks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "session_id", sa.Integer(), sa.ForeignKey("workout_sessions.id"), nullable=True
        ),
        sa.Column("brick_date", sa.Date(), nullable=False),
        sa.Column("brick_type", _brick_type, nullable=False),
        sa.Column("is_archived", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.UniqueConstraint("user_id", "brick_date", name="uq_brick_user_date"),
    )
    op.create_index("ix_bricks_brick_date", "bricks", ["brick_date"])

    op.create_table(
        "milestones",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("milestone_type", _milestone_type, nullable=False),
        sa.Column("target_value", sa.Integer(), nullable=False),
        sa.Column("current_value", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_achieved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("achieved_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.CheckConstraint("target_value > 0", name="ck_milestone_target_positive"),
        sa.CheckConstraint("current_value >= 0", name="ck_milestone_current_non_negative"),
    )
    op.create_index("ix_milestones_user_id", "milestones", ["user_id"])

    op.create_table(
        "wellness_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("log_date", sa.Date(), nullable=False),
        sa.Column("energy_level", sa.Integer(), nullable=False),
        sa.Column("stress_level", sa.Integer(), nullable=False),
        sa.Column("sleep_quality", sa.Integer(), nullable=False),
        sa.Column("mood", _mood, nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        _created_at(),
        sa.UniqueConstraint("user_id", "log_date", name="uq_wellness_user_date"),
    )


def downgrade() -> None:
    op.drop_table("wellness_logs")
    op.drop_index("ix_milestones_user_id", table_name="milestones")
    op.drop_table("milestones")
    op.drop_index("ix_bricks_brick_date", table_name="bricks")
    op.drop_table("bricks")
    op.drop_table("behavior_states")
    op.drop_index("ix_workout_sessions_user_id", table_name="workout_sessions")
    op.drop_table("workout_sessions")
    op.drop_table("workouts")
    op.drop_table("users")
    for enum_type in (_mood, _milestone_type, _brick_type, _tone, _momentum,
                      _motivation, _session_status, _difficulty, _workout_type,
                      _goal, _fitness):
        enum_type.drop(op.get_bind(), checkfirst=True)
