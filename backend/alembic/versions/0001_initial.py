"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    project_status_enum = sa.Enum("confirmed", "tentative", "archived", name="project_status")
    assignment_priority_enum = sa.Enum("high", "normal", "low", name="assignment_priority")

    project_status_enum.create(op.get_bind(), checkfirst=True)
    op.create_table(
        "projects",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("status", project_status_enum, nullable=False),
        sa.Column("manager_id", postgresql.UUID(as_uuid=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_projects_manager_id", "projects", ["manager_id"])

    op.create_table(
        "team_members",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=320)),
        sa.Column(
            "work_schedule",
            sa.Text(),
            server_default=sa.text(
                """'{"sun":false,"mon":true,"tue":true,"wed":true,"thu":true,"fri":true,"sat":false}'"""
            ),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )

    op.create_table(
        "project_assignments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("team_member_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["team_member_id"], ["team_members.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "project_id", "team_member_id", name="uq_project_assignments_project_id_team_member_id"
        ),
    )
    op.create_index("ix_project_assignments_project_id", "project_assignments", ["project_id"])
    op.create_index("ix_project_assignments_team_member_id", "project_assignments", ["team_member_id"])

    op.create_table(
        "day_assignments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("assignment_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("comment", sa.String(length=1000)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["assignment_id"], ["project_assignments.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("assignment_id", "date", name="uq_day_assignments_assignment_id_date"),
    )
    op.create_index("ix_day_assignments_assignment_id", "day_assignments", ["assignment_id"])
    op.create_index("ix_day_assignments_date", "day_assignments", ["date"])

    assignment_priority_enum.create(op.get_bind(), checkfirst=True)
    op.create_table(
        "assignment_groups",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("assignment_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("priority", assignment_priority_enum, server_default=sa.text("'normal'"), nullable=False),
        sa.Column("comment", sa.String(length=1000)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["assignment_id"], ["project_assignments.id"], ondelete="CASCADE"),
        sa.CheckConstraint("start_date <= end_date", name="ck_assignment_groups_start_before_end"),
    )
    op.create_index("ix_assignment_groups_assignment_id", "assignment_groups", ["assignment_id"])
    op.create_index("ix_assignment_groups_start_date", "assignment_groups", ["start_date"])
    op.create_index("ix_assignment_groups_end_date", "assignment_groups", ["end_date"])

    op.create_table(
        "milestones",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("name", sa.String(length=200)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_milestones_project_id", "milestones", ["project_id"])
    op.create_index("ix_milestones_date", "milestones", ["date"])

    op.create_table(
        "day_offs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("team_member_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["team_member_id"], ["team_members.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("team_member_id", "date", name="uq_day_offs_team_member_id_date"),
    )
    op.create_index("ix_day_offs_team_member_id", "day_offs", ["team_member_id"])
    op.create_index("ix_day_offs_date", "day_offs", ["date"])

    op.create_table(
        "user_settings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("key", sa.String(length=64), nullable=False),
        sa.Column("value", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.UniqueConstraint("user_id", "key", name="uq_user_settings_user_id_key"),
    )
    op.create_index("ix_user_settings_user_id", "user_settings", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_user_settings_user_id", table_name="user_settings")
    op.drop_table("user_settings")

    op.drop_index("ix_day_offs_date", table_name="day_offs")
    op.drop_index("ix_day_offs_team_member_id", table_name="day_offs")
    op.drop_table("day_offs")

    op.drop_index("ix_milestones_date", table_name="milestones")
    op.drop_index("ix_milestones_project_id", table_name="milestones")
    op.drop_table("milestones")

    op.drop_index("ix_assignment_groups_end_date", table_name="assignment_groups")
    op.drop_index("ix_assignment_groups_start_date", table_name="assignment_groups")
    op.drop_index("ix_assignment_groups_assignment_id", table_name="assignment_groups")
    op.drop_table("assignment_groups")
    sa.Enum(name="assignment_priority").drop(op.get_bind(), checkfirst=True)

    op.drop_index("ix_day_assignments_date", table_name="day_assignments")
    op.drop_index("ix_day_assignments_assignment_id", table_name="day_assignments")
    op.drop_table("day_assignments")

    op.drop_index("ix_project_assignments_team_member_id", table_name="project_assignments")
    op.drop_index("ix_project_assignments_project_id", table_name="project_assignments")
    op.drop_table("project_assignments")

    op.drop_table("team_members")

    op.drop_index("ix_projects_manager_id", table_name="projects")
    op.drop_table("projects")
    sa.Enum(name="project_status").drop(op.get_bind(), checkfirst=True)
