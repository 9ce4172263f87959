"""capstone workflow schema

Revision ID: 0001_capstone_workflow
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_capstone_workflow"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = False):
    cols = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)]
    if updated:
        cols.append(sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False))
    return cols


def upgrade() -> None:
    op.create_table(
        "lecturers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nidn", sa.String(length=32), nullable=False),
        sa.Column("nama", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True, unique=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_lecturers_nidn", "lecturers", ["nidn"], unique=True)

    op.create_table(
        "role_assignments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("lecturer_id", sa.Integer(), sa.ForeignKey("lecturers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("assigned_semester", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("lecturer_id", "role", name="uq_role_assignments_lecturer_role"),
        sa.UniqueConstraint("role", "assigned_semester", name="uq_role_assignments_role_semester"),
        sa.CheckConstraint(
            "assigned_semester IS NULL OR role = 'koordinator'",
            name="ck_role_assignments_semester_only_coordinator",
        ),
    )
    op.create_index("ix_role_assignments_lecturer_id", "role_assignments", ["lecturer_id"])

    op.create_table(
        "groups",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("track", sa.String(length=20), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "students",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("npm", sa.String(length=32), nullable=False),
        sa.Column("nama", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True, unique=True),
        sa.Column("angkatan", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("track", sa.String(length=20), nullable=True),
        sa.Column("desired_partner_npm", sa.String(length=32), nullable=True),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("groups.id", ondelete="SET NULL"), nullable=True),
        sa.Column("proposal_title", sa.String(length=500), nullable=True),
        sa.Column("proposal_file_ref", sa.String(length=1024), nullable=True),
        sa.Column("proposal_status", sa.String(length=20), nullable=False, server_default="none"),
        sa.Column("proposed_supervisor_id", sa.Integer(), sa.ForeignKey("lecturers.id"), nullable=True),
        sa.Column("supervisor_id", sa.Integer(), sa.ForeignKey("lecturers.id"), nullable=True),
        sa.Column("secondary_supervisor_id", sa.Integer(), sa.ForeignKey("lecturers.id"), nullable=True),
        *_timestamps(updated=True),
    )
    op.create_index("ix_students_npm", "students", ["npm"], unique=True)
    op.create_index("ix_students_group_id", "students", ["group_id"])

    op.create_table(
        "guidance_sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column("supervisor_id", sa.Integer(), sa.ForeignKey("lecturers.id"), nullable=False),
        sa.Column("week_number", sa.Integer(), nullable=False),
        sa.Column("session_date", sa.Date(), nullable=False),
        sa.Column("topic", sa.String(length=500), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="waiting"),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_guidance_sessions_student_id", "guidance_sessions", ["student_id"])
    op.create_index("ix_guidance_sessions_supervisor_id", "guidance_sessions", ["supervisor_id"])

    op.create_table(
        "exam_reports",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column("file_ref", sa.String(length=1024), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="submitted"),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("approved_by", sa.Integer(), sa.ForeignKey("lecturers.id"), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(updated=True),
    )
    op.create_index("ix_exam_reports_student_id", "exam_reports", ["student_id"], unique=True)

    op.create_table(
        "exam_schedules",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column("exam_date", sa.Date(), nullable=False),
        sa.Column("exam_time", sa.Time(), nullable=False),
        sa.Column("room", sa.String(length=100), nullable=False),
        sa.Column("first_examiner_id", sa.Integer(), sa.ForeignKey("lecturers.id"), nullable=False),
        sa.Column("secondary_examiner_id", sa.Integer(), sa.ForeignKey("lecturers.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_exam_schedules_student_id", "exam_schedules", ["student_id"])

    op.create_table(
        "periods",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("period_type", sa.String(length=50), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("lecturers.id"), nullable=True),
        *_timestamps(updated=True),
    )
    op.create_index("ix_periods_semester", "periods", ["semester"])
    op.create_index(
        "uq_periods_active_semester",
        "periods",
        ["semester"],
        unique=True,
        postgresql_where=sa.text("status = 'active'"),
        sqlite_where=sa.text("status = 'active'"),
    )


def downgrade() -> None:
    op.drop_index("uq_periods_active_semester", table_name="periods")
    op.drop_index("ix_periods_semester", table_name="periods")
    op.drop_table("periods")
    op.drop_index("ix_exam_schedules_student_id", table_name="exam_schedules")
    op.drop_table("exam_schedules")
    op.drop_index("ix_exam_reports_student_id", table_name="exam_reports")
    op.drop_table("exam_reports")
    op.drop_index("ix_guidance_sessions_supervisor_id", table_name="guidance_sessions")
    op.drop_index("ix_guidance_sessions_student_id", table_name="guidance_sessions")
    op.drop_table("guidance_sessions")
    op.drop_index("ix_students_group_id", table_name="students")
    op.drop_index("ix_students_npm", table_name="students")
    op.drop_table("students")
    op.drop_table("groups")
    op.drop_index("ix_role_assignments_lecturer_id", table_name="role_assignments")
    op.drop_table("role_assignments")
    op.drop_index("ix_lecturers_nidn", table_name="lecturers")
    op.drop_table("lecturers")
