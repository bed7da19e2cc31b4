"""initial portal schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

Role table, visitor registration, member directory, kids check-in,
schedule and volunteer sign-ups.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_ENUMS = {
    "user_role_enum": ("member", "teacher", "leader", "admin", "trainee"),
    "check_in_status_enum": ("checked_in", "checked_out"),
    "schedule_event_type_enum": ("weekly_recurring", "special"),
}


def upgrade() -> None:
    # --- users (role assignment per auth identity) ---
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("email", sa.String(256), nullable=True),
        sa.Column("role", sa.Enum(*_ENUMS["user_role_enum"], name="user_role_enum"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- visitors ---
    op.create_table(
        "visitors",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("visit_date", sa.Date(), nullable=False),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("phone", sa.String(64), nullable=False),
        sa.Column("how_found", sa.String(64), nullable=False),
        sa.Column("how_found_details", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_visitors_id", "visitors", ["id"])
    op.create_index("ix_visitors_visit_date", "visitors", ["visit_date"])

    # --- visitor_children ---
    op.create_table(
        "visitor_children",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("visitor_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("parent_name", sa.String(256), nullable=False),
        sa.Column("parent_phone", sa.String(64), nullable=False),
        sa.Column("parent_email", sa.String(256), nullable=True),
        sa.Column("allergies", sa.Text(), nullable=True),
        sa.Column("special_needs", sa.Text(), nullable=True),
        sa.Column("emergency_contact_name", sa.String(256), nullable=True),
        sa.Column("emergency_contact_phone", sa.String(64), nullable=True),
        sa.Column("photo_permission", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["visitor_id"], ["visitors.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_visitor_children_id", "visitor_children", ["id"])
    op.create_index("ix_visitor_children_visitor_id", "visitor_children", ["visitor_id"])

    # --- member_profiles ---
    op.create_table(
        "member_profiles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("email", sa.String(256), nullable=True),
        sa.Column("phone", sa.String(64), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(16), nullable=True),
        sa.Column("is_baptized", sa.Boolean(), nullable=False),
        sa.Column("pays_tithe", sa.Boolean(), nullable=False),
        sa.Column("volunteer_areas", sa.JSON(), nullable=False),
        sa.Column("volunteer_outros_details", sa.Text(), nullable=True),
        sa.Column("life_group", sa.String(256), nullable=True),
        sa.Column("is_married", sa.Boolean(), nullable=False),
        sa.Column("spouse_name", sa.String(256), nullable=True),
        sa.Column("spouse_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["spouse_id"], ["member_profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_member_profiles_id", "member_profiles", ["id"])
    op.create_index("ix_member_profiles_user_id", "member_profiles", ["user_id"])

    # --- children (of members) ---
    op.create_table(
        "children",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(256), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("parent1_id", sa.Integer(), nullable=False),
        sa.Column("parent2_id", sa.Integer(), nullable=True),
        sa.Column("allergies", sa.Text(), nullable=True),
        sa.Column("medical_notes", sa.Text(), nullable=True),
        sa.Column("special_needs", sa.Text(), nullable=True),
        sa.Column("photo_permission", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["parent1_id"], ["member_profiles.id"]),
        sa.ForeignKeyConstraint(["parent2_id"], ["member_profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_children_id", "children", ["id"])
    op.create_index("ix_children_parent1_id", "children", ["parent1_id"])

    # --- check_ins ---
    op.create_table(
        "check_ins",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("service_date", sa.Date(), nullable=False),
        sa.Column("service_time", sa.String(16), nullable=False),
        sa.Column("member_child_id", sa.Integer(), nullable=True),
        sa.Column("visitor_child_id", sa.Integer(), nullable=True),
        sa.Column("status", sa.Enum(*_ENUMS["check_in_status_enum"], name="check_in_status_enum"), nullable=False),
        sa.Column("checked_in_by", sa.String(64), nullable=False),
        sa.Column("checked_in_by_name", sa.String(256), nullable=False),
        sa.Column("checkin_notes", sa.Text(), nullable=True),
        sa.Column("checked_in_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("checked_out_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("checked_out_by", sa.String(64), nullable=True),
        sa.Column("checked_out_by_name", sa.String(256), nullable=True),
        sa.Column("checkout_notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["member_child_id"], ["children.id"]),
        sa.ForeignKeyConstraint(["visitor_child_id"], ["visitor_children.id"]),
        sa.CheckConstraint(
            "(member_child_id IS NULL) <> (visitor_child_id IS NULL)",
            name="ck_check_ins_one_child",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_check_ins_id", "check_ins", ["id"])
    op.create_index("ix_check_ins_service_date", "check_ins", ["service_date"])

    # --- schedule_events ---
    op.create_table(
        "schedule_events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title_pt", sa.String(256), nullable=False),
        sa.Column("title_en", sa.String(256), nullable=False),
        sa.Column("description_pt", sa.Text(), nullable=True),
        sa.Column("description_en", sa.Text(), nullable=True),
        sa.Column(
            "event_type",
            sa.Enum(*_ENUMS["schedule_event_type_enum"], name="schedule_event_type_enum"),
            nullable=False,
        ),
        sa.Column("day_of_week", sa.Integer(), nullable=True),
        sa.Column("time", sa.String(32), nullable=True),
        sa.Column("icon_name", sa.String(64), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("special_date", sa.Date(), nullable=True),
        sa.Column("frequency_pt", sa.String(128), nullable=True),
        sa.Column("frequency_en", sa.String(128), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_schedule_events_id", "schedule_events", ["id"])
    op.create_index("ix_schedule_events_is_active", "schedule_events", ["is_active"])

    # --- volunteers ---
    op.create_table(
        "volunteers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("email", sa.String(256), nullable=True),
        sa.Column("phone", sa.String(64), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("areas", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_volunteers_id", "volunteers", ["id"])


def downgrade() -> None:
    op.drop_table("volunteers")
    op.drop_table("schedule_events")
    op.drop_table("check_ins")
    op.drop_table("children")
    op.drop_table("member_profiles")
    op.drop_table("visitor_children")
    op.drop_table("visitors")
    op.drop_table("users")

    bind = op.get_bind()
    for name, values in _ENUMS.items():
        sa.Enum(*values, name=name).drop(bind, checkfirst=True)
