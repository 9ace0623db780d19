"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _base_columns():
    return [
        sa.Column("uuid", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade():
    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("avatar_url", sa.String(512), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "teams",
        *_base_columns(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("code", sa.String(8), nullable=False),
        sa.Column("owner_id", sa.Uuid(as_uuid=True), sa.ForeignKey("users.uuid"), nullable=False),
    )
    op.create_index("ix_teams_code", "teams", ["code"], unique=True)

    op.create_table(
        "team_members",
        *_base_columns(),
        sa.Column("team_id", sa.Uuid(as_uuid=True), sa.ForeignKey("teams.uuid"), nullable=False),
        sa.Column("user_id", sa.Uuid(as_uuid=True), sa.ForeignKey("users.uuid"), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.UniqueConstraint("team_id", "user_id", name="uq_team_member"),
    )
    op.create_index("ix_team_members_team_id", "team_members", ["team_id"])
    op.create_index("ix_team_members_user_id", "team_members", ["user_id"])

    op.create_table(
        "workspaces",
        *_base_columns(),
        sa.Column("team_id", sa.Uuid(as_uuid=True), sa.ForeignKey("teams.uuid"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
    )
    op.create_index("ix_workspaces_team_id", "workspaces", ["team_id"])

    op.create_table(
        "designs",
        *_base_columns(),
        sa.Column("workspace_id", sa.String(64), nullable=True),
        sa.Column("team_id", sa.Uuid(as_uuid=True), sa.ForeignKey("teams.uuid"), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("public_id", sa.String(32), nullable=False),
        sa.Column("created_by", sa.Uuid(as_uuid=True), sa.ForeignKey("users.uuid"), nullable=False),
    )
    op.create_index("ix_designs_workspace_id", "designs", ["workspace_id"])
    op.create_index("ix_designs_team_id", "designs", ["team_id"])
    op.create_index("ix_designs_public_id", "designs", ["public_id"], unique=True)
    op.create_index("ix_designs_created_by", "designs", ["created_by"])

    op.create_table(
        "activities",
        *_base_columns(),
        sa.Column("user_id", sa.Uuid(as_uuid=True), sa.ForeignKey("users.uuid"), nullable=False),
        sa.Column("action", sa.String(64), nullable=False),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("design_id", sa.String(64), nullable=True),
        sa.Column("workspace_id", sa.String(64), nullable=True),
    )
    op.create_index("ix_activities_user_id", "activities", ["user_id"])
    op.create_index("ix_activities_design_id", "activities", ["design_id"])


def downgrade():
    op.drop_table("activities")
    op.drop_table("designs")
    op.drop_table("workspaces")
    op.drop_table("team_members")
    op.drop_table("teams")
    op.drop_table("users")
