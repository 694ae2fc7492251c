"""create catalog, user and otp tables

Revision ID: 5d0c7e2a9b41
Revises: 
Create Date: 2026-10-18 09:30:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5d0c7e2a9b41"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("phone_number", sa.String(length=20), nullable=False),
        sa.Column("is_verified", sa.Boolean(), server_default=sa.false()),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_users_phone_number", "users", ["phone_number"], unique=True)

    op.create_table(
        "user_sessions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("session_id", sa.String(length=64), nullable=False),
        sa.Column("device_info", sa.String(length=255)),
        sa.Column("ip_address", sa.String(length=45)),
        sa.Column("refresh_token_hash", sa.String(length=64)),
        sa.Column("last_active", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_user_sessions_user_id", "user_sessions", ["user_id"])
    op.create_index("ix_user_sessions_session_id", "user_sessions", ["session_id"], unique=True)

    op.create_table(
        "otp_codes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("phone_number", sa.String(length=20), nullable=False),
        sa.Column("code_hash", sa.String(length=255), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_otp_codes_phone_number", "otp_codes", ["phone_number"])

    op.create_table(
        "videos",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("thumbnail", sa.String(length=500)),
        sa.Column("duration", sa.Float(), nullable=False, server_default="0"),
        sa.Column("category", sa.String(length=50), nullable=False, server_default="general"),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("upload_date", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_videos_title", "videos", ["title"])
    op.create_index("ix_videos_category", "videos", ["category"])
    op.create_index("ix_videos_upload_date", "videos", ["upload_date"])

    op.create_table(
        "video_variants",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("video_id", sa.String(length=36), sa.ForeignKey("videos.id"), nullable=False),
        sa.Column("quality", sa.String(length=10), nullable=False),
        sa.Column("storage_key", sa.String(length=64), nullable=False),
        sa.Column("bitrate", sa.Integer(), nullable=False),
        sa.Column("resolution", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("video_id", "quality", name="uq_video_variants_video_quality"),
    )
    op.create_index("ix_video_variants_video_id", "video_variants", ["video_id"])
    op.create_index("ix_video_variants_storage_key", "video_variants", ["storage_key"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_video_variants_storage_key", table_name="video_variants")
    op.drop_index("ix_video_variants_video_id", table_name="video_variants")
    op.drop_table("video_variants")

    op.drop_index("ix_videos_upload_date", table_name="videos")
    op.drop_index("ix_videos_category", table_name="videos")
    op.drop_index("ix_videos_title", table_name="videos")
    op.drop_table("videos")

    op.drop_index("ix_otp_codes_phone_number", table_name="otp_codes")
    op.drop_table("otp_codes")

    op.drop_index("ix_user_sessions_session_id", table_name="user_sessions")
    op.drop_index("ix_user_sessions_user_id", table_name="user_sessions")
    op.drop_table("user_sessions")

    op.drop_index("ix_users_phone_number", table_name="users")
    op.drop_table("users")
