"""Initial schema: accounts, owned content, and consent protocol tables.

Revision ID: 3f1c9a7d2e10
Revises:
Create Date: 2026-10-19

account_deletion_request has no foreign key to account: completed rows
remain as the audit record after the account is gone.
"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

revision: str = "3f1c9a7d2e10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        )
    ]
    if updated:
        columns.append(
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                server_default=sa.text("CURRENT_TIMESTAMP"),
                nullable=False,
            )
        )
    return columns


def upgrade() -> None:
    op.create_table(
        "account",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("kind", sa.String(20), server_default=sa.text("'couple'"), nullable=False),
        sa.Column("primary_email", sa.String(254), nullable=True),
        sa.Column("partner_email", sa.String(254), nullable=True),
        sa.Column("primary_display_name", sa.String(100), nullable=True),
        sa.Column("partner_display_name", sa.String(100), nullable=True),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column(
            "is_primary_email_verified",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column(
            "is_partner_email_verified",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        *_timestamps(),
        sa.CheckConstraint("kind IN ('couple', 'single')", name="ck_account_kind"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )
    op.create_index(op.f("ix_account_primary_email"), "account", ["primary_email"], unique=True)
    op.create_index(op.f("ix_account_partner_email"), "account", ["partner_email"], unique=True)

    op.create_table(
        "photo",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("account_id", sa.String(), nullable=False),
        sa.Column("storage_ref", sa.String(1024), nullable=False),
        sa.Column("caption", sa.Text(), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["account_id"], ["account.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_photo_account_id"), "photo", ["account_id"], unique=False)

    op.create_table(
        "photo_comment",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("account_id", sa.String(), nullable=False),
        sa.Column("photo_id", sa.String(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["account_id"], ["account.id"]),
        sa.ForeignKeyConstraint(["photo_id"], ["photo.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_photo_comment_account_id"), "photo_comment", ["account_id"], unique=False
    )
    op.create_index(op.f("ix_photo_comment_photo_id"), "photo_comment", ["photo_id"], unique=False)

    op.create_table(
        "shared_photo",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("photo_id", sa.String(), nullable=False),
        sa.Column("sender_account_id", sa.String(), nullable=False),
        sa.Column("recipient_account_id", sa.String(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["photo_id"], ["photo.id"]),
        sa.ForeignKeyConstraint(["sender_account_id"], ["account.id"]),
        sa.ForeignKeyConstraint(["recipient_account_id"], ["account.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("photo_id", "sender_account_id", "recipient_account_id"):
        op.create_index(op.f(f"ix_shared_photo_{column}"), "shared_photo", [column], unique=False)

    op.create_table(
        "direct_message",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("sender_account_id", sa.String(), nullable=False),
        sa.Column("recipient_account_id", sa.String(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["sender_account_id"], ["account.id"]),
        sa.ForeignKeyConstraint(["recipient_account_id"], ["account.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("sender_account_id", "recipient_account_id"):
        op.create_index(
            op.f(f"ix_direct_message_{column}"), "direct_message", [column], unique=False
        )

    op.create_table(
        "notification",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("account_id", sa.String(), nullable=False),
        sa.Column("actor_account_id", sa.String(), nullable=True),
        sa.Column("kind", sa.String(50), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["account_id"], ["account.id"]),
        sa.ForeignKeyConstraint(["actor_account_id"], ["account.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("account_id", "actor_account_id"):
        op.create_index(op.f(f"ix_notification_{column}"), "notification", [column], unique=False)

    op.create_table(
        "favorite",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("account_id", sa.String(), nullable=False),
        sa.Column("favorite_account_id", sa.String(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["account_id"], ["account.id"]),
        sa.ForeignKeyConstraint(["favorite_account_id"], ["account.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("account_id", "favorite_account_id", name="uq_favorite_pair"),
    )
    for column in ("account_id", "favorite_account_id"):
        op.create_index(op.f(f"ix_favorite_{column}"), "favorite", [column], unique=False)

    op.create_table(
        "password_reset_request",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("account_id", sa.String(), nullable=False),
        sa.Column("initiating_email", sa.String(254), nullable=False),
        sa.Column("partner_email", sa.String(254), nullable=False),
        sa.Column("initiating_role", sa.String(20), nullable=False),
        sa.Column("initiating_name", sa.String(100), nullable=True),
        sa.Column("partner_display_name", sa.String(100), nullable=True),
        sa.Column("code_hash", sa.String(100), nullable=False),
        sa.Column("code_expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("mfa_verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reset_token_hash", sa.String(64), nullable=True),
        sa.Column("reset_token_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(20), server_default=sa.text("'code_sent'"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('code_sent', 'verified', 'completed')",
            name="ck_password_reset_request_status",
        ),
        sa.CheckConstraint(
            "initiating_role IN ('primary', 'partner')",
            name="ck_password_reset_request_role",
        ),
        sa.CheckConstraint(
            "reset_token_hash IS NULL OR mfa_verified_at IS NOT NULL",
            name="ck_password_reset_request_token_after_mfa",
        ),
        sa.ForeignKeyConstraint(["account_id"], ["account.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_password_reset_request_account_id"),
        "password_reset_request",
        ["account_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_password_reset_request_reset_token_hash"),
        "password_reset_request",
        ["reset_token_hash"],
        unique=True,
    )

    op.create_table(
        "account_deletion_request",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("account_id", sa.String(), nullable=False),
        sa.Column("primary_email", sa.String(254), nullable=True),
        sa.Column("partner_email", sa.String(254), nullable=True),
        sa.Column("code_hash", sa.String(100), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), server_default=sa.text("'code_sent'"), nullable=False),
        sa.Column("initiator_role", sa.String(20), nullable=False),
        sa.Column("approver_role", sa.String(20), nullable=False),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('code_sent', 'verified', 'completed')",
            name="ck_account_deletion_request_status",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_account_deletion_request_account_id"),
        "account_deletion_request",
        ["account_id"],
        unique=False,
    )

    op.create_table(
        "secret_handoff",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("token_hash", sa.String(64), nullable=False),
        sa.Column("account_id", sa.String(), nullable=False),
        sa.Column("recipient_email", sa.String(254), nullable=False),
        sa.Column("encrypted_payload", sa.Text(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["account_id"], ["account.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_secret_handoff_token_hash"), "secret_handoff", ["token_hash"], unique=True
    )
    op.create_index(
        op.f("ix_secret_handoff_account_id"), "secret_handoff", ["account_id"], unique=False
    )


def downgrade() -> None:
    op.drop_table("secret_handoff")
    op.drop_table("account_deletion_request")
    op.drop_table("password_reset_request")
    op.drop_table("favorite")
    op.drop_table("notification")
    op.drop_table("direct_message")
    op.drop_table("shared_photo")
    op.drop_table("photo_comment")
    op.drop_table("photo")
    op.drop_table("account")
