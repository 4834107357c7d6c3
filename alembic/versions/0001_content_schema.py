"""content schema: locales, pages with block translations, settings, partners, galleries

Revision ID: 0001_content_schema
Revises:
Create Date: 2026-10-18 10:00:00

"""

from alembic import op
import sqlalchemy as sa


def _has_table(name: str) -> bool:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    return name in inspector.get_table_names()


revision = "0001_content_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    if not _has_table("locale"):
        op.create_table(
            "locale",
            sa.Column("code", sa.String(length=10), primary_key=True),
            sa.Column("name", sa.String(length=100), nullable=False),
            sa.Column("native_name", sa.String(length=100), nullable=False),
            sa.Column("flag", sa.String(length=16), nullable=True),
            sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("is_rtl", sa.Boolean(), nullable=False, server_default=sa.false()),
        )

    if not _has_table("user"):
        op.create_table(
            "user",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("username", sa.String(length=50), nullable=False),
            sa.Column("email", sa.String(length=120), nullable=True),
            sa.Column("password_hash", sa.String(length=255), nullable=False),
            sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        )
        op.create_index("ix_user_id", "user", ["id"])
        op.create_index("ix_user_username", "user", ["username"], unique=True)
        op.create_index("ix_user_email", "user", ["email"], unique=True)

    if not _has_table("page"):
        op.create_table(
            "page",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("slug", sa.String(length=255), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        )
        op.create_index("ix_page_id", "page", ["id"])
        op.create_index("ix_page_slug", "page", ["slug"], unique=True)

    if not _has_table("page_tr"):
        op.create_table(
            "page_tr",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("page_id", sa.Integer(), nullable=False),
            sa.Column("locale_code", sa.String(length=10), nullable=False),
            sa.Column("title", sa.String(length=255), nullable=False, server_default=""),
            sa.Column("seo_title", sa.String(length=255), nullable=True),
            sa.Column("seo_description", sa.Text(), nullable=True),
            sa.Column("og_image", sa.String(length=500), nullable=True),
            sa.Column("blocks", sa.JSON(), nullable=False),
            sa.Column("status", sa.String(length=16), nullable=False, server_default="DRAFT"),
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
            sa.Column("updated_by", sa.String(length=50), nullable=True),
            sa.ForeignKeyConstraint(["page_id"], ["page.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["locale_code"], ["locale.code"]),
            sa.UniqueConstraint("page_id", "locale_code", name="uq_page_tr"),
        )
        op.create_index("ix_page_tr_id", "page_tr", ["id"])
        op.create_index("ix_page_tr_page_id", "page_tr", ["page_id"])

    if not _has_table("site_settings"):
        op.create_table(
            "site_settings",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("site_name", sa.String(length=255), nullable=True),
            sa.Column("logo_url", sa.String(length=500), nullable=True),
            sa.Column("favicon_url", sa.String(length=500), nullable=True),
            sa.Column("default_locale", sa.String(length=10), nullable=False, server_default="en"),
            sa.Column("contact_email", sa.String(length=255), nullable=True),
            sa.Column("contact_phone", sa.String(length=50), nullable=True),
            sa.Column("contact_address", sa.Text(), nullable=True),
            sa.Column("social_links", sa.JSON(), nullable=False),
        )

    if not _has_table("site_settings_tr"):
        op.create_table(
            "site_settings_tr",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("settings_id", sa.Integer(), nullable=False),
            sa.Column("locale_code", sa.String(length=10), nullable=False),
            sa.Column("tagline", sa.String(length=255), nullable=True),
            sa.Column("footer_text", sa.Text(), nullable=True),
            sa.ForeignKeyConstraint(["settings_id"], ["site_settings.id"], ondelete="CASCADE"),
            sa.UniqueConstraint("settings_id", "locale_code", name="uq_site_settings_tr"),
        )
        op.create_index("ix_site_settings_tr_settings_id", "site_settings_tr", ["settings_id"])

    if not _has_table("partner"):
        op.create_table(
            "partner",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("logo_url", sa.String(length=500), nullable=True),
            sa.Column("website_url", sa.String(length=500), nullable=True),
            sa.Column("category", sa.String(length=50), nullable=False, server_default="general"),
            sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        )
        op.create_index("ix_partner_id", "partner", ["id"])

    if not _has_table("partner_tr"):
        op.create_table(
            "partner_tr",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("partner_id", sa.Integer(), nullable=False),
            sa.Column("locale_code", sa.String(length=10), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.ForeignKeyConstraint(["partner_id"], ["partner.id"], ondelete="CASCADE"),
            sa.UniqueConstraint("partner_id", "locale_code", name="uq_partner_tr"),
        )
        op.create_index("ix_partner_tr_partner_id", "partner_tr", ["partner_id"])

    if not _has_table("gallery_group"):
        op.create_table(
            "gallery_group",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("key", sa.String(length=100), nullable=False),
            sa.Column("name", sa.String(length=255), nullable=False, server_default=""),
            sa.Column("images", sa.JSON(), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        )
        op.create_index("ix_gallery_group_key", "gallery_group", ["key"], unique=True)


def downgrade() -> None:
    for table in (
        "gallery_group",
        "partner_tr",
        "partner",
        "site_settings_tr",
        "site_settings",
        "page_tr",
        "page",
        "user",
        "locale",
    ):
        if _has_table(table):
            op.drop_table(table)
