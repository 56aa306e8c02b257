"""SQLAlchemy table definitions for Guild.

These table definitions match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE (keyed by e-mail across providers)
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("email", String(320), nullable=False),  # Lower-cased
    Column("display_name", String(255), nullable=True),
    Column("username", String(30), nullable=False),
    Column("image", Text, nullable=True),
    Column("vr_headset", String(100), nullable=True),
    # Gamification
    Column("level", Integer, nullable=False, server_default="1"),
    Column("rank", String(20), nullable=False, server_default="recruit"),
    Column("badges", ARRAY(String(50)), nullable=False, server_default="{}"),
    Column("stats", JSONB, nullable=False, server_default="{}"),
    # Permissions
    Column("roles", ARRAY(String(20)), nullable=False, server_default="{user}"),
    Column("preferences", JSONB, nullable=False, server_default="{}"),
    # Moderation
    Column("is_active", Boolean, nullable=False, server_default="true"),
    Column("is_banned", Boolean, nullable=False, server_default="false"),
    Column("last_login_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# Uniqueness is what resolves concurrent first sign-ins for the same e-mail
Index("uq_users_email", users_table.c.email, unique=True)
Index("uq_users_username", users_table.c.username, unique=True)
