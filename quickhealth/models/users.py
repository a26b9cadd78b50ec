"""User model definition using SQLAlchemy Core."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    func,
    text,
    true,
)

# Shared by every table so foreign keys resolve
metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    # Credentials
    Column("email", Text, nullable=False, unique=True, index=True),
    Column("password", Text, nullable=False),
    # Profile info (mutable)
    Column("full_name", Text, nullable=False, server_default=text("''")),
    Column("phone", String(32)),
    Column("gender", String(32)),
    Column("date_of_birth", DateTime(timezone=True)),
    Column("address", Text),
    Column("avatar", Text),
    # Comma-joined role tags, see quickhealth.core.roles
    Column("roles", Text, nullable=False, server_default=text("'PATIENT'")),
    # Account state
    Column("active", Boolean, nullable=False, server_default=true()),
    # Audit
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)
