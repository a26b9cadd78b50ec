"""Contact messages table model using SQLAlchemy Core."""

from sqlalchemy import Column, DateTime, Integer, Table, Text, func

from quickhealth.models.users import metadata

contact_messages = Table(
    "contact_messages",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("email", Text, nullable=False),
    Column("message", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)
