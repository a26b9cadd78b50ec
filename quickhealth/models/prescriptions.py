"""Prescriptions table model using SQLAlchemy Core."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Table,
    Text,
    func,
    text,
)

from quickhealth.models.users import metadata

prescriptions = Table(
    "prescriptions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("medication", Text, nullable=False),
    Column("dosage", Text, nullable=False),
    Column("instructions", Text, nullable=True),
    Column("issued_at", DateTime(timezone=True), nullable=False, index=True),
    Column("expires_at", DateTime(timezone=True), nullable=True),
    # Free-form: Active, Revoked, Expired, Cancelled
    Column("status", Text, nullable=False, server_default=text("'Active'")),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)
