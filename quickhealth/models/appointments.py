"""Appointments table model using SQLAlchemy Core."""

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

appointments = Table(
    "appointments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    # Ownership
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    # Appointment details
    Column("doctor", Text, nullable=False),
    Column("specialty", Text, nullable=False),
    # Scheduled start, exposed as startTime over the API
    Column("appointment_date", DateTime(timezone=True), nullable=False, index=True),
    Column("end_time", DateTime(timezone=True), nullable=True),
    Column("reason", Text, nullable=True),
    # Free-form: PENDING, CONFIRMED, COMPLETED, CANCELLED are the usual values
    Column("status", Text, nullable=False, server_default=text("'PENDING'")),
    # Audit fields
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)
