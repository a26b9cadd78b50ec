#!/usr/bin/env python3
"""
Seed the database with an administrator, a patient and sample records.

Safe to run repeatedly: existing accounts get their password, roles and
active flag reset, and sample records are only added when the patient has none.

Usage:
    python scripts/seed_db.py
"""

import asyncio
from datetime import UTC, datetime, timedelta

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from quickhealth.core.roles import ADMIN, PATIENT
from quickhealth.core.security import get_password_hash
from quickhealth.database import AsyncSessionLocal, engine
from quickhealth.models import appointments, metadata, prescriptions, users
from quickhealth.services.user_service import UserService

ACCOUNTS = [
    {
        "email": "admin@quickhealth.com",
        "password": "admin123",
        "full_name": "QuickHealth Admin",
        "roles": ADMIN,
    },
    {
        "email": "patient@test.com",
        "password": "patient123",
        "full_name": "Test Patient",
        "phone": "555-0100",
        "roles": PATIENT,
    },
]


async def upsert_account(db: AsyncSession, account: dict) -> dict:
    """Create the account, or reset credentials and roles if it already exists."""
    service = UserService(db)
    existing = await service.get_user_by_email(account["email"])
    if existing is None:
        user = await service.create_user(**account)
        print(f"✓ Created {account['email']}")
        return user

    await db.execute(
        update(users)
        .where(users.c.id == existing["id"])
        .values(
            password=get_password_hash(account["password"]),
            roles=account["roles"],
            active=True,
            updated_at=datetime.now(UTC),
        )
    )
    await db.commit()
    print(f"✓ Updated {account['email']}")
    return existing


async def seed_patient_records(db: AsyncSession, patient_id: int) -> None:
    """Add one appointment and one prescription for a patient without any."""
    now = datetime.now(UTC)

    count = await db.scalar(
        select(func.count()).select_from(appointments).where(appointments.c.user_id == patient_id)
    )
    if not count:
        await db.execute(
            appointments.insert().values(
                user_id=patient_id,
                doctor="Dr. Sarah Johnson",
                specialty="Cardiology",
                appointment_date=now + timedelta(days=7),
                end_time=now + timedelta(days=7, minutes=30),
                reason="Annual checkup",
                status="CONFIRMED",
                created_at=now,
                updated_at=now,
            )
        )
        print("✓ Added sample appointment")

    count = await db.scalar(
        select(func.count()).select_from(prescriptions).where(prescriptions.c.user_id == patient_id)
    )
    if not count:
        await db.execute(
            prescriptions.insert().values(
                user_id=patient_id,
                medication="Amoxicillin",
                dosage="500mg",
                instructions="Take three times daily with food",
                issued_at=now,
                expires_at=now + timedelta(days=30),
                status="Active",
                created_at=now,
                updated_at=now,
            )
        )
        print("✓ Added sample prescription")

    await db.commit()


async def seed() -> None:
    """Create tables if needed and load the seed data."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    async with AsyncSessionLocal() as db:
        seeded = [await upsert_account(db, account) for account in ACCOUNTS]
        await seed_patient_records(db, seeded[1]["id"])

    await engine.dispose()
    print("✓ Seeding complete!")


if __name__ == "__main__":
    asyncio.run(seed())
