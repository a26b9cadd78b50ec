"""API router configuration."""

from fastapi import APIRouter

from quickhealth.api.endpoints import (
    admin,
    appointments,
    auth,
    contact,
    health,
    prescriptions,
    users,
)

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router)
api_router.include_router(appointments.router)
api_router.include_router(prescriptions.router)
api_router.include_router(contact.router)
api_router.include_router(admin.router)
