"""Main API router."""

from fastapi import APIRouter

from app.api import customers

router = APIRouter()

# Include all sub-routers
router.include_router(customers.router)
