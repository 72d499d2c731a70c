"""
Top‑level router for version 1 of the API.

This router aggregates the endpoint routers under a unified prefix.
When new endpoints are added, update this file to include their
routers.
"""

from fastapi import APIRouter

from .endpoints import health, messages

router = APIRouter()

router.include_router(messages.router, prefix="/messages", tags=["messages"])
# The health router defines its own "/health" path.
router.include_router(health.router, tags=["health"])
