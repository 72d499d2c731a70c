"""Liveness endpoint for API v1."""

from typing import Dict

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health() -> Dict[str, str]:
    """Return a simple status dictionary indicating the API is running."""
    return {"status": "ok"}
