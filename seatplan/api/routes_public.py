"""
Public API routes - no authentication required
"""

from fastapi import APIRouter

from seatplan import __version__
from seatplan.services.repositories import use_firestore

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "version": __version__,
        "backend": "firestore" if use_firestore() else "sql"
    }
