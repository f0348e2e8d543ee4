"""
Health Check Endpoints
"""

from fastapi import APIRouter, Request
from datetime import datetime

from rollcall import __version__

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Basic health check."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": __version__,
        "backend": request.app.state.config.backend,
        "directory_ready": request.app.state.directory is not None,
    }
