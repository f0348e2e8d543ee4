"""
API Routes

All route modules for the FastAPI application.
"""

from rollcall.api.routes import (
    health,
    identity,
)

__all__ = [
    "health",
    "identity",
]
