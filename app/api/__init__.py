"""API routes."""

from app.api.auth import router as auth_router
from app.api.curators import router as curators_router
from app.api.payments import router as payments_router
from app.api.winners import router as winners_router

__all__ = ["auth_router", "curators_router", "payments_router", "winners_router"]
