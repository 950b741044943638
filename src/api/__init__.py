"""API routes."""

from src.api.ai import router as ai_router
from src.api.analytics import router as analytics_router
from src.api.auth import router as auth_router
from src.api.portfolio import router as portfolio_router
from src.api.profile import router as profile_router
from src.api.projects import router as projects_router
from src.api.proposals import router as proposals_router
from src.api.public import router as public_router

__all__ = [
    "ai_router",
    "analytics_router",
    "auth_router",
    "portfolio_router",
    "profile_router",
    "projects_router",
    "proposals_router",
    "public_router",
]
