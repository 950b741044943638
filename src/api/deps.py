"""FastAPI dependencies - auth, account sessions and shared services."""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.ai.gateway import AIGateway
from src.ai.profile import ProfileGenerator
from src.core.database import DatabaseService
from src.repositories.session import AccountSession, SessionRegistry
from src.services.analytics import AnalyticsService
from src.services.public import PublicViewService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_db(request: Request) -> DatabaseService:
    return request.app.state.db


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_gateway(request: Request) -> AIGateway:
    return request.app.state.ai_gateway


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: DatabaseService = Depends(get_db)
) -> str:
    """Resolve the bearer token to an account id through Supabase auth."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Missing bearer token")

    user_id = await db.get_user_id(credentials.credentials)
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return user_id


def get_session(
    user_id: str = Depends(get_current_user_id),
    registry: SessionRegistry = Depends(get_registry)
) -> AccountSession:
    """The caller's session, opened on first authenticated request."""
    return registry.open(user_id)


def get_analytics(db: DatabaseService = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(db)


def get_public_views(
    db: DatabaseService = Depends(get_db),
    analytics: AnalyticsService = Depends(get_analytics)
) -> PublicViewService:
    return PublicViewService(db, analytics)


def get_profile_generator(gateway: AIGateway = Depends(get_gateway)) -> ProfileGenerator:
    return ProfileGenerator(gateway)
