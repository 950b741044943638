"""Auth API Routes - session teardown on sign-out."""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.api.deps import get_current_user_id, get_registry
from src.repositories.session import SessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


class SignOutResponse(BaseModel):
    status: str
    session_closed: bool


@router.post("/sign-out", response_model=SignOutResponse, summary="Sign out")
async def sign_out(
    user_id: str = Depends(get_current_user_id),
    registry: SessionRegistry = Depends(get_registry)
):
    """Drop the account's cached data. Token revocation stays with the auth provider."""
    closed = registry.close(user_id)
    return SignOutResponse(status="signed_out", session_closed=closed)
