"""AI API Routes - the streaming copywriting proxy."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from src.ai.gateway import AIGateway
from src.api.deps import get_current_user_id, get_gateway
from src.models import AIGenerateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/generate", summary="Stream AI-generated copy")
async def generate(
    body: AIGenerateRequest,
    user_id: str = Depends(get_current_user_id),
    gateway: AIGateway = Depends(get_gateway)
):
    """
    Forward ``{type, context}`` upstream and relay its event stream verbatim.

    Upstream 429 and 402 come back as distinct JSON errors before any byte
    is streamed; anything else is a generic 500.
    """
    logger.info(f"AI generate request from {user_id}: {body.type}")
    stream = await gateway.open(body.type, body.context)
    return StreamingResponse(
        stream.chunks(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"}
    )
