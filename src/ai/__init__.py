"""AI assist layer - prompt table, upstream gateway and stream consumer."""

from src.ai.prompts import SYSTEM_PROMPTS, build_messages
from src.ai.stream import StreamCancellation, iter_content_deltas, accumulate
from src.ai.gateway import AIGateway, UpstreamStream
from src.ai.client import AIGenerateClient
from src.ai.profile import ProfileGenerator

__all__ = [
    "SYSTEM_PROMPTS",
    "build_messages",
    "StreamCancellation",
    "iter_content_deltas",
    "accumulate",
    "AIGateway",
    "UpstreamStream",
    "AIGenerateClient",
    "ProfileGenerator",
]
