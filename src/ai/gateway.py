"""Streaming client for the upstream chat-completion gateway."""

import logging
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from src.ai.prompts import build_messages
from src.core.config import get_settings
from src.core.exceptions import (
    AIGenerationError,
    AIQuotaExhaustedError,
    AIRateLimitError,
)

logger = logging.getLogger(__name__)


class UpstreamStream:
    """
    An open upstream response whose body has not been read yet.

    ``chunks()`` yields the body bytes as received and always releases the
    connection, whether the body was fully read or not.
    """

    def __init__(self, response: httpx.Response, client: Optional[httpx.AsyncClient] = None):
        self.response = response
        self._client = client

    async def chunks(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self.response.aiter_bytes():
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        await self.response.aclose()
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class AIGateway:
    """
    Forwards ``(type, context)`` to the upstream model with streaming on.

    Errors are raised before any byte is streamed back, so callers can still
    answer with a JSON error body.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client
        self._settings = None

    @property
    def settings(self):
        """Lazy load settings."""
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def build_payload(self, generation_type: str, context: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "model": self.settings.AI_MODEL,
            "messages": build_messages(generation_type, context),
            "stream": True,
        }

    async def open(self, generation_type: str, context: Dict[str, Any]) -> UpstreamStream:
        """
        Start a streaming completion.

        Raises:
            ValidationError: Unknown generation type
            AIRateLimitError: Upstream answered 429
            AIQuotaExhaustedError: Upstream answered 402
            AIGenerationError: Anything else
        """
        payload = self.build_payload(generation_type, context)

        if not self.settings.AI_GATEWAY_API_KEY:
            logger.error("AI_GATEWAY_API_KEY is not configured")
            raise AIGenerationError()

        headers = {
            "Authorization": f"Bearer {self.settings.AI_GATEWAY_API_KEY}",
            "Content-Type": "application/json"
        }

        owned = self._client is None
        client = self._client or httpx.AsyncClient(timeout=self.settings.AI_TIMEOUT_SECONDS)

        logger.info(f"AI generate request: {generation_type}")
        request = client.build_request(
            "POST",
            self.settings.AI_GATEWAY_URL,
            json=payload,
            headers=headers
        )

        try:
            response = await client.send(request, stream=True)
        except httpx.TimeoutException:
            logger.error("AI gateway timeout")
            if owned:
                await client.aclose()
            raise AIGenerationError()
        except httpx.HTTPError as e:
            logger.error(f"AI gateway error: {e}")
            if owned:
                await client.aclose()
            raise AIGenerationError()

        if response.status_code != 200:
            body = await response.aread()
            await response.aclose()
            if owned:
                await client.aclose()
            self._raise_for_status(response.status_code, body)

        logger.debug("Streaming response from AI gateway")
        return UpstreamStream(response, client if owned else None)

    @staticmethod
    def _raise_for_status(status_code: int, body: bytes) -> None:
        if status_code == 429:
            logger.error("AI gateway rate limit exceeded")
            raise AIRateLimitError()
        if status_code == 402:
            logger.error("AI gateway payment required")
            raise AIQuotaExhaustedError()

        logger.error(f"AI gateway error: {status_code} - {body[:500]!r}")
        raise AIGenerationError()
