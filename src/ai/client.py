"""Python consumer of the ``/ai/generate`` streaming endpoint."""

import logging
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from src.ai.stream import StreamCancellation, iter_content_deltas
from src.core.exceptions import (
    AIGenerationError,
    AIQuotaExhaustedError,
    AIRateLimitError,
)

logger = logging.getLogger(__name__)


class AIGenerateClient:
    """
    Calls the proxy and reveals the text progressively.

    ``is_generating`` is always reset when a generation ends, whatever the
    outcome. ``generated_text`` holds the text so far and ``error`` the last
    failure message.
    """

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 60.0
    ):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self._http_client = http_client
        self.timeout = timeout

        self.is_generating = False
        self.generated_text = ""
        self.error: Optional[str] = None

    @property
    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def stream(
        self,
        generation_type: str,
        context: Dict[str, Any],
        cancellation: Optional[StreamCancellation] = None
    ) -> AsyncIterator[str]:
        """
        Yield the growing text after every delta.

        Raises:
            AIRateLimitError: Proxy answered 429
            AIQuotaExhaustedError: Proxy answered 402
            AIGenerationError: Any other failure
        """
        self.is_generating = True
        self.generated_text = ""
        self.error = None

        owned = self._http_client is None
        client = self._http_client or httpx.AsyncClient(timeout=self.timeout)
        try:
            async with client.stream(
                "POST",
                f"{self.base_url}/ai/generate",
                json={"type": generation_type, "context": context},
                headers=self.headers
            ) as response:
                if response.status_code == 429:
                    raise AIRateLimitError()
                if response.status_code == 402:
                    raise AIQuotaExhaustedError()
                if response.status_code != 200:
                    raise AIGenerationError()

                async for delta in iter_content_deltas(response.aiter_bytes(), cancellation):
                    self.generated_text += delta
                    yield self.generated_text

        except AIGenerationError as e:
            self.error = e.message
            logger.error(f"AI generation failed: {e.message}")
            raise
        except httpx.HTTPError as e:
            self.error = AIGenerationError.default_message
            logger.error(f"AI generation request failed: {e}")
            raise AIGenerationError() from e
        finally:
            self.is_generating = False
            if owned:
                await client.aclose()

    async def generate(
        self,
        generation_type: str,
        context: Dict[str, Any],
        cancellation: Optional[StreamCancellation] = None
    ) -> Optional[str]:
        """Full text, or None on failure (the message is left in ``error``)."""
        try:
            async for _ in self.stream(generation_type, context, cancellation):
                pass
        except AIGenerationError:
            return None
        return self.generated_text
