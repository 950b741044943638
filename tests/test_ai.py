"""Tests for prompts, the upstream gateway and the stream client."""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.ai import AIGateway, AIGenerateClient, ProfileGenerator, build_messages
from src.ai.prompts import SYSTEM_PROMPTS
from src.core.exceptions import (
    AIGenerationError,
    AIQuotaExhaustedError,
    AIRateLimitError,
    ValidationError,
)
from src.models import GenerationType

SSE_BODY = (
    b'data: {"choices":[{"delta":{"content":"Ol"}}]}\n'
    b'data: {"choices":[{"delta":{"content":"\xc3\xa1"}}]}\n'
    b"data: [DONE]\n"
)


def _transport(status: int = 200, body: bytes = SSE_BODY, seen: list = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, content=body)
    return httpx.MockTransport(handler)


# ===========================================
# Prompts
# ===========================================

class TestPrompts:

    def test_every_type_has_a_prompt(self):
        assert set(SYSTEM_PROMPTS) == set(GenerationType)

    def test_profile_defaults(self):
        messages = build_messages("profile", {})

        assert messages[0]["role"] == "system"
        assert messages[0]["content"] == SYSTEM_PROMPTS[GenerationType.PROFILE]
        user = messages[1]["content"]
        assert "Nome: Profissional" in user
        assert "Nível de experiência: Intermediário" in user
        assert "Objetivo do portfólio: Atrair novos clientes" in user

    def test_context_is_interpolated(self):
        user = build_messages("proposal-intro", {"clientName": "Aurora", "projectCount": 3})[1]["content"]
        assert "Nome do cliente: Aurora" in user
        assert "Projetos incluídos: 3 projeto(s)" in user

    def test_technologies_joined(self):
        user = build_messages("project-narrative", {"technologies": ["Figma", "React"]})[1]["content"]
        assert "Tecnologias: Figma, React" in user
        assert "Briefing: Não informado" in user

    def test_justification_defaults(self):
        user = build_messages("proposal-justification", {})[1]["content"]
        assert "Valor total: R$ 0,00" in user
        assert "Prazo estimado: A combinar" in user

    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            build_messages("poem", {})


# ===========================================
# Gateway
# ===========================================

class TestAIGateway:

    async def test_streams_raw_bytes(self):
        seen = []
        gateway = AIGateway(client=httpx.AsyncClient(transport=_transport(seen=seen)))

        stream = await gateway.open("profile", {"name": "Ana"})
        body = b"".join([chunk async for chunk in stream.chunks()])

        assert body == SSE_BODY
        payload = json.loads(seen[0].content)
        assert payload["stream"] is True
        assert payload["model"] == "google/gemini-2.5-flash"
        assert seen[0].headers["Authorization"] == "Bearer ai-test-key"

    @pytest.mark.parametrize("status, error", [
        (429, AIRateLimitError),
        (402, AIQuotaExhaustedError),
        (500, AIGenerationError),
        (400, AIGenerationError),
    ])
    async def test_upstream_errors(self, status, error):
        gateway = AIGateway(client=httpx.AsyncClient(transport=_transport(status, b'{"error":"x"}')))

        with pytest.raises(error) as exc_info:
            await gateway.open("profile", {})
        expected = status if status in (429, 402) else 500
        assert exc_info.value.status_code == expected

    async def test_unknown_type_never_calls_upstream(self):
        seen = []
        gateway = AIGateway(client=httpx.AsyncClient(transport=_transport(seen=seen)))

        with pytest.raises(ValidationError):
            await gateway.open("poem", {})
        assert seen == []


# ===========================================
# Client
# ===========================================

class TestAIGenerateClient:

    async def test_progressive_reveal(self):
        client = AIGenerateClient(
            "http://api.test",
            access_token="tok",
            http_client=httpx.AsyncClient(transport=_transport())
        )

        snapshots = [text async for text in client.stream("profile", {})]

        assert snapshots == ["Ol", "Olá"]
        assert client.generated_text == "Olá"
        assert client.is_generating is False
        assert client.error is None

    @pytest.mark.parametrize("status, message", [
        (429, AIRateLimitError.default_message),
        (402, AIQuotaExhaustedError.default_message),
        (503, AIGenerationError.default_message),
    ])
    async def test_errors_reset_generating(self, status, message):
        client = AIGenerateClient(
            "http://api.test",
            http_client=httpx.AsyncClient(transport=_transport(status, b'{"error":"x"}'))
        )

        assert await client.generate("profile", {}) is None
        assert client.error == message
        assert client.is_generating is False


# ===========================================
# Profile generation
# ===========================================

class TestProfileGenerator:

    async def test_generates_and_caches(self, session, fake_db):
        seen = []
        gateway = AIGateway(client=httpx.AsyncClient(transport=_transport(seen=seen)))
        generator = ProfileGenerator(gateway)

        text = await generator.generate(session.profiles)
        again = await generator.generate(session.profiles)

        assert text == again == "Olá"
        assert len(seen) == 1
        assert fake_db.tables["profiles"][0]["bio"] == "Olá"
        user_turn = json.loads(seen[0].content)["messages"][1]["content"]
        assert "Nome: Ana Souza" in user_turn
        assert "Cliente ideal: Startups" in user_turn

    async def test_upstream_closed_after_done(self, session):
        async def chunks():
            yield b'data: {"choices":[{"delta":{"content":"Bio"}}]}\n'
            yield b"data: [DONE]\n"
            yield b'data: {"choices":[{"delta":{"content":"never read"}}]}\n'

        stream = MagicMock()
        stream.chunks = chunks
        stream.aclose = AsyncMock()
        gateway = MagicMock()
        gateway.open = AsyncMock(return_value=stream)

        text = await ProfileGenerator(gateway).generate(session.profiles, force=True)

        assert text == "Bio"
        stream.aclose.assert_awaited_once()

    async def test_upstream_closed_when_empty(self, session):
        async def chunks():
            yield b"data: [DONE]\n"

        stream = MagicMock()
        stream.chunks = chunks
        stream.aclose = AsyncMock()
        gateway = MagicMock()
        gateway.open = AsyncMock(return_value=stream)

        with pytest.raises(AIGenerationError):
            await ProfileGenerator(gateway).generate(session.profiles, force=True)
        stream.aclose.assert_awaited_once()
