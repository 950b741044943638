"""Pytest fixtures and configuration for Portfol API tests."""

import os
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Generator, List, Optional, Sequence
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-key")
os.environ.setdefault("AI_GATEWAY_API_KEY", "ai-test-key")
os.environ.setdefault("PUBLIC_BASE_URL", "https://portfol.test")
os.environ.setdefault("DEBUG", "true")

USER_ID = "user-1"
ACCESS_TOKEN = "token-user-1"


# ===========================================
# In-memory database
# ===========================================

class FakeDatabase:
    """
    In-memory stand-in for ``DatabaseService``.

    Same async interface and the same failure convention: failed writes return
    ``None`` / ``False``. ``calls`` records every write so tests can assert
    that nothing reached the store.
    """

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.tokens: Dict[str, str] = {}
        self.calls: List[tuple] = []
        self.fail_writes = False
        self.healthy = True
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _now(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    @staticmethod
    def _matches(row: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
        return all(row.get(k) == v for k, v in (filters or {}).items())

    @staticmethod
    def _project(row: Dict[str, Any], columns: str) -> Dict[str, Any]:
        if columns == "*":
            return dict(row)
        return {c.strip(): row.get(c.strip()) for c in columns.split(",")}

    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        columns: str = "*",
        order_by: Optional[str] = None,
        desc: bool = False,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        rows = [r for r in self.tables[table] if self._matches(r, filters)]
        if order_by:
            rows = sorted(rows, key=lambda r: r.get(order_by), reverse=desc)
        if limit:
            rows = rows[:limit]
        return [self._project(r, columns) for r in rows]

    async def select_one(self, table: str, filters: Dict[str, Any], columns: str = "*"):
        rows = await self.select(table, filters, columns=columns, limit=1)
        return rows[0] if rows else None

    async def select_in(self, table: str, column: str, values: Sequence[Any], columns: str = "*"):
        return [
            self._project(r, columns)
            for r in self.tables[table]
            if r.get(column) in values
        ]

    async def insert(self, table: str, data: Dict[str, Any]):
        self.calls.append(("insert", table, data))
        if self.fail_writes:
            return None
        now = self._now()
        row = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now, **data}
        self.tables[table].append(row)
        return dict(row)

    async def update(self, table: str, filters: Dict[str, Any], updates: Dict[str, Any]):
        self.calls.append(("update", table, filters, updates))
        if self.fail_writes:
            return None
        updated = None
        for row in self.tables[table]:
            if self._matches(row, filters):
                row.update(updates)
                updated = updated or dict(row)
        return updated

    async def upsert(self, table: str, data: Dict[str, Any], on_conflict: str):
        self.calls.append(("upsert", table, data))
        if self.fail_writes:
            return None
        for row in self.tables[table]:
            if row.get(on_conflict) == data.get(on_conflict):
                row.update(data)
                return dict(row)
        row = {"id": str(uuid.uuid4()), "created_at": self._now(), **data}
        self.tables[table].append(row)
        return dict(row)

    async def delete(self, table: str, filters: Dict[str, Any]) -> bool:
        self.calls.append(("delete", table, filters))
        if self.fail_writes:
            return False
        self.tables[table] = [r for r in self.tables[table] if not self._matches(r, filters)]
        return True

    async def get_user_id(self, access_token: str) -> Optional[str]:
        return self.tokens.get(access_token)

    async def health_check(self) -> bool:
        return self.healthy

    def writes(self, table: str) -> List[tuple]:
        return [c for c in self.calls if c[1] == table]


# ===========================================
# Sample Data Fixtures
# ===========================================

@pytest.fixture
def profile_row() -> Dict[str, Any]:
    """A free-plan profile with onboarding answers."""
    return {
        "id": "profile-1",
        "user_id": USER_ID,
        "username": "ana",
        "name": "Ana Souza",
        "area": "Design",
        "niche": "Branding",
        "portfolio_objective": "Atrair novos clientes",
        "experience_level": "Sênior",
        "ideal_client": "Startups",
        "bio": None,
        "plan": "free",
        "proposal_count": 0,
        "onboarding_complete": False,
    }


@pytest.fixture
def complete_project_data() -> Dict[str, Any]:
    """Project draft satisfying every completion predicate."""
    return {
        "title": "Rebranding Café Aurora",
        "description": "Nova identidade visual para uma rede de cafeterias.",
        "images": ["https://img.test/aurora-1.jpg", "https://img.test/aurora-2.jpg"],
        "video_url": "https://youtu.be/dQw4w9WgXcQ",
        "stages": {
            "briefing": {"title": "Briefing", "description": "Modernizar a marca."},
            "challenge": {"title": "Desafio", "description": "Manter o público fiel."},
            "execution": {"title": "Execução", "description": "Workshops e protótipos."},
            "result": {"title": "Resultado", "description": "Vendas 30% maiores."},
        },
        "technologies": ["Figma", "Illustrator"],
        "links": [{"label": "Behance", "url": "https://behance.net/aurora"}],
    }


@pytest.fixture
def proposal_data() -> Dict[str, Any]:
    """Proposal draft with two budget items (total 3500)."""
    return {
        "title": "Identidade visual",
        "client_name": "Café Aurora",
        "client_email": "contato@aurora.com.br",
        "introduction": "Olá!",
        "budget_items": [
            {"description": "Logo", "quantity": 1, "unitPrice": 2000},
            {"description": "Papelaria", "quantity": 3, "unitPrice": 500},
        ],
    }


# ===========================================
# Mock Fixtures
# ===========================================

@pytest.fixture
def fake_db(profile_row) -> FakeDatabase:
    """Fake store seeded with one account and its access token."""
    db = FakeDatabase()
    db.tables["profiles"].append(dict(profile_row))
    db.tokens[ACCESS_TOKEN] = USER_ID
    return db


@pytest.fixture
def mock_gateway() -> MagicMock:
    """AI gateway stand-in; tests configure ``open``."""
    return MagicMock()


@pytest.fixture
def session(fake_db):
    """Account session for the seeded user."""
    from src.repositories.session import AccountSession
    account = AccountSession(fake_db, USER_ID, free_proposal_limit=5)
    yield account
    account.close()


# ===========================================
# Client Fixtures
# ===========================================

@pytest.fixture
def app(fake_db, mock_gateway):
    from src.main import create_app
    return create_app(db=fake_db, ai_gateway=mock_gateway)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Test client backed by the fake store."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {ACCESS_TOKEN}"}


# ===========================================
# Pytest Configuration
# ===========================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
