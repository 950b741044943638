"""Per-account sessions bundling the repositories and their caches."""

import logging
from typing import Dict, Optional

from src.core.database import DatabaseService
from src.repositories.cache import CacheEvent
from src.repositories.profiles import ProfileRepository
from src.repositories.projects import ProjectRepository
from src.repositories.proposals import ProposalRepository
from src.repositories.settings import PortfolioSettingsRepository

logger = logging.getLogger(__name__)


def _log_cache_event(event: CacheEvent) -> None:
    logger.debug(f"[{event.entity}] {event.kind} {event.record_id or ''}".rstrip())


class AccountSession:
    """
    Everything one signed-in account works with.

    Built on sign-in, torn down on sign-out. Caches are not shared across
    sessions, so another session only sees these writes after it refetches.
    """

    def __init__(self, db: DatabaseService, user_id: str, free_proposal_limit: int = 5):
        self.user_id = user_id
        self.profiles = ProfileRepository(db, user_id)
        self.projects = ProjectRepository(db, user_id)
        self.settings = PortfolioSettingsRepository(db, user_id)
        self.proposals = ProposalRepository(
            db,
            user_id,
            profiles=self.profiles,
            free_limit=free_proposal_limit
        )
        self._unsubscribers = [
            cache.subscribe(_log_cache_event)
            for cache in self._caches()
        ]

    def _caches(self):
        return (
            self.profiles.cache,
            self.projects.cache,
            self.settings.cache,
            self.proposals.cache,
        )

    def close(self) -> None:
        """Clear every cache and drop listeners."""
        for cache in self._caches():
            cache.clear()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        logger.info(f"Session closed for {self.user_id}")


class SessionRegistry:
    """Live sessions keyed by account id. Lives on ``app.state``."""

    def __init__(self, db: DatabaseService, free_proposal_limit: int = 5):
        self.db = db
        self.free_proposal_limit = free_proposal_limit
        self._sessions: Dict[str, AccountSession] = {}

    def get(self, user_id: str) -> Optional[AccountSession]:
        return self._sessions.get(user_id)

    def open(self, user_id: str) -> AccountSession:
        """Return the account's session, creating it on first use (sign-in)."""
        session = self._sessions.get(user_id)
        if session is None:
            session = AccountSession(self.db, user_id, self.free_proposal_limit)
            self._sessions[user_id] = session
            logger.info(f"Session opened for {user_id}")
        return session

    def close(self, user_id: str) -> bool:
        """Tear down a session (sign-out). Returns False if none was open."""
        session = self._sessions.pop(user_id, None)
        if session is None:
            return False
        session.close()
        return True

    def close_all(self) -> None:
        for user_id in list(self._sessions):
            self.close(user_id)

    def __len__(self) -> int:
        return len(self._sessions)
