"""Repositories - per-entity CRUD with local caches."""

from src.repositories.cache import CacheEvent, ListCache, RecordCache
from src.repositories.projects import ProjectRepository
from src.repositories.profiles import ProfileRepository
from src.repositories.proposals import ProposalRepository
from src.repositories.settings import PortfolioSettingsRepository
from src.repositories.session import AccountSession, SessionRegistry

__all__ = [
    "CacheEvent",
    "ListCache",
    "RecordCache",
    "ProjectRepository",
    "ProfileRepository",
    "ProposalRepository",
    "PortfolioSettingsRepository",
    "AccountSession",
    "SessionRegistry",
]
