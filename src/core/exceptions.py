"""Domain errors raised by repositories and services.

Route handlers translate these into HTTP responses; see ``src/api/errors.py``.
"""

from typing import Optional


class PortfolError(Exception):
    """Base class for every expected failure in the service."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PortfolError):
    """Input rejected before any network call was attempted."""
    status_code = 400


class QuotaExceededError(PortfolError):
    """Plan limit reached; the write was not attempted."""
    status_code = 402


class NotFoundError(PortfolError):
    """Record missing from the cache, the store, or a public lookup."""
    status_code = 404


class InvalidTransitionError(PortfolError):
    """Proposal status change that would move backwards or skip a state."""
    status_code = 409


class BackendError(PortfolError):
    """The remote store rejected or failed a write."""
    status_code = 502


class ExportError(PortfolError):
    """PDF conversion failed."""
    status_code = 500


# ===========================================
# AI Generation Errors
# ===========================================

class AIGenerationError(PortfolError):
    """Generic upstream AI failure."""
    status_code = 500
    default_message = "Failed to generate content"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class AIRateLimitError(AIGenerationError):
    """Upstream answered 429."""
    status_code = 429
    default_message = "Request limit exceeded. Please try again in a few seconds."


class AIQuotaExhaustedError(AIGenerationError):
    """Upstream answered 402."""
    status_code = 402
    default_message = "AI credits exhausted. Add more credits to your account."
