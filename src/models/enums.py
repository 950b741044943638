"""Enumeration types for the portfolio and proposal domain."""

from enum import Enum


class ProjectStatus(str, Enum):
    """Completion state persisted on a project."""
    DRAFT = "draft"
    COMPLETE = "complete"


class ProposalStatus(str, Enum):
    """Forward-only lifecycle of a commercial proposal."""
    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class BudgetType(str, Enum):
    """How a proposal is priced. Descriptive only."""
    HOURLY = "hourly"
    FIXED = "fixed"
    PACKAGE = "package"


class TemplateKind(str, Enum):
    """Portfolio presentation variants."""
    CASE = "case"
    GALLERY = "gallery"
    SLIDES = "slides"
    ONEPAGE = "onepage"


class Plan(str, Enum):
    """Account subscription plan."""
    FREE = "free"
    PRO = "pro"


class ColorMode(str, Enum):
    """Preview colour scheme."""
    LIGHT = "light"
    DARK = "dark"


class VideoProvider(str, Enum):
    """Embeddable video hosts."""
    YOUTUBE = "youtube"
    VIMEO = "vimeo"


class GenerationType(str, Enum):
    """Prompt templates known to the AI proxy."""
    PROFILE = "profile"
    PORTFOLIO_STRUCTURE = "portfolio-structure"
    PROJECT_NARRATIVE = "project-narrative"
    PROPOSAL_INTRO = "proposal-intro"
    PROPOSAL_JUSTIFICATION = "proposal-justification"
    PROPOSAL_CLOSING = "proposal-closing"


class AnalyticsEventType(str, Enum):
    """Insert-only analytics events."""
    PORTFOLIO_VIEW = "portfolio_view"
    PROPOSAL_VIEW = "proposal_view"
    PROJECT_CLICK = "project_click"
    PROPOSAL_SHARE = "proposal_share"


class ResourceType(str, Enum):
    """What an analytics event refers to."""
    PORTFOLIO = "portfolio"
    PROPOSAL = "proposal"
    PROJECT = "project"
