"""Models package - All Pydantic models organized by domain."""

from src.models.enums import (
    ProjectStatus,
    ProposalStatus,
    BudgetType,
    TemplateKind,
    Plan,
    ColorMode,
    VideoProvider,
    GenerationType,
    AnalyticsEventType,
    ResourceType,
)
from src.models.project import (
    ProjectStage,
    ProjectStages,
    ProjectLink,
    ProjectDraft,
    QuickProjectDraft,
    Project,
    ProjectUpdate,
)
from src.models.proposal import (
    BudgetItem,
    ProposalDraft,
    Proposal,
    ProposalUpdate,
    ProposalProjectSummary,
    PublicProposal,
    ShareLink,
    ProposalQuota,
)
from src.models.portfolio import (
    PortfolioSettings,
    PortfolioSettingsUpdate,
    ProjectOrderUpdate,
    PortfolioProfile,
    PublicPortfolio,
    PortfolioStats,
)
from src.models.profile import OnboardingProfile, OnboardingUpdate, Profile
from src.models.analytics import AnalyticsEvent, AnalyticsSummary, DailyViews
from src.models.ai import AIGenerateRequest, GeneratedText

__all__ = [
    # Enums
    "ProjectStatus",
    "ProposalStatus",
    "BudgetType",
    "TemplateKind",
    "Plan",
    "ColorMode",
    "VideoProvider",
    "GenerationType",
    "AnalyticsEventType",
    "ResourceType",
    # Project models
    "ProjectStage",
    "ProjectStages",
    "ProjectLink",
    "ProjectDraft",
    "QuickProjectDraft",
    "Project",
    "ProjectUpdate",
    # Proposal models
    "BudgetItem",
    "ProposalDraft",
    "Proposal",
    "ProposalUpdate",
    "ProposalProjectSummary",
    "PublicProposal",
    "ShareLink",
    "ProposalQuota",
    # Portfolio models
    "PortfolioSettings",
    "PortfolioSettingsUpdate",
    "ProjectOrderUpdate",
    "PortfolioProfile",
    "PublicPortfolio",
    "PortfolioStats",
    # Profile models
    "OnboardingProfile",
    "OnboardingUpdate",
    "Profile",
    # Analytics models
    "AnalyticsEvent",
    "AnalyticsSummary",
    "DailyViews",
    # AI models
    "AIGenerateRequest",
    "GeneratedText",
]
