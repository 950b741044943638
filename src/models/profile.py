"""Account profile and onboarding models."""

from typing import Optional, Dict, Any
from pydantic import BaseModel, Field

from src.models.enums import Plan
from src.models.portfolio import PortfolioProfile

# Onboarding field -> ``profiles`` column
ONBOARDING_COLUMNS = {
    "name": "name",
    "area": "area",
    "niche": "niche",
    "objective": "portfolio_objective",
    "experience": "experience_level",
    "ideal_client": "ideal_client",
}


class OnboardingProfile(BaseModel):
    """Bootstrap data collected at signup."""
    name: str = ""
    area: str = ""
    niche: str = ""
    objective: str = ""
    experience: str = ""
    ideal_client: str = Field("", description="idealClient")
    generated_profile: Optional[str] = Field(None, description="Cached AI-written bio")
    is_complete: bool = Field(False, description="Gates the redirect to the dashboard")


class OnboardingUpdate(BaseModel):
    """Partial onboarding patch."""
    name: Optional[str] = None
    area: Optional[str] = None
    niche: Optional[str] = None
    objective: Optional[str] = None
    experience: Optional[str] = None
    ideal_client: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        return {
            ONBOARDING_COLUMNS[name]: getattr(self, name)
            for name in self.model_fields_set
        }


class Profile(BaseModel):
    """The ``profiles`` row of one account."""
    user_id: str
    username: Optional[str] = Field(None, description="Public portfolio slug")
    plan: Plan = Plan.FREE
    proposal_count: int = 0
    onboarding: OnboardingProfile = Field(default_factory=OnboardingProfile)

    @property
    def is_pro(self) -> bool:
        return self.plan == Plan.PRO

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Profile":
        onboarding = OnboardingProfile(
            **{field: row.get(column) or "" for field, column in ONBOARDING_COLUMNS.items()},
            generated_profile=row.get("bio"),
            is_complete=bool(row.get("onboarding_complete")),
        )
        return cls(
            user_id=row["user_id"],
            username=row.get("username"),
            plan=row.get("plan") or Plan.FREE,
            proposal_count=row.get("proposal_count") or 0,
            onboarding=onboarding,
        )

    def to_portfolio_profile(self) -> PortfolioProfile:
        """Reduce to the (name, area, niche, bio) tuple renderers consume."""
        data = self.onboarding
        return PortfolioProfile(
            name=data.name,
            area=data.area,
            niche=data.niche,
            bio=data.generated_profile or "",
        )
