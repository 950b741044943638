"""Portfolio presentation models."""

from datetime import datetime
from typing import Optional, List, Literal, Dict, Any
from pydantic import BaseModel, Field

from src.models.enums import TemplateKind
from src.models.project import Project

DEFAULT_TEMPLATE = TemplateKind.CASE
DEFAULT_PRIMARY_COLOR = "#8B5CF6"
DEFAULT_FONT = "DM Sans"
DEFAULT_COLUMNS = 2

Columns = Literal[1, 2, 3]


class PortfolioSettings(BaseModel):
    """One row per account controlling how the portfolio is rendered."""
    template: TemplateKind = DEFAULT_TEMPLATE
    primary_color: str = Field(DEFAULT_PRIMARY_COLOR, description="Accent colour (primaryColor)")
    font: str = Field(DEFAULT_FONT, description="Font family name")
    columns: Columns = DEFAULT_COLUMNS
    project_order: List[str] = Field(
        default_factory=list,
        description="Explicit project id order (projectOrder)"
    )
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "PortfolioSettings":
        data = {k: v for k, v in row.items() if k in cls.model_fields and v is not None}
        return cls(**data)

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude={"updated_at"})


class PortfolioSettingsUpdate(BaseModel):
    """Partial settings patch."""
    template: Optional[TemplateKind] = None
    primary_color: Optional[str] = None
    font: Optional[str] = None
    columns: Optional[Columns] = None
    project_order: Optional[List[str]] = None

    def provided(self) -> Dict[str, Any]:
        """Set fields, ignoring explicit nulls: every setting has a value."""
        return {
            name: getattr(self, name) for name in self.model_fields_set
            if getattr(self, name) is not None
        }


class ProjectOrderUpdate(BaseModel):
    """Body of the reorder endpoint."""
    project_order: List[str]


class PortfolioProfile(BaseModel):
    """The profile part of every renderer's input."""
    name: str = ""
    area: str = ""
    niche: str = ""
    bio: str = ""

    @property
    def initial(self) -> str:
        return self.name[:1].upper() if self.name else "P"


class PublicPortfolio(BaseModel):
    """Public portfolio resolved by username."""
    username: str
    profile: PortfolioProfile
    projects: List[Project] = Field(default_factory=list)


class PortfolioStats(BaseModel):
    """Dashboard counters."""
    total_projects: int = 0
    complete_projects: int = 0
    draft_projects: int = 0
    total_proposals: int = 0
    proposals_by_status: Dict[str, int] = Field(default_factory=dict)
    pipeline_value: float = 0
    accepted_value: float = 0
