"""Proposal-related models."""

import uuid
from datetime import datetime
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from src.models.enums import BudgetType, ProposalStatus

DEFAULT_PROPOSAL_COLOR = "#8B5CF6"


class BudgetItem(BaseModel):
    """
    One priced line of a proposal.

    ``total`` is always ``quantity * unit_price``; any value supplied for it
    is overwritten. Stored as JSON with the camelCase ``unitPrice`` key.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    description: str = ""
    quantity: float = Field(1, ge=0)
    unit_price: float = Field(0, ge=0, alias="unitPrice")
    total: float = 0

    @model_validator(mode="after")
    def recompute_total(self) -> "BudgetItem":
        self.total = self.quantity * self.unit_price
        return self

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


_CLEARABLE = frozenset({
    "client_name",
    "client_email",
    "introduction",
    "justification",
    "closing",
    "logo_url",
    "cover_image_url",
})


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class ProposalDraft(BaseModel):
    """Create payload for a proposal."""
    title: str = Field("", description="Proposal title")
    client_name: Optional[str] = None
    client_email: Optional[EmailStr] = None
    introduction: Optional[str] = None
    justification: Optional[str] = None
    closing: Optional[str] = None
    project_ids: List[str] = Field(default_factory=list, description="Referenced project ids")
    budget_items: List[BudgetItem] = Field(default_factory=list)
    budget_type: BudgetType = BudgetType.FIXED
    logo_url: Optional[str] = None
    primary_color: str = DEFAULT_PROPOSAL_COLOR
    cover_image_url: Optional[str] = None

    @field_validator("client_email", mode="before")
    @classmethod
    def blank_email_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("project_ids", mode="before")
    @classmethod
    def dedupe_project_ids(cls, v: Any) -> List[str]:
        ids: List[str] = []
        for pid in v or []:
            if pid not in ids:
                ids.append(pid)
        return ids

    def to_row(self) -> Dict[str, Any]:
        """Columns for the ``proposals`` table (without derived fields)."""
        row = self.model_dump(mode="json", exclude={"budget_items"})
        row["budget_items"] = [item.to_json() for item in self.budget_items]
        return row


class Proposal(ProposalDraft):
    """Persisted proposal."""
    id: str
    user_id: Optional[str] = None
    total_value: float = Field(0, description="Cached sum of budget item totals")
    status: ProposalStatus = ProposalStatus.DRAFT
    share_token: Optional[str] = None
    viewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Proposal":
        data = dict(row)
        data["budget_items"] = data.get("budget_items") or []
        data["project_ids"] = data.get("project_ids") or []
        return cls(**data)


class ProposalUpdate(BaseModel):
    """
    Partial patch for the owner's editor.

    Status, share token, ``viewed_at`` and ``total_value`` are absent on
    purpose: they only change through publish / public view transitions or
    are recomputed from ``budget_items``.
    """
    title: Optional[str] = None
    client_name: Optional[str] = None
    client_email: Optional[EmailStr] = None
    introduction: Optional[str] = None
    justification: Optional[str] = None
    closing: Optional[str] = None
    project_ids: Optional[List[str]] = None
    budget_items: Optional[List[BudgetItem]] = None
    budget_type: Optional[BudgetType] = None
    logo_url: Optional[str] = None
    primary_color: Optional[str] = None
    cover_image_url: Optional[str] = None

    @field_validator("client_email", mode="before")
    @classmethod
    def blank_email_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    def provided(self) -> Dict[str, Any]:
        """Set fields; a null only clears the optional text and image fields."""
        return {
            name: getattr(self, name) for name in self.model_fields_set
            if getattr(self, name) is not None or name in _CLEARABLE
        }


# ===========================================
# Public View Models
# ===========================================

class ProposalProjectSummary(BaseModel):
    """Project card shown inside a shared proposal."""
    id: str
    title: str
    description: Optional[str] = None
    images: List[str] = Field(default_factory=list)


class PublicProposal(BaseModel):
    """What a client sees through the share link."""
    id: str
    title: str
    client_name: Optional[str] = None
    introduction: Optional[str] = None
    justification: Optional[str] = None
    closing: Optional[str] = None
    budget_items: List[BudgetItem] = Field(default_factory=list)
    budget_type: BudgetType = BudgetType.FIXED
    total_value: float = 0
    logo_url: Optional[str] = None
    primary_color: str = DEFAULT_PROPOSAL_COLOR
    cover_image_url: Optional[str] = None
    status: ProposalStatus
    created_at: Optional[datetime] = None
    projects: List[ProposalProjectSummary] = Field(default_factory=list)

    @classmethod
    def from_proposal(
        cls,
        proposal: Proposal,
        projects: List[ProposalProjectSummary]
    ) -> "PublicProposal":
        return cls(
            **proposal.model_dump(
                include=set(cls.model_fields) - {"projects"}
            ),
            projects=projects,
        )


class ShareLink(BaseModel):
    """Result of publishing a proposal."""
    share_token: str
    share_url: str
    status: ProposalStatus


class ProposalQuota(BaseModel):
    """Creation quota for the current account."""
    can_create: bool
    remaining: Optional[int] = Field(None, description="None means unlimited")
    plan: str
    proposal_count: int
