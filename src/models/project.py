"""Project models - portfolio case studies owned by one account."""

from datetime import datetime
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, field_validator

from src.models.enums import ProjectStatus

STAGE_NAMES = ("briefing", "challenge", "execution", "result")

DEFAULT_STAGE_TITLES = {
    "briefing": "Briefing",
    "challenge": "Desafio",
    "execution": "Execução",
    "result": "Resultado",
}

_KEEP_NULL = frozenset({"title", "video_url"})

QUICK_CREATE_MAX_IMAGES = 3


class ProjectStage(BaseModel):
    """One of the four fixed narrative sections of a project."""
    title: str = Field("", description="Section heading")
    description: str = Field("", description="Free-text narrative")


def _stage(name: str):
    return lambda: ProjectStage(title=DEFAULT_STAGE_TITLES[name])


class ProjectStages(BaseModel):
    """Briefing, challenge, execution and result, always all present."""
    briefing: ProjectStage = Field(default_factory=_stage("briefing"))
    challenge: ProjectStage = Field(default_factory=_stage("challenge"))
    execution: ProjectStage = Field(default_factory=_stage("execution"))
    result: ProjectStage = Field(default_factory=_stage("result"))

    def items(self):
        """Yield (name, stage) pairs in narrative order."""
        for name in STAGE_NAMES:
            yield name, getattr(self, name)


class ProjectLink(BaseModel):
    """External link shown under a project."""
    label: str = Field(..., description="Link text")
    url: str = Field(..., description="Target URL")


def _normalize_technologies(value: Any) -> List[str]:
    seen: List[str] = []
    for tech in value or []:
        tech = str(tech).strip()
        if tech and tech not in seen:
            seen.append(tech)
    return seen


def _stages_to_columns(stages: ProjectStages) -> Dict[str, str]:
    return {
        f"{name}_description": stage.description
        for name, stage in stages.items()
    }


class ProjectDraft(BaseModel):
    """Create payload. Server assigns id, status and timestamps."""
    title: str = Field("", description="Project title")
    description: str = Field("", description="Short summary")
    images: List[str] = Field(default_factory=list, description="Image URLs or data URIs, in display order")
    video_url: Optional[str] = Field(None, description="YouTube or Vimeo URL")
    stages: ProjectStages = Field(default_factory=ProjectStages)
    technologies: List[str] = Field(default_factory=list, description="Short labels, insertion order")
    links: List[ProjectLink] = Field(default_factory=list)

    @field_validator("technologies", mode="before")
    @classmethod
    def dedupe_technologies(cls, v: Any) -> List[str]:
        return _normalize_technologies(v)

    @field_validator("video_url", mode="before")
    @classmethod
    def blank_video_to_none(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_row(self) -> Dict[str, Any]:
        """Flatten to the ``projects`` table columns."""
        row: Dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "images": list(self.images),
            "video_url": self.video_url,
            "technologies": list(self.technologies),
            "links": [link.model_dump() for link in self.links],
        }
        row.update(_stages_to_columns(self.stages))
        return row


class QuickProjectDraft(BaseModel):
    """
    Sixty-second project form: a title, up to three images and a one-line
    problem, solution and result.
    """
    title: str = Field("", description="Project title")
    description: str = Field("", description="Short summary; defaults to the result line")
    images: List[str] = Field(default_factory=list, description="Kept up to the first three")
    problem: str = Field("", description="What the client was facing")
    solution: str = Field("", description="How it was solved")
    result: str = Field("", description="One-line outcome")
    metrics: str = Field("", description="Measured results, used when ``result`` is empty")
    technologies: List[str] = Field(default_factory=list)
    links: List[ProjectLink] = Field(default_factory=list)

    @field_validator("images")
    @classmethod
    def cap_images(cls, v: List[str]) -> List[str]:
        return v[:QUICK_CREATE_MAX_IMAGES]

    @field_validator("technologies", mode="before")
    @classmethod
    def dedupe_technologies(cls, v: Any) -> List[str]:
        return _normalize_technologies(v)

    def to_draft(self) -> ProjectDraft:
        """Problem goes to the briefing, solution to the challenge."""
        result = self.result or self.metrics
        return ProjectDraft(
            title=self.title,
            description=self.description or self.result,
            images=self.images,
            stages=ProjectStages(
                briefing=ProjectStage(title=DEFAULT_STAGE_TITLES["briefing"], description=self.problem),
                challenge=ProjectStage(title=DEFAULT_STAGE_TITLES["challenge"], description=self.solution),
                result=ProjectStage(title=DEFAULT_STAGE_TITLES["result"], description=result),
            ),
            technologies=self.technologies,
            links=self.links,
        )


class Project(ProjectDraft):
    """Persisted project (camelCase originals: videoUrl, createdAt, updatedAt)."""
    id: str = Field(..., description="Opaque identifier")
    user_id: Optional[str] = Field(None, description="Owning account")
    status: ProjectStatus = Field(ProjectStatus.DRAFT, description="Derived completion status")
    display_order: int = Field(0, description="Position on the public portfolio")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Project":
        """Build from a ``projects`` row with flat stage columns."""
        data = dict(row)
        stages = {}
        for name in STAGE_NAMES:
            stages[name] = ProjectStage(
                title=DEFAULT_STAGE_TITLES[name],
                description=data.pop(f"{name}_description", None) or "",
            )
        data["stages"] = ProjectStages(**stages)
        data["description"] = data.get("description") or ""
        data["images"] = data.get("images") or []
        data["links"] = data.get("links") or []
        return cls(**data)


class ProjectUpdate(BaseModel):
    """Partial patch; only fields explicitly provided are written."""
    title: Optional[str] = None
    description: Optional[str] = None
    images: Optional[List[str]] = None
    video_url: Optional[str] = None
    stages: Optional[ProjectStages] = None
    technologies: Optional[List[str]] = None
    links: Optional[List[ProjectLink]] = None

    @field_validator("technologies", mode="before")
    @classmethod
    def dedupe_technologies(cls, v: Any) -> Optional[List[str]]:
        if v is None:
            return None
        return _normalize_technologies(v)

    @field_validator("video_url", mode="before")
    @classmethod
    def blank_video_to_none(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def provided(self) -> Dict[str, Any]:
        """
        Fields the caller actually set, as model values.

        An explicit null clears ``video_url`` and ``description`` and is
        ignored for list and stage fields. A null title fails the title check.
        """
        changes = {name: getattr(self, name) for name in self.model_fields_set}
        if "description" in changes and changes["description"] is None:
            changes["description"] = ""
        return {
            name: value for name, value in changes.items()
            if value is not None or name in _KEEP_NULL
        }

    def to_row(self) -> Dict[str, Any]:
        """Flatten the provided fields to table columns."""
        row: Dict[str, Any] = {}
        for name, value in self.provided().items():
            if name == "stages":
                row.update(_stages_to_columns(value or ProjectStages()))
            elif name == "links":
                row["links"] = [link.model_dump() for link in value or []]
            else:
                row[name] = value
        return row
