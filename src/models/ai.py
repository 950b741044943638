"""AI proxy request models."""

from typing import Dict, Any
from pydantic import BaseModel, Field


class AIGenerateRequest(BaseModel):
    """Body of ``POST /ai/generate``."""
    type: str = Field(..., description="Prompt template key")
    context: Dict[str, Any] = Field(default_factory=dict, description="Values interpolated into the user turn")


class GeneratedText(BaseModel):
    """Non-streaming result of a server-side generation."""
    text: str
