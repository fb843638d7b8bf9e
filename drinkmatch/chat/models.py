from __future__ import annotations

from pydantic import BaseModel, Field

from ..preferences.models import PreferenceInput


class ConversationResult(BaseModel):
    preferences: PreferenceInput
    confidence: int = Field(default=0, ge=0, le=100)
    ready: bool = False
    next_field: str | None = None
    message: str
    quick_replies: list[str] = Field(default_factory=list)
    advice: str | None = None


class ConversationTurn(BaseModel):
    role: str
    content: str


class ConversationState(BaseModel):
    turns: list[ConversationTurn] = Field(default_factory=list)
    preferences: PreferenceInput = Field(default_factory=PreferenceInput)
    clarification_count: int = 0
