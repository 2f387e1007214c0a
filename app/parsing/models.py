from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class ChangeItem(BaseModel):
    item: str
    description: str
    reason: str


class EnhancementResult(BaseModel):
    rewritten_resume: str = ""
    match_score: int = Field(default=0, ge=0, le=100)
    match_score_explanation: str = ""
    enhanced_parts: list[ChangeItem] = Field(default_factory=list)
    removed_parts: list[ChangeItem] = Field(default_factory=list)

    @field_validator("match_score", mode="before")
    @classmethod
    def _clamp_score(cls, value: int) -> int:
        if isinstance(value, int) and not isinstance(value, bool):
            return max(0, min(100, value))
        return value
