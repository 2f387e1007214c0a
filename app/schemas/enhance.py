from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.parsing.models import ChangeItem


class EnhanceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Length rules are enforced by the validator so failures map to 400, not 422.
    resume_source: str | None = Field(
        default=None,
        validation_alias=AliasChoices("resumeSource", "resume_source", "latexInput"),
    )
    job_description: str | None = Field(
        default=None,
        validation_alias=AliasChoices("jobDescription", "job_description"),
    )


class ChangeSummaryView(BaseModel):
    enhanced_parts: list[ChangeItem] = Field(default_factory=list)
    removed_parts: list[ChangeItem] = Field(default_factory=list)


class EnhancementView(BaseModel):
    latex: str
    match_score: int
    match_score_explanation: str
    summary: ChangeSummaryView
    has_changes: bool
    processed: bool = True
