from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.services.validation import JOB_DESCRIPTION_MAX_CHARS, RESUME_MAX_CHARS


class SaveResumeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(max_length=200)
    latex: str = Field(min_length=1, max_length=RESUME_MAX_CHARS)
    job_description: str = Field(
        default="",
        max_length=JOB_DESCRIPTION_MAX_CHARS,
        validation_alias=AliasChoices("jobDescription", "job_description"),
    )


class SavedResumeResponse(BaseModel):
    id: str
    title: str
    latex: str
    job_description: str
    created_at: datetime


class SavedResumeListResponse(BaseModel):
    resumes: list[SavedResumeResponse] = Field(default_factory=list)
