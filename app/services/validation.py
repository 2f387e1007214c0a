from __future__ import annotations

from app.core.errors import ValidationError

RESUME_MIN_CHARS = 200
RESUME_MAX_CHARS = 50_000
JOB_DESCRIPTION_MAX_CHARS = 10_000


def validate_enhancement_request(resume_source: str | None, job_description: str | None) -> None:
    """Raise ``ValidationError`` for the first violated rule; rules are checked in order."""
    if not resume_source or not resume_source.strip():
        raise ValidationError("Resume is required.", code="resume_required")
    if not job_description or not job_description.strip():
        raise ValidationError("Job description is required.", code="job_description_required")
    if len(resume_source) < RESUME_MIN_CHARS:
        raise ValidationError(
            f"Resume is too short (minimum {RESUME_MIN_CHARS} characters).",
            code="resume_too_short",
        )
    if len(resume_source) > RESUME_MAX_CHARS:
        raise ValidationError(
            f"Resume is too long (maximum {RESUME_MAX_CHARS} characters).",
            code="resume_too_long",
        )
    if len(job_description) > JOB_DESCRIPTION_MAX_CHARS:
        raise ValidationError(
            f"Job description is too long (maximum {JOB_DESCRIPTION_MAX_CHARS} characters).",
            code="job_description_too_long",
        )
