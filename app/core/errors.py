from __future__ import annotations

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ResumeTailorError(RuntimeError):
    """Base for errors that map onto an HTTP response.

    ``public_message`` is what reaches the client; ``str(exc)`` may carry
    server-side detail and is only logged.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = "internal_error"
    default_public_message: str = "Something went wrong. Please try again."

    def __init__(self, message: str, *, code: str | None = None, public_message: str | None = None):
        super().__init__(message)
        self.code = code or self.default_code
        self.public_message = public_message or self.default_public_message


class ValidationError(ResumeTailorError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "invalid_input"

    def __init__(self, message: str, *, code: str | None = None):
        # Client-caused: the rule text is safe to echo back.
        super().__init__(message, code=code, public_message=message)


class RateLimitError(ResumeTailorError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_code = "rate_limited"
    default_public_message = "Too many requests. Please wait a few seconds and try again."


class ConfigurationError(ResumeTailorError):
    default_code = "configuration_error"
    default_public_message = "service configuration error"


class UpstreamError(ResumeTailorError):
    default_code = "upstream_error"
    default_public_message = "Error processing resume with AI. Please try again."

    def __init__(self, message: str, *, status_code: int | None = None, code: str | None = None):
        super().__init__(message, code=code)
        self.upstream_status = status_code
        if status_code == status.HTTP_429_TOO_MANY_REQUESTS:
            self.status_code = status.HTTP_429_TOO_MANY_REQUESTS
            self.public_message = "The AI service is busy right now. Please try again shortly."


class UpstreamTransientError(UpstreamError):
    default_code = "upstream_transient"


TRANSIENT_UPSTREAM_STATUSES = frozenset({429, 503})


def upstream_error(message: str, status_code: int | None) -> UpstreamError:
    if status_code in TRANSIENT_UPSTREAM_STATUSES:
        return UpstreamTransientError(message, status_code=status_code)
    return UpstreamError(message, status_code=status_code)


class MalformedResponseError(ResumeTailorError):
    default_code = "malformed_response"
    default_public_message = "The AI response could not be read. Please try again."


class DuplicateTitleError(ResumeTailorError):
    status_code = status.HTTP_409_CONFLICT
    default_code = "duplicate_title"
    default_public_message = "A resume with this title already exists."


class ResumeNotFoundError(ResumeTailorError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "resume_not_found"
    default_public_message = "Resume not found."


async def resume_tailor_error_handler(request: Request, exc: ResumeTailorError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed path=%s code=%s: %s", request.url.path, exc.code, exc)
    else:
        logger.info("request_rejected path=%s code=%s: %s", request.url.path, exc.code, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.public_message, "code": exc.code},
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Only field locations and error types are logged; pydantic errors echo raw input.
    problems = ",".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}:{err.get('type', '')}"
        for err in exc.errors()
    )
    logger.info("request_body_invalid path=%s problems=%s", request.url.path, problems)
    return await resume_tailor_error_handler(
        request,
        ValidationError("Request body is not a valid JSON object with string fields.", code="invalid_input"),
    )
