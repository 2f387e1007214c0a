from __future__ import annotations

import re

from fastapi import APIRouter, Depends, Header, Response, status
from fastapi.responses import PlainTextResponse

from app.api.dependencies import get_resume_store
from app.core.resume_store import SavedResume, SavedResumeStore
from app.core.security import require_user_id
from app.schemas.resumes import SaveResumeRequest, SavedResumeListResponse, SavedResumeResponse

router = APIRouter()

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._ -]+")


def _current_user(x_user_id: str | None = Header(default=None, alias="X-User-Id")) -> str:
    return require_user_id(x_user_id)


def _to_response(record: SavedResume) -> SavedResumeResponse:
    return SavedResumeResponse(
        id=record.id,
        title=record.title,
        latex=record.latex,
        job_description=record.job_description,
        created_at=record.created_at,
    )


def _download_filename(title: str) -> str:
    stem = _UNSAFE_FILENAME_CHARS.sub("", title).strip() or "resume"
    return f"{stem}.tex"


@router.post("/resumes", response_model=SavedResumeResponse, status_code=status.HTTP_201_CREATED)
async def save_resume(
    payload: SaveResumeRequest,
    user_id: str = Depends(_current_user),
    store: SavedResumeStore = Depends(get_resume_store),
):
    record = store.save_resume(
        user_id,
        title=payload.title,
        latex=payload.latex,
        job_description=payload.job_description,
    )
    return _to_response(record)


@router.get("/resumes", response_model=SavedResumeListResponse)
async def list_resumes(
    user_id: str = Depends(_current_user),
    store: SavedResumeStore = Depends(get_resume_store),
):
    return SavedResumeListResponse(resumes=[_to_response(r) for r in store.list_resumes(user_id)])


@router.get("/resumes/{resume_id}/download", response_class=PlainTextResponse)
async def download_resume(
    resume_id: str,
    user_id: str = Depends(_current_user),
    store: SavedResumeStore = Depends(get_resume_store),
):
    record = store.get_resume(user_id, resume_id)
    return PlainTextResponse(
        record.latex,
        headers={"Content-Disposition": f'attachment; filename="{_download_filename(record.title)}"'},
    )


@router.delete("/resumes/{resume_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resume(
    resume_id: str,
    user_id: str = Depends(_current_user),
    store: SavedResumeStore = Depends(get_resume_store),
):
    store.delete_resume(user_id, resume_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
