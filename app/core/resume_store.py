from __future__ import annotations

import os
import sqlite3
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from app.core.errors import DuplicateTitleError, ResumeNotFoundError, ValidationError


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SavedResume:
    id: str
    user_id: str
    title: str
    latex: str
    job_description: str
    created_at: datetime


class SavedResumeStore:
    """SQLite-backed saved resumes, scoped per user.

    Title uniqueness is enforced by a pre-check query rather than a
    constraint, so two racing saves can still create duplicates.
    """

    def __init__(self, db_path: str):
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._conn_lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        with self._conn_lock:
            if self._conn is not None:
                return self._conn

            directory = os.path.dirname(self._db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            conn = sqlite3.connect(
                self._db_path,
                check_same_thread=False,
                timeout=5,
                isolation_level=None,
            )
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            conn.execute("PRAGMA busy_timeout=5000;")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS saved_resumes (
                    resume_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    latex TEXT NOT NULL,
                    job_description TEXT NOT NULL,
                    created_at TEXT NOT NULL
                );
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_saved_resumes_user
                ON saved_resumes (user_id, created_at);
                """
            )
            self._conn = conn
            return conn

    def close(self) -> None:
        with self._conn_lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def title_exists(self, user_id: str, title: str) -> bool:
        conn = self._get_connection()
        with self._conn_lock:
            cur = conn.execute(
                "SELECT 1 FROM saved_resumes WHERE user_id = ? AND title = ? LIMIT 1",
                (user_id, title),
            )
            return cur.fetchone() is not None

    def save_resume(
        self,
        user_id: str,
        *,
        title: str,
        latex: str,
        job_description: str,
        created_at: datetime | None = None,
    ) -> SavedResume:
        clean_title = (title or "").strip()
        if not clean_title:
            raise ValidationError("Resume title cannot be empty.", code="title_required")
        if self.title_exists(user_id, clean_title):
            raise DuplicateTitleError(f"title {clean_title!r} already used by {user_id}")

        record = SavedResume(
            id=uuid.uuid4().hex,
            user_id=user_id,
            title=clean_title,
            latex=latex,
            job_description=job_description,
            created_at=created_at or _utc_now(),
        )
        conn = self._get_connection()
        with self._conn_lock:
            conn.execute(
                """
                INSERT INTO saved_resumes (
                    resume_id, user_id, title, latex, job_description, created_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    record.user_id,
                    record.title,
                    record.latex,
                    record.job_description,
                    record.created_at.isoformat(),
                ),
            )
        return record

    def list_resumes(self, user_id: str) -> list[SavedResume]:
        conn = self._get_connection()
        with self._conn_lock:
            cur = conn.execute(
                """
                SELECT resume_id, user_id, title, latex, job_description, created_at
                FROM saved_resumes
                WHERE user_id = ?
                ORDER BY created_at DESC
                """,
                (user_id,),
            )
            rows = cur.fetchall()
        return [_row_to_resume(row) for row in rows]

    def get_resume(self, user_id: str, resume_id: str) -> SavedResume:
        conn = self._get_connection()
        with self._conn_lock:
            cur = conn.execute(
                """
                SELECT resume_id, user_id, title, latex, job_description, created_at
                FROM saved_resumes
                WHERE user_id = ? AND resume_id = ?
                """,
                (user_id, resume_id),
            )
            row = cur.fetchone()
        if not row:
            raise ResumeNotFoundError(f"resume {resume_id} not found for {user_id}")
        return _row_to_resume(row)

    def delete_resume(self, user_id: str, resume_id: str) -> None:
        conn = self._get_connection()
        with self._conn_lock:
            cur = conn.execute(
                "DELETE FROM saved_resumes WHERE user_id = ? AND resume_id = ?",
                (user_id, resume_id),
            )
            deleted = cur.rowcount
        if not deleted:
            raise ResumeNotFoundError(f"resume {resume_id} not found for {user_id}")


def _row_to_resume(row: tuple) -> SavedResume:
    return SavedResume(
        id=row[0],
        user_id=row[1],
        title=row[2],
        latex=row[3],
        job_description=row[4],
        created_at=datetime.fromisoformat(row[5]),
    )
