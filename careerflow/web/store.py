"""SQLite-backed store for users and their saved resume text."""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import aiosqlite

from ..domain.onboarding import OnboardingProfile
from .errors import not_found

logger = logging.getLogger("careerflow.web.store")

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS users (
    user_id TEXT PRIMARY KEY,
    clerk_user_id TEXT NOT NULL UNIQUE,
    email TEXT NOT NULL DEFAULT '',
    first_name TEXT NOT NULL DEFAULT '',
    last_name TEXT NOT NULL DEFAULT '',
    full_name TEXT NOT NULL DEFAULT '',
    industry TEXT,
    bio TEXT,
    experience INTEGER,
    skills_json TEXT NOT NULL DEFAULT '[]',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS resumes (
    resume_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL UNIQUE REFERENCES users(user_id),
    content TEXT NOT NULL DEFAULT '',
    ats_score INTEGER,
    feedback TEXT,
    scored_at TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


def utc_now_iso() -> str:
    """Return current UTC time in ISO-8601 format."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def make_id(prefix: str) -> str:
    """Create opaque id matching the documented prefix style."""
    return f"{prefix}_{uuid.uuid4().hex[:10]}"


@dataclass
class UserRecord:
    user_id: str
    clerk_user_id: str
    created_at: str
    updated_at: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    industry: Optional[str] = None
    bio: Optional[str] = None
    experience: Optional[int] = None
    skills: List[str] = field(default_factory=list)

    @property
    def is_onboarded(self) -> bool:
        return bool(self.industry)


@dataclass
class ResumeRecord:
    resume_id: str
    user_id: str
    content: str
    created_at: str
    updated_at: str
    ats_score: Optional[int] = None
    feedback: Optional[str] = None
    scored_at: Optional[str] = None


# ---------------------------------------------------------------------------
# Helper: row → record
# ---------------------------------------------------------------------------


def _row_to_user(row: aiosqlite.Row) -> UserRecord:
    skills = json.loads(row["skills_json"]) if row["skills_json"] else []
    return UserRecord(
        user_id=row["user_id"],
        clerk_user_id=row["clerk_user_id"],
        email=row["email"] or "",
        first_name=row["first_name"] or "",
        last_name=row["last_name"] or "",
        full_name=row["full_name"] or "",
        industry=row["industry"],
        bio=row["bio"],
        experience=row["experience"],
        skills=skills,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_resume(row: aiosqlite.Row) -> ResumeRecord:
    return ResumeRecord(
        resume_id=row["resume_id"],
        user_id=row["user_id"],
        content=row["content"] or "",
        ats_score=row["ats_score"],
        feedback=row["feedback"],
        scored_at=row["scored_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class SQLiteStore:
    """SQLite-backed store for users and resumes; survives process restarts."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = Path(db_path)
        self._db: Optional[aiosqlite.Connection] = None

    # -- lifecycle -----------------------------------------------------------

    async def start(self) -> None:
        if self._db is not None:
            return
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(str(self._db_path))
        self._db.row_factory = aiosqlite.Row
        await self._db.execute("PRAGMA journal_mode=WAL")
        await self._db.executescript(_SCHEMA_SQL)
        await self._db.commit()
        logger.info("store_started db_path=%s", self._db_path)

    async def stop(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("SQLiteStore.start() must be awaited before use")
        return self._db

    # -- users ---------------------------------------------------------------

    async def ensure_user(
        self,
        clerk_user_id: str,
        email: str = "",
        first_name: str = "",
        last_name: str = "",
        full_name: str = "",
    ) -> UserRecord:
        """Create the user on first sight; refresh identity fields otherwise."""
        now = utc_now_iso()
        existing = await self._find_user(clerk_user_id)
        if existing is None:
            user_id = make_id("user")
            await self.db.execute(
                "INSERT INTO users (user_id, clerk_user_id, email, first_name, last_name, full_name,"
                " created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (user_id, clerk_user_id, email, first_name, last_name, full_name, now, now),
            )
            await self.db.commit()
            logger.info("user_created user_id=%s", user_id)
        else:
            await self.db.execute(
                "UPDATE users SET email = ?, first_name = ?, last_name = ?, full_name = ?, updated_at = ?"
                " WHERE clerk_user_id = ?",
                (
                    email or existing.email,
                    first_name or existing.first_name,
                    last_name or existing.last_name,
                    full_name or existing.full_name,
                    now,
                    clerk_user_id,
                ),
            )
            await self.db.commit()
        return await self.get_user(clerk_user_id)

    async def get_user(self, clerk_user_id: str) -> UserRecord:
        user = await self._find_user(clerk_user_id)
        if user is None:
            raise not_found("USER_NOT_FOUND", "User not found")
        return user

    async def update_profile(self, clerk_user_id: str, profile: OnboardingProfile) -> UserRecord:
        await self.get_user(clerk_user_id)
        await self.db.execute(
            "UPDATE users SET industry = ?, bio = ?, experience = ?, skills_json = ?, updated_at = ?"
            " WHERE clerk_user_id = ?",
            (
                profile.stored_industry,
                profile.bio,
                profile.experience,
                json.dumps(profile.skills),
                utc_now_iso(),
                clerk_user_id,
            ),
        )
        await self.db.commit()
        return await self.get_user(clerk_user_id)

    async def onboarding_status(self, clerk_user_id: str) -> bool:
        user = await self._find_user(clerk_user_id)
        return bool(user and user.is_onboarded)

    async def _find_user(self, clerk_user_id: str) -> Optional[UserRecord]:
        async with self.db.execute("SELECT * FROM users WHERE clerk_user_id = ?", (clerk_user_id,)) as cursor:
            row = await cursor.fetchone()
        return _row_to_user(row) if row else None

    # -- resumes -------------------------------------------------------------

    async def get_resume(self, user_id: str) -> Optional[ResumeRecord]:
        async with self.db.execute("SELECT * FROM resumes WHERE user_id = ?", (user_id,)) as cursor:
            row = await cursor.fetchone()
        return _row_to_resume(row) if row else None

    async def save_resume(self, user_id: str, content: str) -> ResumeRecord:
        existing = await self.get_resume(user_id)
        now = utc_now_iso()
        if existing is None:
            await self.db.execute(
                "INSERT INTO resumes (resume_id, user_id, content, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                (make_id("resume"), user_id, content, now, now),
            )
        else:
            await self.db.execute(
                "UPDATE resumes SET content = ?, updated_at = ? WHERE user_id = ?",
                (content, now, user_id),
            )
        await self.db.commit()
        return await self._require_resume(user_id)

    async def update_ats_result(self, user_id: str, score: int, feedback: str) -> ResumeRecord:
        """Store the latest ATS score; creates an empty resume row if needed."""
        if await self.get_resume(user_id) is None:
            await self.save_resume(user_id, "")
        now = utc_now_iso()
        await self.db.execute(
            "UPDATE resumes SET ats_score = ?, feedback = ?, scored_at = ?, updated_at = ? WHERE user_id = ?",
            (score, feedback, now, now, user_id),
        )
        await self.db.commit()
        return await self._require_resume(user_id)

    async def _require_resume(self, user_id: str) -> ResumeRecord:
        record = await self.get_resume(user_id)
        if record is None:
            raise not_found("RESUME_NOT_FOUND", "Resume not found")
        return record
