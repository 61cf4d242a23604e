"""SQLite-backed crowd-verification store.

Persists one "serves piña coladas?" vote per (place, user) to a local
SQLite database at ``data/verifications.db``.  Uses ``aiosqlite`` for
async I/O.

The ``UNIQUE(place_id, user_id)`` constraint together with
``INSERT … ON CONFLICT DO UPDATE`` makes a re-vote a single atomic
statement, so two concurrent submissions from the same user can never
leave two rows behind.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from src.interfaces.verification_provider import IVerificationProvider
from src.models.verification import VerificationStats, VoteRecord
from src.utils.errors import StoreUnavailableError

logger = structlog.get_logger(logger_name=__name__)

_PROVIDER_NAME = "sqlite_verification"

_DEFAULT_DB_PATH = Path("data/verifications.db")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS bar_verifications (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    place_id         TEXT    NOT NULL,
    user_id          INTEGER NOT NULL,
    has_pina_colada  INTEGER NOT NULL CHECK (has_pina_colada IN (0, 1)),
    created_at       TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    UNIQUE(place_id, user_id)
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_verifications_place ON bar_verifications(place_id);",
]

_UPSERT_SQL = """\
INSERT INTO bar_verifications (place_id, user_id, has_pina_colada)
VALUES (?, ?, ?)
ON CONFLICT(place_id, user_id)
DO UPDATE SET has_pina_colada = excluded.has_pina_colada,
              created_at      = strftime('%Y-%m-%dT%H:%M:%fZ', 'now');
"""

_SELECT_VOTE_SQL = """\
SELECT id, place_id, user_id, has_pina_colada, created_at
FROM bar_verifications
WHERE place_id = ? AND user_id = ?
LIMIT 1;
"""

_COUNT_SQL = """\
SELECT has_pina_colada, COUNT(*) AS count
FROM bar_verifications
WHERE place_id = ?
GROUP BY has_pina_colada;
"""


def _row_to_vote(row: Any) -> VoteRecord:
    return VoteRecord(
        id=row["id"],
        venue_id=row["place_id"],
        user_id=row["user_id"],
        value=row["has_pina_colada"] == 1,
        recorded_at=row["created_at"],
    )


class SQLiteVerificationProvider(IVerificationProvider):
    """SQLite-backed vote persistence and tallying."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    def _unavailable(self, operation: str, exc: BaseException) -> StoreUnavailableError:
        logger.error(
            "verification_store_error",
            operation=operation,
            path=str(self._db_path),
            error=str(exc),
        )
        return StoreUnavailableError(
            message=f"Verification store failed during {operation}: {exc}",
            provider_name=_PROVIDER_NAME,
        )

    async def initialize(self) -> None:
        """Create the votes table and indices if they don't exist."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_CREATE_TABLE_SQL)
                for idx_sql in _CREATE_INDICES_SQL:
                    await db.execute(idx_sql)
                await db.commit()
        except (sqlite3.Error, OSError) as exc:
            raise self._unavailable("initialize", exc) from exc
        logger.info("verification_db_initialized", path=str(self._db_path))

    async def upsert_vote(self, venue_id: str, user_id: int, value: bool) -> VoteRecord:
        """Store or overwrite the user's vote.  Returns the stored row."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                await db.execute(_UPSERT_SQL, (venue_id, user_id, 1 if value else 0))
                await db.commit()
                cursor = await db.execute(_SELECT_VOTE_SQL, (venue_id, user_id))
                row = await cursor.fetchone()
        except (sqlite3.Error, OSError) as exc:
            raise self._unavailable("upsert_vote", exc) from exc

        if row is None:
            raise self._unavailable("upsert_vote", RuntimeError("row missing after upsert"))

        vote = _row_to_vote(row)
        logger.info(
            "vote_stored",
            place_id=venue_id,
            user_id=user_id,
            value=value,
            row_id=vote.id,
        )
        return vote

    async def get_vote(self, venue_id: str, user_id: int) -> VoteRecord | None:
        """Return the user's vote for the place, or ``None``."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(_SELECT_VOTE_SQL, (venue_id, user_id))
                row = await cursor.fetchone()
        except (sqlite3.Error, OSError) as exc:
            raise self._unavailable("get_vote", exc) from exc

        return _row_to_vote(row) if row is not None else None

    async def count_votes(self, venue_id: str) -> VerificationStats:
        """Tally the place's votes grouped by value."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(_COUNT_SQL, (venue_id,))
                rows = await cursor.fetchall()
        except (sqlite3.Error, OSError) as exc:
            raise self._unavailable("count_votes", exc) from exc

        positive = negative = 0
        for row in rows:
            if row["has_pina_colada"] == 1:
                positive = int(row["count"])
            else:
                negative = int(row["count"])

        return VerificationStats(positive_count=positive, negative_count=negative)

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
        return _PROVIDER_NAME
