"""SQLite-backed review store.

Persists star-rated reviews to ``data/reviews.db`` via ``aiosqlite`` and
computes the per-place average on demand.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from src.interfaces.review_provider import IReviewProvider
from src.models.review import RatingSummary, Review
from src.utils.errors import StoreUnavailableError

logger = structlog.get_logger(logger_name=__name__)

_PROVIDER_NAME = "sqlite_review"

_DEFAULT_DB_PATH = Path("data/reviews.db")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS reviews (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id     INTEGER NOT NULL,
    place_id    TEXT    NOT NULL,
    rating      INTEGER NOT NULL CHECK (rating BETWEEN 1 AND 5),
    comment     TEXT    NOT NULL,
    photo_url   TEXT,
    created_at  TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    updated_at  TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_reviews_place ON reviews(place_id);",
]

_SELECT_COLUMNS = "id, user_id, place_id, rating, comment, photo_url, created_at, updated_at"


def _row_to_review(row: Any) -> Review:
    return Review(
        id=row["id"],
        user_id=row["user_id"],
        venue_id=row["place_id"],
        rating=row["rating"],
        comment=row["comment"],
        photo_url=row["photo_url"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class SQLiteReviewProvider(IReviewProvider):
    """SQLite-backed review persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    def _unavailable(self, operation: str, exc: BaseException) -> StoreUnavailableError:
        logger.error(
            "review_store_error",
            operation=operation,
            path=str(self._db_path),
            error=str(exc),
        )
        return StoreUnavailableError(
            message=f"Review store failed during {operation}: {exc}",
            provider_name=_PROVIDER_NAME,
        )

    async def initialize(self) -> None:
        """Create the reviews table and indices if they don't exist."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_CREATE_TABLE_SQL)
                for idx_sql in _CREATE_INDICES_SQL:
                    await db.execute(idx_sql)
                await db.commit()
        except (sqlite3.Error, OSError) as exc:
            raise self._unavailable("initialize", exc) from exc
        logger.info("review_db_initialized", path=str(self._db_path))

    async def add_review(
        self,
        venue_id: str,
        user_id: int,
        rating: int,
        comment: str,
        photo_url: str | None = None,
    ) -> Review:
        """Insert a review and return the stored row."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(
                    "INSERT INTO reviews (user_id, place_id, rating, comment, photo_url) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (user_id, venue_id, rating, comment, photo_url),
                )
                review_id = cursor.lastrowid
                await db.commit()
                cursor = await db.execute(
                    f"SELECT {_SELECT_COLUMNS} FROM reviews WHERE id = ?",
                    (review_id,),
                )
                row = await cursor.fetchone()
        except (sqlite3.Error, OSError) as exc:
            raise self._unavailable("add_review", exc) from exc

        logger.info("review_stored", place_id=venue_id, user_id=user_id, rating=rating)
        return _row_to_review(row)

    async def list_reviews(self, venue_id: str) -> list[Review]:
        """Return all reviews for a place, newest first."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(
                    f"SELECT {_SELECT_COLUMNS} FROM reviews "
                    "WHERE place_id = ? ORDER BY created_at DESC, id DESC",
                    (venue_id,),
                )
                rows = await cursor.fetchall()
        except (sqlite3.Error, OSError) as exc:
            raise self._unavailable("list_reviews", exc) from exc
        return [_row_to_review(r) for r in rows]

    async def delete_review(self, review_id: int, user_id: int) -> bool:
        """Delete the review only if ``user_id`` wrote it."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(
                    "DELETE FROM reviews WHERE id = ? AND user_id = ?",
                    (review_id, user_id),
                )
                await db.commit()
                deleted = cursor.rowcount > 0
        except (sqlite3.Error, OSError) as exc:
            raise self._unavailable("delete_review", exc) from exc

        logger.info("review_deleted", review_id=review_id, user_id=user_id, deleted=deleted)
        return deleted

    async def get_rating_summary(self, venue_id: str) -> RatingSummary | None:
        """Average rating and review count for a place."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(
                    "SELECT AVG(rating) AS avg_rating, COUNT(*) AS count "
                    "FROM reviews WHERE place_id = ?",
                    (venue_id,),
                )
                row = await cursor.fetchone()
        except (sqlite3.Error, OSError) as exc:
            raise self._unavailable("get_rating_summary", exc) from exc

        if row is None or row["count"] == 0:
            return None
        return RatingSummary(average=float(row["avg_rating"]), count=int(row["count"]))

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
        return _PROVIDER_NAME
