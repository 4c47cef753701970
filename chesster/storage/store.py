"""
Persistent store for Chesster.

Ratings and subscriptions live in a SQLite database. All database work
runs on a single worker thread so the event loop never blocks on disk.
"""

import asyncio
import sqlite3
from concurrent.futures import ThreadPoolExecutor
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, TypeVar

from loguru import logger

from chesster.config.schema import DatabaseConfig
from chesster.storage.models import SCHEMA, LichessRating, Subscription

T = TypeVar("T")

SQLITE_PRAGMAS = (
    "PRAGMA journal_mode=WAL;",
    "PRAGMA synchronous=NORMAL;",
    "PRAGMA busy_timeout=5000;",
)

SUPPORTED_DIALECTS = ("sqlite",)


class StoreError(RuntimeError):
    """Raised when the store cannot be reached or is misconfigured."""


class ChessterStore:
    """Async facade over the SQLite database."""

    def __init__(self, db_path: Path, connect_timeout: float = 10.0):
        self._db_path = db_path
        self._connect_timeout = connect_timeout
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="chesster-store")
        self._connection: sqlite3.Connection | None = None

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> "ChessterStore":
        if config.dialect not in SUPPORTED_DIALECTS:
            raise StoreError(f"Unsupported database dialect: {config.dialect}")
        return cls(config.db_path, config.connect_timeout)

    @property
    def path(self) -> Path:
        return self._db_path

    async def connect(self) -> None:
        """
        Open the database and create tables.

        Raises:
            StoreError: If the database cannot be opened in time.
        """
        logger.info(f"Connecting to database at {self._db_path}")
        try:
            await asyncio.wait_for(self._run(self._connect_sync), timeout=self._connect_timeout)
        except asyncio.TimeoutError as e:
            # The worker may still finish opening; queue a close behind it
            self._executor.submit(self._close_sync)
            logger.error(f"Database connection timeout after {self._connect_timeout} seconds")
            raise StoreError("Database connection timed out") from e
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Error connecting to database: {e}")
            raise StoreError(str(e)) from e
        logger.info("Database connection successful")

    async def close(self) -> None:
        await self._run(self._close_sync)
        self._executor.shutdown(wait=True)

    # Ratings

    async def get_rating(self, username: str) -> LichessRating | None:
        return await self._run(self._get_rating_sync, username)

    async def upsert_rating(self, username: str, rating: int | None) -> LichessRating:
        return await self._run(self._upsert_rating_sync, username, rating)

    # Subscriptions

    async def add_subscription(
        self,
        *,
        requester: str,
        source: str,
        event: str,
        target: str,
        league: str,
    ) -> Subscription:
        return await self._run(
            self._add_subscription_sync, requester, source, event, target, league
        )

    async def list_subscriptions(self, requester: str) -> list[Subscription]:
        return await self._run(self._list_subscriptions_sync, requester)

    async def remove_subscription(self, subscription_id: int, requester: str) -> bool:
        """Remove a subscription; only the requester's own rows are removed."""
        return await self._run(self._remove_subscription_sync, subscription_id, requester)

    # Worker thread

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func, *args)

    def _connect_sync(self) -> None:
        if self._connection is not None:
            return
        if str(self._db_path) != ":memory:":
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self._db_path, timeout=self._connect_timeout)
        conn.row_factory = sqlite3.Row
        for pragma in SQLITE_PRAGMAS:
            conn.execute(pragma)
        with conn:
            for statement in SCHEMA:
                conn.execute(statement)
        self._connection = conn

    def _close_sync(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def _conn(self) -> sqlite3.Connection:
        if self._connection is None:
            raise StoreError("Store is not connected")
        return self._connection

    def _get_rating_sync(self, username: str) -> LichessRating | None:
        with closing(self._conn().cursor()) as cursor:
            cursor.execute(
                "SELECT * FROM lichess_ratings WHERE lower(lichess_username) = lower(?)",
                (username,),
            )
            row = cursor.fetchone()
        return LichessRating.from_row(row) if row else None

    def _upsert_rating_sync(self, username: str, rating: int | None) -> LichessRating:
        conn = self._conn()
        checked = datetime.now(timezone.utc).isoformat()
        with conn:
            conn.execute(
                """
                INSERT INTO lichess_ratings (lichess_username, rating, last_checked_at)
                VALUES (?, ?, ?)
                ON CONFLICT(lichess_username) DO UPDATE SET
                    rating = excluded.rating,
                    last_checked_at = excluded.last_checked_at
                """,
                (username, rating, checked),
            )
        found = self._get_rating_sync(username)
        if found is None:
            raise StoreError(f"Rating for {username} was not saved")
        return found

    def _add_subscription_sync(
        self,
        requester: str,
        source: str,
        event: str,
        target: str,
        league: str,
    ) -> Subscription:
        conn = self._conn()
        key = (requester, source, event, target, league)
        with conn:
            conn.execute(
                """
                INSERT OR IGNORE INTO subscriptions (requester, source, event, target, league)
                VALUES (?, ?, ?, ?, ?)
                """,
                key,
            )
        row = conn.execute(
            """
            SELECT * FROM subscriptions
            WHERE requester = ? AND source = ? AND event = ? AND target = ? AND league = ?
            """,
            key,
        ).fetchone()
        return Subscription.from_row(row)

    def _list_subscriptions_sync(self, requester: str) -> list[Subscription]:
        rows = self._conn().execute(
            "SELECT * FROM subscriptions WHERE requester = ? ORDER BY id",
            (requester,),
        ).fetchall()
        return [Subscription.from_row(row) for row in rows]

    def _remove_subscription_sync(self, subscription_id: int, requester: str) -> bool:
        conn = self._conn()
        try:
            with conn:
                cursor = conn.execute(
                    "DELETE FROM subscriptions WHERE id = ? AND requester = ?",
                    (subscription_id, requester),
                )
        except OverflowError:
            # Larger than any SQLite integer id
            return False
        return cursor.rowcount > 0
