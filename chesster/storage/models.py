"""Models for locally stored data."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS lichess_ratings (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        lichess_username TEXT NOT NULL UNIQUE,
        rating INTEGER,
        last_checked_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS subscriptions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        requester TEXT NOT NULL,
        source TEXT NOT NULL,
        event TEXT NOT NULL,
        target TEXT NOT NULL,
        league TEXT NOT NULL,
        UNIQUE (requester, source, event, target, league)
    )
    """,
)


@dataclass(frozen=True)
class LichessRating:
    """Cached classical rating for a lichess user."""
    id: int
    lichess_username: str
    rating: int | None = None
    last_checked_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Any) -> "LichessRating":
        checked = row["last_checked_at"]
        return cls(
            id=row["id"],
            lichess_username=row["lichess_username"],
            rating=row["rating"],
            last_checked_at=datetime.fromisoformat(checked) if checked else None,
        )


@dataclass(frozen=True)
class Subscription:
    """A request to be notified when `event` happens to `source`."""
    id: int
    requester: str
    source: str
    event: str
    target: str
    league: str

    @classmethod
    def from_row(cls, row: Any) -> "Subscription":
        return cls(
            id=row["id"],
            requester=row["requester"],
            source=row["source"],
            event=row["event"],
            target=row["target"],
            league=row["league"],
        )
