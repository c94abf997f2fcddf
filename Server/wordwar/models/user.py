"""
User Data Models

Typed views over the schemaless user documents stored in MongoDB.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional


def _non_negative_int(value) -> int:
    try:
        number = int(value or 0)
    except (TypeError, ValueError):
        return 0
    return max(0, number)


@dataclass(frozen=True)
class PlayerStats:
    """Cumulative player statistics; missing fields default to zero."""
    score: int = 0
    wins: int = 0
    losses: int = 0
    total_games: int = 0

    @classmethod
    def from_record(cls, record: Optional[Mapping[str, Any]]) -> "PlayerStats":
        """
        Build stats from a stored record or request payload.

        Accepts snake_case fields as well as the camelCase ``totalGames``
        written by older browser clients.
        """
        record = record or {}
        total_games = record.get("total_games", record.get("totalGames"))
        return cls(
            score=_non_negative_int(record.get("score")),
            wins=_non_negative_int(record.get("wins")),
            losses=_non_negative_int(record.get("losses")),
            total_games=_non_negative_int(total_games),
        )

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "wins": self.wins,
            "losses": self.losses,
            "total_games": self.total_games,
        }


@dataclass
class User:
    """User data model."""
    id: str
    username: str
    stats: PlayerStats = field(default_factory=PlayerStats)
    money: int = 0
    photo_url: str = ""
    is_online: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "User":
        return cls(
            id=str(doc["_id"]),
            username=doc.get("username", ""),
            stats=PlayerStats.from_record(doc),
            money=_non_negative_int(doc.get("money")),
            photo_url=doc.get("photo_url") or "",
            is_online=bool(doc.get("is_online", False)),
            created_at=doc.get("created_at"),
        )
