"""
Daily Word Model
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..config.game_settings import (
    DAILY_DEFAULT_ATTEMPTS,
    DAILY_DEFAULT_REWARD_MONEY,
    DAILY_DEFAULT_REWARD_SCORE,
    MAX_ATTEMPTS_LIMIT,
    parse_positive_int,
)


@dataclass(frozen=True)
class DailyWord:
    """The admin-assigned word of the day and its rewards."""
    word: str
    date: str
    reward_money: int = DAILY_DEFAULT_REWARD_MONEY
    reward_score: int = DAILY_DEFAULT_REWARD_SCORE
    attempts: int = DAILY_DEFAULT_ATTEMPTS

    @classmethod
    def from_document(cls, doc: Optional[Mapping[str, Any]]) -> Optional["DailyWord"]:
        if not doc or not doc.get("word") or not doc.get("date"):
            return None
        return cls(
            word=str(doc["word"]).upper(),
            date=doc["date"],
            reward_money=parse_positive_int(doc.get("reward_money"), DAILY_DEFAULT_REWARD_MONEY),
            reward_score=parse_positive_int(doc.get("reward_score"), DAILY_DEFAULT_REWARD_SCORE),
            attempts=parse_positive_int(doc.get("attempts"), DAILY_DEFAULT_ATTEMPTS, MAX_ATTEMPTS_LIMIT),
        )

    def public_dict(self) -> dict:
        """Everything except the word itself."""
        return {
            "date": self.date,
            "word_length": len(self.word),
            "reward_money": self.reward_money,
            "reward_score": self.reward_score,
            "attempts": self.attempts,
        }
