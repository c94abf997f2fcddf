"""
Daily Service

Stores the admin-assigned word of the day and each player's daily result.
"""

import datetime
from typing import Any, Dict, List, Optional

from pymongo.errors import DuplicateKeyError

from ..config.game_settings import (
    DAILY_DEFAULT_ATTEMPTS, DAILY_DEFAULT_REWARD_MONEY, DAILY_DEFAULT_REWARD_SCORE,
    MAX_ATTEMPTS_LIMIT, normalize_word, parse_positive_int
)
from ..models.daily import DailyWord
from ..utils.helpers import today_str


class DailyService:
    """Daily word storage and per-day result tracking."""
    
    def __init__(self, db):
        self.db = db
        self.daily_word_collection = db.daily_word
        self.results_collection = db.daily_results
        self.results_collection.create_index([("date", 1), ("user_id", 1)], unique=True)
    
    def set_daily_word(self, word: str, reward_money=None, reward_score=None,
                       attempts=None, date: Optional[str] = None) -> Dict[str, Any]:
        """
        Replace the word of the day. Missing or invalid numbers fall back
        to the default rewards and attempt count.
        """
        try:
            secret = normalize_word(word)
        except ValueError as e:
            return {"success": False, "error": str(e)}
        
        daily = DailyWord(
            word=secret,
            date=date or today_str(),
            reward_money=parse_positive_int(reward_money, DAILY_DEFAULT_REWARD_MONEY),
            reward_score=parse_positive_int(reward_score, DAILY_DEFAULT_REWARD_SCORE),
            attempts=parse_positive_int(attempts, DAILY_DEFAULT_ATTEMPTS, MAX_ATTEMPTS_LIMIT)
        )
        
        self.daily_word_collection.replace_one(
            {"_id": "current"},
            {
                "_id": "current",
                "word": daily.word,
                "date": daily.date,
                "reward_money": daily.reward_money,
                "reward_score": daily.reward_score,
                "attempts": daily.attempts,
                "set_at": datetime.datetime.now(datetime.timezone.utc)
            },
            upsert=True
        )
        
        return {"success": True, "daily": daily.public_dict()}
    
    def get_daily_word(self, date: Optional[str] = None) -> Optional[DailyWord]:
        """Today's word, or None if the admin has not set one for today."""
        daily = DailyWord.from_document(self.daily_word_collection.find_one({"_id": "current"}))
        if daily is None or daily.date != (date or today_str()):
            return None
        return daily
    
    def has_played_today(self, user_id: str, date: Optional[str] = None) -> bool:
        return self.results_collection.find_one({"date": date or today_str(), "user_id": user_id}) is not None
    
    def record_daily_result(self, user_id: str, username: Optional[str], won: bool,
                            attempts: int, date: Optional[str] = None) -> bool:
        """
        Store a player's daily result. Returns False if one already exists.
        """
        try:
            self.results_collection.insert_one({
                "date": date or today_str(),
                "user_id": user_id,
                "username": username,
                "won": won,
                "attempts": attempts,
                "recorded_at": datetime.datetime.now(datetime.timezone.utc)
            })
            return True
        except DuplicateKeyError:
            return False
    
    def get_daily_results(self, date: Optional[str] = None) -> List[Dict[str, Any]]:
        """Results for a day: winners first, fewest attempts first."""
        results = self.results_collection.find({"date": date or today_str()})
        rows = [
            {
                "user_id": row["user_id"],
                "username": row.get("username"),
                "won": row["won"],
                "attempts": row["attempts"]
            }
            for row in results
        ]
        return sorted(rows, key=lambda row: (not row["won"], row["attempts"]))
    
    def count_plays(self) -> int:
        return self.results_collection.count_documents({})


# Global service instance
_daily_service = None


def get_daily_service() -> Optional[DailyService]:
    """Get the global daily service instance."""
    return _daily_service


def initialize_daily_service(db) -> DailyService:
    """Initialize the global daily service instance."""
    global _daily_service
    _daily_service = DailyService(db)
    return _daily_service
