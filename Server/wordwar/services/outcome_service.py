"""
Outcome Service

Listens for finished games and decides what gets persisted: player stats
and rewards, daily results and room standings.
"""

from typing import Dict, Optional

from ..config.game_settings import ROOM_WIN_REWARD_MONEY, ROOM_WIN_REWARD_SCORE
from ..utils.game_logger import game_logger


class OutcomeRecorder:
    """GameService listener persisting the result of every finished game."""
    
    def __init__(self, auth_service, daily_service=None, room_service=None):
        self.auth_service = auth_service
        self.daily_service = daily_service
        self.room_service = room_service
    
    def __call__(self, event: str, payload: Dict) -> None:
        if event == "game_finished":
            self.record(payload)
    
    def record(self, summary: Dict) -> Optional[Dict]:
        """
        Persist one finished game.
        
        Returns:
            The rewards applied, or None when nothing was recorded
        """
        user_id = summary["user_id"]
        won = summary["won"]
        
        if summary["mode"] == "daily":
            score_delta = summary["reward_score"]
            money_delta = summary["reward_money"]
            if self.daily_service:
                recorded = self.daily_service.record_daily_result(
                    user_id, summary.get("username"), won, summary["attempts"], summary.get("daily_date")
                )
                if not recorded:
                    game_logger.logger.warning(
                        f"Daily result already recorded for user {user_id}, skipping game {summary['game_id']}"
                    )
                    return None
        elif summary["mode"] == "room":
            score_delta = money_delta = 0
            if self.room_service and summary.get("room_id"):
                result = self.room_service.record_player_result(
                    summary["room_id"], user_id, won, summary["attempts"]
                )
                if result.get("is_winner"):
                    score_delta = ROOM_WIN_REWARD_SCORE
                    money_delta = ROOM_WIN_REWARD_MONEY
        else:
            game_logger.logger.warning(f"Unknown game mode '{summary['mode']}' for game {summary['game_id']}")
            return None
        
        if self.auth_service:
            self.auth_service.record_game_result(user_id, won, score_delta, money_delta)
        
        game_logger.log_game_event(
            summary["game_id"], "result_recorded", user_id,
            username=summary.get("username"), mode=summary["mode"], won=won,
            score_delta=score_delta, money_delta=money_delta
        )
        return {"score_delta": score_delta, "money_delta": money_delta}
