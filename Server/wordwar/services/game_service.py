"""
Game Service

Owns in-memory game sessions and drives the engine: guess evaluation,
keyboard aggregation and the per-game round timer.
"""

import threading
import time
import uuid
from functools import partial
from typing import Callable, Dict, List, Optional, Tuple

from ..config.game_settings import DEFAULT_MAX_ATTEMPTS, MAX_ATTEMPTS_LIMIT, normalize_word, parse_positive_int
from ..engine.evaluator import evaluate_guess, is_solved, serialize_result
from ..engine.keyboard import merge_keyboard_state, serialize_keyboard_state
from ..engine.timer import CountdownTimer
from ..models.game import GameState
from ..utils.game_logger import game_logger

GameListener = Callable[[str, Dict], None]

GAME_MODES = ("daily", "room")


class GameService:
    """
    Core game service managing multiple game sessions.
    
    This class handles:
    - Game session management with unique game IDs
    - Secret storage without exposing answers to clients
    - Guess validation and evaluation
    - Round timers, started through the injected scheduler
    - Notifying listeners of timer ticks and finished games
    """
    
    def __init__(self, scheduler=None):
        self.games: Dict[str, Dict] = {}
        self.scheduler = scheduler
        self._listeners: List[GameListener] = []
        self._lock = threading.RLock()
    
    def add_listener(self, listener: GameListener) -> None:
        """Register a callback receiving (event, payload) for game events."""
        self._listeners.append(listener)
    
    def _notify(self, event: str, payload: Dict) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, payload)
            except Exception as e:
                game_logger.logger.error(f"Game listener failed on '{event}' for game {payload.get('game_id')}: {e}")
    
    def create_game(self,
                    secret: str,
                    user_id: str,
                    mode: str = "daily",
                    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
                    time_limit: Optional[int] = None,
                    username: Optional[str] = None,
                    room_id: Optional[str] = None,
                    daily_date: Optional[str] = None,
                    reward_score: int = 0,
                    reward_money: int = 0) -> str:
        """
        Creates a new game session for one player.
        
        Args:
            secret: The word to guess (validated and uppercased)
            user_id: Owner of the session
            mode: "daily" or "room"
            max_attempts: Guesses allowed before the game is lost
            time_limit: Optional round length in seconds; starts a timer
            
        Returns:
            str: Unique game ID for this session
            
        Raises:
            ValueError: If the mode or secret is invalid
            InvalidTimerConfiguration: If time_limit is not a positive int
        """
        if mode not in GAME_MODES:
            raise ValueError(f"Invalid game mode '{mode}'")
        
        game_id = str(uuid.uuid4())
        game = {
            "game_id": game_id,
            "mode": mode,
            "user_id": user_id,
            "username": username,
            "room_id": room_id,
            "daily_date": daily_date,
            "target_word": normalize_word(secret),
            "max_attempts": parse_positive_int(max_attempts, DEFAULT_MAX_ATTEMPTS, MAX_ATTEMPTS_LIMIT),
            "current_round": 0,
            "game_over": False,
            "won": False,
            "end_reason": None,
            "guesses": [],
            "guess_results": [],
            "keyboard": {},
            "reward_score": reward_score,
            "reward_money": reward_money,
            "timer": None,
            "created_at": time.time(),
            "finished_at": None
        }
        
        if time_limit is not None:
            game["timer"] = CountdownTimer(
                time_limit,
                on_tick=partial(self._on_timer_tick, game_id),
                on_end=partial(self._on_time_up, game_id),
                scheduler=self.scheduler
            )
        
        with self._lock:
            self.games[game_id] = game
        
        if game["timer"] is not None and self.scheduler is not None:
            game["timer"].start()
        
        return game_id
    
    def get_game(self, game_id: str) -> Optional[Dict]:
        return self.games.get(game_id)
    
    def find_active_game(self, user_id: str, mode: str) -> Optional[str]:
        """Id of the player's unfinished game in a mode, if any."""
        for game_id, game in list(self.games.items()):
            if game["user_id"] == user_id and game["mode"] == mode and not game["game_over"]:
                return game_id
        return None

    def find_or_create_game(self, secret: str, user_id: str, mode: str = "daily", **options) -> Tuple[str, bool]:
        """
        Resume the player's unfinished game in a mode or create a new one.

        Returns:
            Tuple of (game_id, created)
        """
        with self._lock:
            game_id = self.find_active_game(user_id, mode)
            if game_id is not None:
                return game_id, False
            return self.create_game(secret, user_id, mode=mode, **options), True

    def get_game_state(self, game_id: str) -> Optional[GameState]:
        """
        Returns the current game state for a session (without revealing the answer).
        
        Returns:
            GameState object or None if game not found
        """
        game = self.games.get(game_id)
        if game is None:
            return None
        
        timer = game["timer"]
        return GameState(
            game_id=game_id,
            mode=game["mode"],
            word_length=len(game["target_word"]),
            current_round=game["current_round"],
            max_attempts=game["max_attempts"],
            game_over=game["game_over"],
            won=game["won"],
            guesses=game["guesses"].copy(),
            guess_results=[row.copy() for row in game["guess_results"]],
            letter_status=serialize_keyboard_state(game["keyboard"]),
            end_reason=game["end_reason"],
            answer=game["target_word"] if game["game_over"] else None,
            room_id=game["room_id"],
            timer=timer.to_dict() if timer else None
        )
    
    def is_valid_guess(self, game_id: str, guess, user_id: Optional[str] = None) -> Tuple[bool, str]:
        """
        Validates a guess for a specific game session.
        
        Returns:
            Tuple of (is_valid, error_message)
        """
        game = self.games.get(game_id)
        if game is None:
            return False, "Game not found"
        
        if user_id is not None and game["user_id"] != user_id:
            return False, "This game belongs to another player"
        
        if game["game_over"]:
            return False, "Game is already over"
        
        if not guess or not isinstance(guess, str):
            return False, "Guess must be a valid string"
        
        normalized_guess = guess.strip().upper()
        word_length = len(game["target_word"])
        
        if not normalized_guess.isalpha():
            return False, "Guess must contain only letters"
        
        if len(normalized_guess) != word_length:
            return False, f"Guess must be exactly {word_length} letters"
        
        return True, ""
    
    def make_guess(self, game_id: str, guess: str, user_id: Optional[str] = None) -> Optional[GameState]:
        """
        Processes a guess and updates game state.
        
        Returns:
            Updated GameState or None if invalid
        """
        with self._lock:
            is_valid, _ = self.is_valid_guess(game_id, guess, user_id)
            if not is_valid:
                return None
            
            game = self.games[game_id]
            normalized_guess = guess.strip().upper()
            
            result = evaluate_guess(game["target_word"], normalized_guess)
            merge_keyboard_state(game["keyboard"], normalized_guess, result)
            
            game["current_round"] += 1
            game["guesses"].append(normalized_guess)
            game["guess_results"].append(serialize_result(normalized_guess, result))
            
            if is_solved(result):
                self._finish(game, won=True, reason="solved")
            elif game["current_round"] >= game["max_attempts"]:
                self._finish(game, won=False, reason="attempts")
        
        return self.get_game_state(game_id)
    
    def abandon_game(self, game_id: str, user_id: Optional[str] = None) -> bool:
        """End a running game as a loss (player left or gave up)."""
        with self._lock:
            game = self.games.get(game_id)
            if game is None or game["game_over"]:
                return False
            if user_id is not None and game["user_id"] != user_id:
                return False
            self._finish(game, won=False, reason="abandoned")
            return True
    
    def _on_timer_tick(self, game_id: str, remaining: int) -> None:
        game = self.games.get(game_id)
        if game is None:
            return
        self._notify("timer_tick", {
            "game_id": game_id,
            "user_id": game["user_id"],
            "room_id": game["room_id"],
            "timer": game["timer"].to_dict()
        })
    
    def _on_time_up(self, game_id: str) -> None:
        with self._lock:
            game = self.games.get(game_id)
            if game is None or game["game_over"]:
                return
            self._finish(game, won=False, reason="timeout")
    
    def _finish(self, game: Dict, won: bool, reason: str) -> None:
        game["game_over"] = True
        game["won"] = won
        game["end_reason"] = reason
        game["finished_at"] = time.time()
        if game["timer"] is not None:
            game["timer"].stop()
        
        summary = {
            "game_id": game["game_id"],
            "mode": game["mode"],
            "user_id": game["user_id"],
            "username": game["username"],
            "room_id": game["room_id"],
            "daily_date": game["daily_date"],
            "won": won,
            "reason": reason,
            "attempts": game["current_round"],
            "target_word": game["target_word"],
            "reward_score": game["reward_score"] if won else 0,
            "reward_money": game["reward_money"] if won else 0,
            "elapsed_seconds": round(game["finished_at"] - game["created_at"], 1)
        }
        
        game_logger.log_game_event(
            game["game_id"], "game_won" if won else "game_lost", game["user_id"],
            mode=game["mode"], reason=reason, attempts=game["current_round"]
        )
        self._notify("game_finished", summary)
    
    def cleanup_finished_games(self, max_age_seconds: int = 600) -> int:
        """Drop finished games older than max_age_seconds. Returns the count removed."""
        cutoff = time.time() - max_age_seconds
        with self._lock:
            stale = [
                game_id for game_id, game in self.games.items()
                if game["game_over"] and game["finished_at"] is not None and game["finished_at"] < cutoff
            ]
            for game_id in stale:
                del self.games[game_id]
        return len(stale)
    
    def delete_game(self, game_id: str) -> bool:
        """
        Removes a game session from memory, cancelling its timer.
        
        Returns:
            bool: True if game was deleted, False if not found
        """
        with self._lock:
            game = self.games.pop(game_id, None)
        if game is None:
            return False
        if game["timer"] is not None:
            game["timer"].stop()
        return True


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(scheduler=None) -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    _game_service = GameService(scheduler)
    return _game_service
