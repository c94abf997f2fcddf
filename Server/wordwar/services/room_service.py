"""
Room Service

Manages multiplayer rooms. A host picks the secret word; every player who
joins gets their own game session on that word once the host starts the
round. The first player to solve it wins the room.
"""

import datetime
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument

from ..config.game_settings import (
    DEFAULT_MAX_ATTEMPTS, MAX_ATTEMPTS_LIMIT, ROOM_MAX_PLAYERS,
    normalize_word, parse_positive_int
)
from ..utils.helpers import generate_room_id


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class RoomService:
    """
    Multiplayer room manager backed by the rooms collection.
    """
    
    def __init__(self, db, game_service):
        self.db = db
        self.rooms_collection = db.rooms
        self.game_service = game_service
        self.rooms_collection.create_index("status")
    
    def _public_room(self, room: Dict[str, Any]) -> Dict[str, Any]:
        """Room as sent to clients; the word is only revealed once finished."""
        return {
            "id": room["_id"],
            "host_id": room["host_id"],
            "host_name": room["host_name"],
            "status": room["status"],
            "word_length": len(room["word"]),
            "word": room["word"] if room["status"] == "finished" else None,
            "max_attempts": room["max_attempts"],
            "time_limit": room.get("time_limit"),
            "players": [dict(player) for player in room["players"]],
            "winner_id": room.get("winner_id"),
            "winner_name": room.get("winner_name"),
            "max_players": ROOM_MAX_PLAYERS
        }
    
    def create_room(self, host_id: str, host_name: str, word: str,
                    max_attempts=None, time_limit=None) -> Dict[str, Any]:
        """
        Create a waiting room with the host's secret word.
        
        Returns:
            Dictionary with success status and the room or error
        """
        try:
            secret = normalize_word(word)
        except ValueError as e:
            return {"success": False, "error": str(e)}
        
        if time_limit is not None:
            time_limit = parse_positive_int(time_limit, 0)
            if time_limit <= 0:
                return {"success": False, "error": "Time limit must be a positive number of seconds"}
        
        room_id = generate_room_id()
        while self.rooms_collection.find_one({"_id": room_id}):
            room_id = generate_room_id()
        
        room = {
            "_id": room_id,
            "host_id": host_id,
            "host_name": host_name,
            "word": secret,
            "max_attempts": parse_positive_int(max_attempts, DEFAULT_MAX_ATTEMPTS, MAX_ATTEMPTS_LIMIT),
            "time_limit": time_limit,
            "status": "waiting",
            "players": [],
            "winner_id": None,
            "winner_name": None,
            "created_at": _utcnow(),
            "started_at": None,
            "finished_at": None
        }
        self.rooms_collection.insert_one(room)
        
        return {"success": True, "room": self._public_room(room)}
    
    def get_room(self, room_id: str) -> Optional[Dict[str, Any]]:
        room = self.rooms_collection.find_one({"_id": str(room_id).upper()})
        return self._public_room(room) if room else None
    
    def list_open_rooms(self) -> List[Dict[str, Any]]:
        """Rooms still waiting for players, newest first."""
        rooms = self.rooms_collection.find({"status": "waiting"}).sort("created_at", -1)
        return [self._public_room(room) for room in rooms]
    
    def count_rooms(self) -> int:
        return self.rooms_collection.count_documents({})
    
    def join_room(self, room_id: str, user_id: str, username: str) -> Dict[str, Any]:
        """Join a user to a waiting room."""
        room = self.rooms_collection.find_one({"_id": str(room_id).upper()})
        if not room:
            return {"success": False, "error": "Room not found"}
        
        if room["status"] != "waiting":
            return {"success": False, "error": "Round already started"}
        
        if room["host_id"] == user_id:
            return {"success": False, "error": "The host cannot play their own word"}
        
        if any(player["id"] == user_id for player in room["players"]):
            return {"success": False, "error": "Already in this room"}
        
        if len(room["players"]) >= ROOM_MAX_PLAYERS:
            return {"success": False, "error": "Room is full"}
        
        player = {
            "id": user_id,
            "username": username,
            "game_id": None,
            "finished": False,
            "won": False,
            "attempts": 0
        }
        updated = self.rooms_collection.find_one_and_update(
            {"_id": room["_id"], "status": "waiting"},
            {"$push": {"players": player}},
            return_document=ReturnDocument.AFTER
        )
        if not updated:
            return {"success": False, "error": "Round already started"}
        
        return {"success": True, "room": self._public_room(updated)}
    
    def leave_room(self, room_id: str, user_id: str) -> Dict[str, Any]:
        """
        Remove a player. Leaving a running round forfeits the player's game.
        """
        room = self.rooms_collection.find_one({"_id": str(room_id).upper()})
        if not room:
            return {"success": False, "error": "Room not found"}
        
        player = next((p for p in room["players"] if p["id"] == user_id), None)
        if player is None:
            return {"success": False, "error": "Not in this room"}
        
        if room["status"] == "waiting":
            self.rooms_collection.update_one(
                {"_id": room["_id"]},
                {"$pull": {"players": {"id": user_id}}}
            )
        elif room["status"] == "playing" and player.get("game_id"):
            # Finishing the game reports back through record_player_result
            self.game_service.abandon_game(player["game_id"], user_id)
        
        return {"success": True, "room": self.get_room(room["_id"])}
    
    def start_room(self, room_id: str, host_id: str) -> Dict[str, Any]:
        """
        Start the round: one game per player, all on the host's word.
        """
        room = self.rooms_collection.find_one({"_id": str(room_id).upper()})
        if not room:
            return {"success": False, "error": "Room not found"}
        
        if room["host_id"] != host_id:
            return {"success": False, "error": "Only the host can start the round"}
        
        if room["status"] != "waiting":
            return {"success": False, "error": "Round already started"}
        
        if not room["players"]:
            return {"success": False, "error": "At least one player is required"}
        
        # Only one caller may move the room out of "waiting"
        room = self.rooms_collection.find_one_and_update(
            {"_id": room["_id"], "status": "waiting"},
            {"$set": {"status": "starting"}},
            return_document=ReturnDocument.AFTER
        )
        if room is None:
            return {"success": False, "error": "Round already started"}
        
        players = []
        for player in room["players"]:
            game_id = self.game_service.create_game(
                room["word"],
                player["id"],
                mode="room",
                max_attempts=room["max_attempts"],
                time_limit=room.get("time_limit"),
                username=player["username"],
                room_id=room["_id"]
            )
            players.append({**player, "game_id": game_id})
        
        self.rooms_collection.update_one(
            {"_id": room["_id"]},
            {"$set": {"players": players, "status": "playing", "started_at": _utcnow()}}
        )
        
        return {
            "success": True,
            "room": self.get_room(room["_id"]),
            "games": {player["id"]: player["game_id"] for player in players}
        }
    
    def record_player_result(self, room_id: str, user_id: str, won: bool, attempts: int) -> Dict[str, Any]:
        """
        Store one player's finished game.
        
        Returns:
            Dictionary with is_winner (first solver) and room_finished flags
        """
        room = self.rooms_collection.find_one_and_update(
            {"_id": room_id, "players.id": user_id},
            {"$set": {
                "players.$.finished": True,
                "players.$.won": won,
                "players.$.attempts": attempts
            }},
            return_document=ReturnDocument.AFTER
        )
        if not room:
            return {"success": False, "error": "Room or player not found"}
        
        players = room["players"]
        username = next(player["username"] for player in players if player["id"] == user_id)
        
        is_winner = False
        if won:
            claimed = self.rooms_collection.update_one(
                {"_id": room_id, "winner_id": None},
                {"$set": {"winner_id": user_id, "winner_name": username}}
            )
            is_winner = claimed.modified_count > 0
        
        room_finished = all(player["finished"] for player in players)
        if room_finished:
            self.rooms_collection.update_one(
                {"_id": room_id},
                {"$set": {"status": "finished", "finished_at": _utcnow()}}
            )
        
        return {
            "success": True,
            "is_winner": is_winner,
            "room_finished": room_finished,
            "room": self.get_room(room_id)
        }


# Global service instance
_room_service = None


def get_room_service() -> Optional[RoomService]:
    """Get the global room service instance."""
    return _room_service


def initialize_room_service(db, game_service) -> RoomService:
    """Initialize the global room service instance."""
    global _room_service
    _room_service = RoomService(db, game_service)
    return _room_service
