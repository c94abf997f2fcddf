"""
Admin Service

Backs the admin console: password login, the player list, currency
adjustments and aggregate analytics.
"""

import datetime
import hmac
from typing import Any, Dict, List, Optional

import jwt
from pymongo import ReturnDocument

from ..config.game_settings import ADJUSTABLE_FIELDS
from ..engine.progression import level
from .auth_service import to_object_id


class AdminService:
    """
    Admin console operations over the users, rooms and daily results.
    """
    
    def __init__(self, db, admin_password: Optional[str], jwt_secret: str, token_hours: int = 8):
        self.db = db
        self.admin_password = admin_password
        self.jwt_secret = jwt_secret
        self.token_hours = token_hours
        self.users_collection = db.users
    
    def login(self, password: str) -> Dict[str, Any]:
        """Exchange the admin password for a short-lived admin token."""
        if not self.admin_password:
            return {"success": False, "error": "Admin access is not configured"}
        
        if not password or not hmac.compare_digest(str(password), self.admin_password):
            return {"success": False, "error": "Invalid admin password"}
        
        payload = {
            "role": "admin",
            "exp": datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(hours=self.token_hours)
        }
        return {"success": True, "token": jwt.encode(payload, self.jwt_secret, algorithm="HS256")}
    
    def verify_admin_token(self, token: Optional[str]) -> Dict[str, Any]:
        try:
            if not token:
                return {"success": False, "error": "Admin token required"}
            payload = jwt.decode(token, self.jwt_secret, algorithms=["HS256"])
            if payload.get("role") != "admin":
                return {"success": False, "error": "Admin access required"}
            return {"success": True}
        except jwt.ExpiredSignatureError:
            return {"success": False, "error": "Token has expired"}
        except jwt.InvalidTokenError:
            return {"success": False, "error": "Invalid token"}
    
    def list_users(self) -> List[Dict[str, Any]]:
        """All players, highest score first."""
        users = [user for user in self.users_collection.find({}) if user.get("username")]
        users.sort(key=lambda user: user.get("score") or 0, reverse=True)
        return [
            {
                "id": str(user["_id"]),
                "username": user["username"],
                "money": user.get("money") or 0,
                "score": user.get("score") or 0,
                "wins": user.get("wins") or 0,
                "losses": user.get("losses") or 0,
                "total_games": user.get("total_games") or 0,
                "level": level(user.get("score")),
                "is_online": bool(user.get("is_online"))
            }
            for user in users
        ]
    
    def adjust_currency(self, user_id: str, field: str, delta) -> Dict[str, Any]:
        """
        Add delta to a user's money or score, never going below zero.
        
        Returns:
            Dictionary with success status and the new value
        """
        if field not in ADJUSTABLE_FIELDS:
            return {"success": False, "error": f"Field must be one of {', '.join(ADJUSTABLE_FIELDS)}"}
        
        try:
            delta = int(delta)
        except (TypeError, ValueError):
            return {"success": False, "error": "Delta must be an integer"}
        
        object_id = to_object_id(user_id)
        if object_id is None:
            return {"success": False, "error": "User not found"}
        
        # Write only if the field still holds the value that was read
        while True:
            user = self.users_collection.find_one({"_id": object_id}, {field: 1})
            if not user:
                return {"success": False, "error": "User not found"}
            
            current = user.get(field)
            new_value = max(0, (current or 0) + delta)
            updated = self.users_collection.find_one_and_update(
                {"_id": object_id, field: current},
                {"$set": {field: new_value}},
                return_document=ReturnDocument.AFTER
            )
            if updated is not None:
                return {"success": True, "field": field, "value": updated[field]}
    
    def load_analytics(self) -> Dict[str, Any]:
        """Aggregate numbers shown on the admin dashboard."""
        users = [user for user in self.users_collection.find({}) if user.get("username")]
        most_active = max(users, key=lambda user: user.get("total_games") or 0, default=None)
        
        return {
            "total_users": len(users),
            "total_games": sum(user.get("total_games") or 0 for user in users),
            "total_rooms": self.db.rooms.count_documents({}),
            "total_daily_plays": self.db.daily_results.count_documents({}),
            "total_score": sum(user.get("score") or 0 for user in users),
            "online_count": sum(1 for user in users if user.get("is_online")),
            "most_active": most_active["username"] if most_active else "N/A",
            "most_active_games": (most_active.get("total_games") or 0) if most_active else 0
        }


# Global service instance
_admin_service = None


def get_admin_service() -> Optional[AdminService]:
    """Get the global admin service instance."""
    return _admin_service


def initialize_admin_service(db, admin_password: Optional[str], jwt_secret: str,
                             token_hours: int = 8) -> AdminService:
    """Initialize the global admin service instance."""
    global _admin_service
    _admin_service = AdminService(db, admin_password, jwt_secret, token_hours)
    return _admin_service
