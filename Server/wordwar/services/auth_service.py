"""
Authentication Service

Handles player accounts: registration, login, password hashing, JWT token
management and the cumulative stats/currency stored on each user document.
"""

import bcrypt
import jwt
import datetime
from typing import Optional, Dict, Any
from bson.objectid import ObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError

from ..config.game_settings import STARTING_MONEY
from ..engine.progression import level, level_progress, unlocked_achievements
from ..models.user import User


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def to_object_id(value) -> Optional[ObjectId]:
    """Parse a user id, returning None for malformed ids."""
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def public_user(user_doc: Dict[str, Any]) -> Dict[str, Any]:
    """Client-facing profile with derived level and achievements."""
    user = User.from_document(user_doc)
    return {
        "id": user.id,
        "username": user.username,
        "photo_url": user.photo_url,
        "money": user.money,
        "is_online": user.is_online,
        "stats": user.stats.to_dict(),
        "level": level(user.stats.score),
        "level_progress": round(level_progress(user.stats.score), 2),
        "achievements": [achievement.id for achievement in unlocked_achievements(user.stats)]
    }


class AuthService:
    """
    Authentication service for handling user registration, login, and token management.
    """
    
    def __init__(self, db, jwt_secret: str, jwt_expiration_days: int = 7):
        """
        Initialize the authentication service.
        
        Args:
            db: pymongo Database holding the users collection
            jwt_secret: Secret key for JWT token generation
            jwt_expiration_days: Lifetime of issued tokens
        """
        self.db = db
        self.jwt_secret = jwt_secret
        self.jwt_expiration_days = jwt_expiration_days
        self.users_collection = db.users
        
        # Usernames are unique regardless of case
        self.users_collection.create_index("username_key", unique=True)
        self.users_collection.create_index("score")
    
    def hash_password(self, password: str) -> str:
        """
        Hash a password using bcrypt.
        
        Args:
            password: Plain text password
            
        Returns:
            Hashed password as string
        """
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')
    
    def verify_password(self, password: str, hashed_password: str) -> bool:
        """Verify a password against its bcrypt hash."""
        return bcrypt.checkpw(password.encode('utf-8'), hashed_password.encode('utf-8'))
    
    def register_user(self, username: str, password: str, photo_url: str = "") -> Dict[str, Any]:
        """
        Register a new user.
        
        Args:
            username: User's chosen username (display case is kept)
            password: User's chosen password
            photo_url: Optional avatar (data URL)
            
        Returns:
            Dictionary with success status and the new user or error
        """
        try:
            if not username or not password:
                return {"success": False, "error": "Username and password are required"}
            
            username = username.strip()
            if len(username) < 3:
                return {"success": False, "error": "Username must be at least 3 characters long"}
            
            if len(password) < 6:
                return {"success": False, "error": "Password must be at least 6 characters long"}
            
            username_key = username.lower()
            if self.users_collection.find_one({"username_key": username_key}):
                return {"success": False, "error": "Username already taken"}
            
            user_doc = {
                "username": username,
                "username_key": username_key,
                "password": self.hash_password(password),
                "photo_url": photo_url or "",
                "money": STARTING_MONEY,
                "score": 0,
                "wins": 0,
                "losses": 0,
                "total_games": 0,
                "is_online": False,
                "created_at": _utcnow(),
                "last_login": None
            }
            
            result = self.users_collection.insert_one(user_doc)
            user_doc["_id"] = result.inserted_id
            
            return {
                "success": True,
                "message": "User registered successfully",
                "user_id": str(result.inserted_id),
                "user": public_user(user_doc)
            }
        
        except DuplicateKeyError:
            return {"success": False, "error": "Username already taken"}
        except Exception as e:
            return {"success": False, "error": f"Registration failed: {str(e)}"}
    
    def login_user(self, username: str, password: str) -> Dict[str, Any]:
        """
        Authenticate a user and generate a JWT token.
        
        Returns:
            Dictionary with success status and JWT token or error
        """
        try:
            if not username or not password:
                return {"success": False, "error": "Username and password are required"}
            
            user = self.users_collection.find_one({"username_key": username.strip().lower()})
            if not user:
                return {"success": False, "error": "Invalid username or password"}
            
            if not self.verify_password(password, user["password"]):
                return {"success": False, "error": "Invalid username or password"}
            
            now = _utcnow()
            self.users_collection.update_one(
                {"_id": user["_id"]},
                {"$set": {"last_login": now, "is_online": True}}
            )
            user["is_online"] = True
            
            token_payload = {
                "user_id": str(user["_id"]),
                "username": user["username"],
                "exp": now + datetime.timedelta(days=self.jwt_expiration_days)
            }
            token = jwt.encode(token_payload, self.jwt_secret, algorithm="HS256")
            
            return {
                "success": True,
                "token": token,
                "user": public_user(user)
            }
            
        except Exception as e:
            return {"success": False, "error": f"Login failed: {str(e)}"}
    
    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.
        
        Returns:
            Dictionary with success status and user data or error
        """
        try:
            if not token:
                return {"success": False, "error": "Token is required"}
            
            payload = jwt.decode(token, self.jwt_secret, algorithms=["HS256"])
            user_id = to_object_id(payload.get("user_id"))
            
            if not user_id:
                return {"success": False, "error": "Invalid token payload"}
            
            user = self.users_collection.find_one({"_id": user_id})
            if not user:
                return {"success": False, "error": "User not found"}
            
            return {"success": True, "user": public_user(user)}
            
        except jwt.ExpiredSignatureError:
            return {"success": False, "error": "Token has expired"}
        except jwt.InvalidTokenError:
            return {"success": False, "error": "Invalid token"}
        except Exception as e:
            return {"success": False, "error": f"Token verification failed: {str(e)}"}
    
    def logout_user(self, user_id: str) -> Dict[str, Any]:
        """Mark a user offline."""
        object_id = to_object_id(user_id)
        if not object_id:
            return {"success": False, "error": "Invalid user id"}
        
        result = self.users_collection.update_one(
            {"_id": object_id},
            {"$set": {"is_online": False}}
        )
        if result.matched_count == 0:
            return {"success": False, "error": "User not found"}
        return {"success": True, "message": "Logged out successfully"}
    
    def delete_account(self, user_id: str) -> Dict[str, Any]:
        """Permanently remove a user document."""
        object_id = to_object_id(user_id)
        if not object_id:
            return {"success": False, "error": "Invalid user id"}
        
        result = self.users_collection.delete_one({"_id": object_id})
        if result.deleted_count == 0:
            return {"success": False, "error": "User not found"}
        return {"success": True, "message": "Account deleted"}
    
    def get_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Get the public profile for a user.
        
        Returns:
            User data dictionary or None if not found
        """
        object_id = to_object_id(user_id)
        if not object_id:
            return None
        user = self.users_collection.find_one({"_id": object_id})
        return public_user(user) if user else None
    
    def record_game_result(self, user_id: str, won: bool,
                           score_delta: int = 0, money_delta: int = 0) -> bool:
        """
        Add one finished game to a user's stats and apply rewards.
        
        Args:
            user_id: User's unique identifier
            won: Whether the game was won
            score_delta: Score points to add
            money_delta: Coins to add
            
        Returns:
            True if update successful, False otherwise
        """
        object_id = to_object_id(user_id)
        if not object_id:
            return False
        
        increments = {
            "total_games": 1,
            "wins" if won else "losses": 1,
            "score": max(0, int(score_delta)),
            "money": max(0, int(money_delta))
        }
        result = self.users_collection.update_one({"_id": object_id}, {"$inc": increments})
        return result.modified_count > 0


# Global service instance
_auth_service = None


def get_auth_service() -> Optional[AuthService]:
    """Get the global auth service instance."""
    return _auth_service


def initialize_auth_service(db, jwt_secret: str, jwt_expiration_days: int = 7) -> AuthService:
    """Initialize the global auth service instance."""
    global _auth_service
    _auth_service = AuthService(db, jwt_secret, jwt_expiration_days)
    return _auth_service
