"""
Leveling & Achievement Engine

Levels and badges are derived from a player's cumulative statistics every
time they are needed; nothing here is stored.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple, Union

from ..config.game_settings import LEVEL_BAND_SIZE
from ..models.user import PlayerStats

StatsLike = Union[PlayerStats, Mapping[str, Any], None]


def _coerce_stats(stats: StatsLike) -> PlayerStats:
    if isinstance(stats, PlayerStats):
        return stats
    return PlayerStats.from_record(stats)


def _coerce_score(score) -> int:
    try:
        return max(0, int(score or 0))
    except (TypeError, ValueError):
        return 0


def level(score) -> int:
    """Current level for a score; one level per 500-point band."""
    return _coerce_score(score) // LEVEL_BAND_SIZE + 1


def level_progress(score) -> float:
    """Percentage through the current band, in [0, 100)."""
    score = _coerce_score(score)
    band_start = (level(score) - 1) * LEVEL_BAND_SIZE
    return (score - band_start) / LEVEL_BAND_SIZE * 100


def next_level_score(score) -> int:
    """Score at which the next level begins."""
    return level(score) * LEVEL_BAND_SIZE


@dataclass(frozen=True)
class Achievement:
    """A badge unlocked once a stats field reaches a threshold."""
    id: str
    label: str
    icon: str
    field: str
    threshold: int

    def is_unlocked(self, stats: PlayerStats) -> bool:
        return getattr(stats, self.field, 0) >= self.threshold

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "icon": self.icon,
            "field": self.field,
            "threshold": self.threshold,
        }


ACHIEVEMENTS: Tuple[Achievement, ...] = (
    Achievement("first_win", "First Victory", "🏆", "wins", 1),
    Achievement("ten_wins", "Veteran", "⚔️", "wins", 10),
    Achievement("daily_1", "Daily Warrior", "📅", "total_games", 1),
    Achievement("score_500", "Score Hunter", "💰", "score", 500),
    Achievement("score_2000", "Elite Player", "👑", "score", 2000),
    Achievement("games_50", "Dedicated", "🎮", "total_games", 50),
)


def unlocked_achievements(stats: StatsLike,
                          catalog: Tuple[Achievement, ...] = ACHIEVEMENTS) -> List[Achievement]:
    """Achievements whose predicate holds for the stats, in catalog order."""
    snapshot = _coerce_stats(stats)
    return [achievement for achievement in catalog if achievement.is_unlocked(snapshot)]


def player_progress(stats: StatsLike) -> Dict[str, Any]:
    """
    Build the level and badge payload rendered on profile pages.

    Returns:
        dict with level, level_progress (percent), next_level_score and
        the full catalog, each entry flagged as unlocked or not
    """
    snapshot = _coerce_stats(stats)
    unlocked = {achievement.id for achievement in unlocked_achievements(snapshot)}

    return {
        "level": level(snapshot.score),
        "level_progress": round(level_progress(snapshot.score), 2),
        "next_level_score": next_level_score(snapshot.score),
        "achievements": [
            {**achievement.to_dict(), "unlocked": achievement.id in unlocked}
            for achievement in ACHIEVEMENTS
        ],
    }
