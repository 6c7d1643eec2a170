"""
data_models.py: Data structures for the game session and the ranking service.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .constants import AVATAR_RADIUS, SCREEN_HEIGHT, SCREEN_WIDTH, AVATAR_X_RATIO


class GameState(str, Enum):
    WAITING = "waiting"
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass
class Avatar:
    """The player-controlled circle. Only `target_y` may be set from input."""
    x: float = SCREEN_WIDTH * AVATAR_X_RATIO
    y: float = SCREEN_HEIGHT / 2
    radius: float = AVATAR_RADIUS
    target_y: float = SCREEN_HEIGHT / 2


@dataclass
class Obstacle:
    """A pipe pair with a passable band between gap_top and gap_bottom."""
    x: float
    gap_top: float
    gap_bottom: float
    passed: bool = False


@dataclass
class Run:
    state: GameState = GameState.WAITING
    score: int = 0


@dataclass
class GameSession:
    """Everything one player owns: one avatar, one run, one obstacle sequence."""
    avatar: Avatar = field(default_factory=Avatar)
    run: Run = field(default_factory=Run)
    obstacles: List[Obstacle] = field(default_factory=list)
    personal_best: int = 0
    spawn_timer_ms: float = 0.0


@dataclass(frozen=True)
class Difficulty:
    speed: float
    gap: float


@dataclass(frozen=True)
class AvatarSnapshot:
    x: float
    y: float
    radius: float
    target_y: float


@dataclass(frozen=True)
class ObstacleSnapshot:
    x: float
    gap_top: float
    gap_bottom: float
    passed: bool


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of the engine handed to the presentation layer."""
    state: GameState
    score: int
    personal_best: int
    avatar: AvatarSnapshot
    obstacles: Tuple[ObstacleSnapshot, ...]
    difficulty: Difficulty
    width: float
    height: float
    pipe_width: float
    ground_height: float
    ceiling_height: float


@dataclass(frozen=True)
class ControlSignal:
    """One frame of control input: 0 = shoulders up, 1 = shoulders down."""
    normalized_shoulder_y: float = 0.5
    has_pose: bool = False


@dataclass
class LeaderboardEntry:
    name: str
    score: int
    created_at: str

    def to_dict(self):
        return {
            "name": self.name,
            "score": self.score,
            "created_at": self.created_at,
        }


@dataclass
class SubmitResult:
    made_leaderboard: bool
    percentile: int
    rank: Optional[int]
    leaderboard: List[LeaderboardEntry]

    def to_dict(self):
        return {
            "madeLeaderboard": self.made_leaderboard,
            "percentile": self.percentile,
            "rank": self.rank,
            "leaderboard": [entry.to_dict() for entry in self.leaderboard],
        }


@dataclass
class Stats:
    total_games: int
    top_score: int

    def to_dict(self):
        return {"totalGames": self.total_games, "topScore": self.top_score}
