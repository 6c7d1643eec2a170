"""
physics_core.py: The shared, deterministic formulas and collision logic.
"""

from typing import Iterable

from .constants import (
    AVATAR_SMOOTHING, BASE_PIPE_SPEED, SPEED_GAIN_PER_POINT,
    MIN_PIPE_GAP, GAP_SHRINK_PER_POINT, PIPE_WIDTH
)
from .data_models import Avatar, Difficulty, Obstacle


class PhysicsCore:
    """
    Pure functions of geometry and score used by the simulation engine.
    Nothing here touches session state.
    """

    SMOOTHING = AVATAR_SMOOTHING
    PIPE_WIDTH = PIPE_WIDTH

    def smooth_toward(self, y: float, target_y: float) -> float:
        """Moves y a fixed fraction of the way to target_y."""
        return y + (target_y - y) * self.SMOOTHING

    def target_from_signal(self, normalized_y: float, ceiling: float,
                           playable_height: float, radius: float) -> float:
        """
        Maps the control value onto the playable band. Padding of two radii on
        both ends keeps the raw target clear of the ceiling and the ground.
        """
        normalized_y = max(0.0, min(1.0, normalized_y))
        padding = radius * 2
        return ceiling + padding + normalized_y * (playable_height - padding * 2)

    def speed_for(self, score: int) -> float:
        return BASE_PIPE_SPEED + score * SPEED_GAIN_PER_POINT

    def gap_for(self, score: int, base_gap: float) -> float:
        return max(MIN_PIPE_GAP, base_gap - score * GAP_SHRINK_PER_POINT)

    def difficulty_for(self, score: int, base_gap: float) -> Difficulty:
        return Difficulty(speed=self.speed_for(score), gap=self.gap_for(score, base_gap))

    def hits_bounds(self, avatar: Avatar, ceiling: float, floor: float) -> bool:
        return avatar.y - avatar.radius < ceiling or avatar.y + avatar.radius > floor

    def hits_obstacle(self, avatar: Avatar, obstacle: Obstacle) -> bool:
        """True when the circle's bounding box leaves the gap inside the pipe columns."""
        if avatar.x + avatar.radius > obstacle.x and \
                avatar.x - avatar.radius < obstacle.x + self.PIPE_WIDTH:
            if avatar.y - avatar.radius < obstacle.gap_top or \
                    avatar.y + avatar.radius > obstacle.gap_bottom:
                return True
        return False

    def check_collision(self, avatar: Avatar, obstacles: Iterable[Obstacle],
                        ceiling: float, floor: float) -> bool:
        """Checks for collisions with floor, ceiling, or pipes."""
        if self.hits_bounds(avatar, ceiling, floor):
            return True

        for obstacle in obstacles:
            if self.hits_obstacle(avatar, obstacle):
                return True

        return False
