"""
physics_engine.py: The single-player simulation engine.

Owns the state machine (WAITING -> PLAYING -> GAME_OVER), advances pipes,
scores passes, scales difficulty with the score and persists the personal best.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from .constants import (
    SCREEN_WIDTH, SCREEN_HEIGHT, AVATAR_X_RATIO, BASE_PIPE_GAP,
    MAX_GAP_SCREEN_RATIO, GROUND_HEIGHT, CEILING_HEIGHT,
    PIPE_SPAWN_INTERVAL_MS, MIN_PIPE_HEIGHT
)
from .data_models import (
    AvatarSnapshot, ControlSignal, GameSession, GameState, Obstacle,
    ObstacleSnapshot, Snapshot
)
from .errors import StorageUnavailable
from .personal_best import PersonalBestStore
from .physics_core import PhysicsCore

logger = logging.getLogger(__name__)


@dataclass
class GameEngine(PhysicsCore):
    """
    Steps one GameSession forward once per rendered frame.
    Inherits the formulas and collision predicate from PhysicsCore.
    """
    session: GameSession = field(default_factory=GameSession)
    width: float = SCREEN_WIDTH
    height: float = SCREEN_HEIGHT
    best_store: Optional[PersonalBestStore] = None
    rng: random.Random = field(default_factory=random.Random)
    base_gap: float = BASE_PIPE_GAP
    ground_height: float = GROUND_HEIGHT
    ceiling_height: float = CEILING_HEIGHT
    spawn_interval_ms: float = PIPE_SPAWN_INTERVAL_MS
    min_pipe_height: float = MIN_PIPE_HEIGHT

    def __post_init__(self):
        avatar = self.session.avatar
        avatar.x = self.width * AVATAR_X_RATIO
        avatar.y = avatar.target_y = self.height / 2
        self.session.personal_best = self._load_personal_best()

    # -------- Geometry --------

    @property
    def playable_height(self) -> float:
        return self.height - self.ground_height - self.ceiling_height

    @property
    def floor(self) -> float:
        return self.height - self.ground_height

    @property
    def state(self) -> GameState:
        return self.session.run.state

    @property
    def score(self) -> int:
        return self.session.run.score

    # -------- Input --------

    def set_target_from_signal(self, normalized_y: float):
        avatar = self.session.avatar
        avatar.target_y = self.target_from_signal(
            normalized_y, self.ceiling_height, self.playable_height, avatar.radius)

    def apply_signal(self, signal: ControlSignal):
        """Without a pose the avatar holds its last smoothed position."""
        if signal.has_pose:
            self.set_target_from_signal(signal.normalized_shoulder_y)
        else:
            self.session.avatar.target_y = self.session.avatar.y

    # -------- Simulation --------

    def update(self, delta_ms: float):
        """
        Advances one tick. The avatar always tracks its target; pipes,
        scoring, collisions and spawning only run while PLAYING.
        """
        session = self.session
        avatar = session.avatar
        avatar.y = self.smooth_toward(avatar.y, avatar.target_y)

        if session.run.state is not GameState.PLAYING:
            return

        # Speed is fixed for the whole tick, from the score at its start
        self._step_obstacles(self.speed_for(session.run.score))

        if self.check_collision(avatar, session.obstacles, self.ceiling_height, self.floor):
            self._game_over()
            return

        self._tick_spawner(delta_ms)

    def _step_obstacles(self, speed: float):
        session = self.session
        avatar_x = session.avatar.x

        for obstacle in session.obstacles:
            obstacle.x -= speed
            if not obstacle.passed and obstacle.x + self.PIPE_WIDTH < avatar_x:
                obstacle.passed = True
                session.run.score += 1

        session.obstacles = [o for o in session.obstacles if o.x + self.PIPE_WIDTH >= 0]

    def _tick_spawner(self, delta_ms: float):
        session = self.session
        session.spawn_timer_ms += delta_ms
        if session.spawn_timer_ms >= self.spawn_interval_ms:
            session.spawn_timer_ms = 0.0
            self._spawn_obstacle()

    def _spawn_obstacle(self):
        """Generates a new pipe pair at the right edge."""
        gap = self.gap_for(self.session.run.score, self.base_gap)
        free_span = max(0.0, self.playable_height - gap - self.min_pipe_height * 2)
        gap_top = self.ceiling_height + self.min_pipe_height + self.rng.random() * free_span
        self.session.obstacles.append(
            Obstacle(x=float(self.width), gap_top=gap_top, gap_bottom=gap_top + gap))

    # -------- State transitions --------

    def _clear_run(self):
        session = self.session
        session.run.score = 0
        session.obstacles = []
        session.spawn_timer_ms = 0.0

    def start(self) -> bool:
        """Begins a run from WAITING (or straight from GAME_OVER)."""
        if self.state is GameState.PLAYING:
            return False
        self._clear_run()
        self.session.run.state = GameState.PLAYING
        logger.debug("Run started")
        return True

    def reset(self) -> bool:
        """Returns to WAITING after a finished run."""
        if self.state is not GameState.GAME_OVER:
            return False
        self._clear_run()
        self.session.run.state = GameState.WAITING
        return True

    def _game_over(self):
        session = self.session
        session.run.state = GameState.GAME_OVER
        logger.info("Game over with score %d", session.run.score)

        if session.run.score > session.personal_best:
            session.personal_best = session.run.score
            self._save_personal_best()

    def resize(self, width: float, height: float):
        """
        Re-anchors the avatar and the base gap. Pipes already on screen keep
        their absolute pixel positions.
        """
        self.width = width
        self.height = height
        self.session.avatar.x = width * AVATAR_X_RATIO
        self.base_gap = min(BASE_PIPE_GAP, height * MAX_GAP_SCREEN_RATIO)

    # -------- Personal best --------

    def _load_personal_best(self) -> int:
        if self.best_store is None:
            return 0
        try:
            return self.best_store.load()
        except StorageUnavailable as e:
            logger.warning("Personal best unavailable, using 0: %s", e)
            return 0

    def _save_personal_best(self):
        if self.best_store is None:
            return
        try:
            self.best_store.save(self.session.personal_best)
        except StorageUnavailable as e:
            logger.warning("Could not persist personal best: %s", e)

    # -------- Rendering contract --------

    def snapshot(self) -> Snapshot:
        session = self.session
        avatar = session.avatar
        return Snapshot(
            state=session.run.state,
            score=session.run.score,
            personal_best=session.personal_best,
            avatar=AvatarSnapshot(avatar.x, avatar.y, avatar.radius, avatar.target_y),
            obstacles=tuple(
                ObstacleSnapshot(o.x, o.gap_top, o.gap_bottom, o.passed)
                for o in session.obstacles
            ),
            difficulty=self.difficulty_for(session.run.score, self.base_gap),
            width=self.width,
            height=self.height,
            pipe_width=self.PIPE_WIDTH,
            ground_height=self.ground_height,
            ceiling_height=self.ceiling_height,
        )
