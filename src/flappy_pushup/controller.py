"""
controller.py: Orchestration between the control signal, the intent detector,
the engine and the ranking client.

The engine only knows its own legal transitions; the policy of when to start,
when to prompt for a name and when to return to WAITING lives here.
"""

import logging
import threading
from typing import Dict, List, Optional

from .data_models import ControlSignal, GameState, Snapshot
from .intent import MovementIntentDetector
from .personal_best import PersonalBestStore
from .physics_engine import GameEngine
from .ranking_client import RankingClient

logger = logging.getLogger(__name__)


class GameController:
    def __init__(self, engine: GameEngine,
                 ranking: Optional[RankingClient] = None,
                 detector: Optional[MovementIntentDetector] = None,
                 name_store: Optional[PersonalBestStore] = None,
                 background: bool = True):
        self.engine = engine
        self.ranking = ranking
        self.detector = detector or MovementIntentDetector()
        self.name_store = name_store
        self.background = background

        # Cleared by stop(); the frame loop checks it once per frame
        self.running = threading.Event()
        self.running.set()

        # Ranking overlay, written from worker threads
        self.lock = threading.Lock()
        self.leaderboard: List[Dict] = []
        self.percentile: Optional[int] = None
        self.rank: Optional[int] = None
        self.score_submitted = False
        self.submitting = False

        self.awaiting_name = False
        self.prompted_this_run = False
        self.run_id = 0

    @property
    def is_running(self) -> bool:
        return self.running.is_set()

    def stop(self):
        self.running.clear()

    # -------- Per frame --------

    def tick(self, signal: ControlSignal, delta_ms: float) -> Snapshot:
        intent = False
        self.engine.apply_signal(signal)
        if signal.has_pose:
            intent = self.detector.update(signal.normalized_shoulder_y)

        self.engine.update(delta_ms)
        self._handle_transitions(intent)
        return self.engine.snapshot()

    def _handle_transitions(self, intent: bool):
        state = self.engine.state

        if state is GameState.WAITING and intent:
            self.engine.start()
            self._begin_run()
        elif state is GameState.GAME_OVER:
            if self.engine.score > 0 and not self.prompted_this_run:
                self.prompted_this_run = True
                self.awaiting_name = True
            elif not self.awaiting_name and intent:
                self.engine.reset()
                self._clear_result()

    def _begin_run(self):
        with self.lock:
            self.run_id += 1
        self.prompted_this_run = False
        self.awaiting_name = False
        self._clear_result()

    def _clear_result(self):
        with self.lock:
            self.percentile = None
            self.rank = None
            self.score_submitted = False

    # -------- Name prompt --------

    def default_name(self) -> str:
        return self.name_store.load_name() if self.name_store else ""

    def submit_name(self, name: str) -> bool:
        """Submits the finished run's score. Returns False if the name is blank."""
        name = name.strip()
        if not self.awaiting_name or not name:
            return False

        self.awaiting_name = False
        if self.name_store:
            self.name_store.save_name(name)
        if self.ranking is None:
            return True

        score = self.engine.score
        with self.lock:
            run_id = self.run_id
            self.submitting = True
        self._dispatch(self._submit_worker, name, score, run_id)
        return True

    def skip_name(self):
        self.awaiting_name = False
        self.refresh_leaderboard()

    def refresh_leaderboard(self, force: bool = False):
        if self.ranking is not None:
            self._dispatch(self._refresh_worker, force)

    # -------- Workers --------

    def _dispatch(self, target, *args):
        if self.background:
            threading.Thread(target=target, args=args, daemon=True).start()
        else:
            target(*args)

    def _submit_worker(self, name: str, score: int, run_id: int):
        result = self.ranking.submit_score(name, score)
        with self.lock:
            self.submitting = False
            # A new run started or the loop stopped: the result has no consumer
            if not self.running.is_set() or run_id != self.run_id:
                logger.debug("Discarding stale submission result for run %d", run_id)
                return
            self.percentile = result.get('percentile')
            self.rank = result.get('rank')
            self.leaderboard = result.get('leaderboard') or self.leaderboard
            self.score_submitted = 'error' not in result

    def _refresh_worker(self, force: bool):
        leaderboard = self.ranking.get_leaderboard(force_refresh=force)
        with self.lock:
            if self.running.is_set():
                self.leaderboard = leaderboard
