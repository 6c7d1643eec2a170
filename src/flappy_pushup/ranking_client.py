"""
ranking_client.py: HTTP client for the ranking server with a short-lived
leaderboard cache. The leaderboard is decoration; nothing here raises into
the game loop.
"""

import logging
import threading
import time
from typing import Callable, Dict, List, Optional

import requests

from .constants import RANKING_CACHE_TTL_SEC

logger = logging.getLogger(__name__)


class RankingClient:
    def __init__(self, base_url: str, timeout: float = 5.0,
                 cache_ttl: float = RANKING_CACHE_TTL_SEC,
                 session: Optional[requests.Session] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self.session = session or requests.Session()
        self.clock = clock

        self.cached_leaderboard: Optional[List[Dict]] = None
        self.last_fetch = 0.0
        self.cache_lock = threading.Lock()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _store(self, leaderboard: List[Dict]):
        with self.cache_lock:
            self.cached_leaderboard = leaderboard
            self.last_fetch = self.clock()

    def _cached(self) -> List[Dict]:
        with self.cache_lock:
            return list(self.cached_leaderboard or [])

    def get_leaderboard(self, force_refresh: bool = False) -> List[Dict]:
        """Returns [{name, score, created_at}], served from cache within the TTL."""
        with self.cache_lock:
            fresh = (self.cached_leaderboard is not None
                     and self.clock() - self.last_fetch < self.cache_ttl)
            if fresh and not force_refresh:
                return list(self.cached_leaderboard)

        try:
            response = self.session.get(self._url('/api/leaderboard'), timeout=self.timeout)
            response.raise_for_status()
            leaderboard = response.json().get('leaderboard') or []
        except (requests.RequestException, ValueError) as e:
            logger.warning("Leaderboard fetch error: %s", e)
            return self._cached()

        self._store(leaderboard)
        return list(leaderboard)

    def submit_score(self, name: str, score: int) -> Dict:
        """
        Posts one score. Never retried here: the server is not idempotent, so
        a repeat after an ambiguous failure would count the play twice.
        """
        try:
            response = self.session.post(
                self._url('/api/score'), json={'name': name, 'score': score},
                timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Score submit error: %s", e)
            return {
                'madeLeaderboard': False,
                'percentile': None,
                'rank': None,
                'leaderboard': self._cached(),
                'error': str(e),
            }

        if data.get('leaderboard') is not None:
            self._store(data['leaderboard'])
        return data

    def get_stats(self) -> Dict:
        try:
            response = self.session.get(self._url('/api/stats'), timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Stats fetch error: %s", e)
            return {'totalGames': 0, 'topScore': 0}

    def is_available(self) -> bool:
        try:
            response = self.session.get(self._url('/api/health'), timeout=self.timeout)
        except requests.RequestException:
            return False
        return response.ok
