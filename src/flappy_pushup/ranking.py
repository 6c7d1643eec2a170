"""
ranking.py: The ranking service.

A capped leaderboard for the best plays plus a fixed-domain histogram of all
plays. The histogram never holds more than MAX_TRACKED_SCORE + 1 rows, so the
percentile stays cheap however many scores are submitted; scores above the
domain all land in the top bucket.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List

from .constants import (
    MAX_LEADERBOARD, MAX_TRACKED_SCORE, MAX_NAME_LENGTH, FIRST_PLAYER_PERCENTILE
)
from .data_models import LeaderboardEntry, Stats, SubmitResult
from .errors import ValidationError
from .server_db import Database

logger = logging.getLogger(__name__)


def clean_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Name is required")
    return name.strip()[:MAX_NAME_LENGTH]


def clean_score(score: Any) -> int:
    # bool is an int subclass; integral floats arrive from JSON clients as e.g. 12.0
    if isinstance(score, bool):
        raise ValidationError("Valid score is required")
    if isinstance(score, float) and score.is_integer():
        score = int(score)
    if not isinstance(score, int) or score < 0:
        raise ValidationError("Valid score is required")
    return score


def clamp_score(score: int) -> int:
    return max(0, min(score, MAX_TRACKED_SCORE))


def percentile_of(below: int, total: int) -> int:
    """Share of plays strictly below, 0-100, halves rounded up."""
    if total <= 0:
        return FIRST_PLAYER_PERCENTILE
    return (200 * below + total) // (2 * total)


def timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f")


class RankingService:
    """Request handlers over the leaderboard and histogram tables."""

    def __init__(self, db: Database, max_entries: int = MAX_LEADERBOARD):
        self.db = db
        self.max_entries = max_entries

    def submit(self, name: Any, score: Any) -> SubmitResult:
        name = clean_name(name)
        score = clean_score(score)
        bucket = clamp_score(score)

        with self.db.transaction() as cur:
            self.db.increment_bucket(cur, bucket)
            below, total = self.db.histogram_counts(cur, bucket)
            made = self.db.admit(cur, name, score, timestamp(), self.max_entries)
            rank = self.db.rank_of(cur, score) if made else None
            leaderboard = self.db.get_leaderboard(cur, self.max_entries)

        # The total includes this play; a lone play is the first one ever
        percentile = FIRST_PLAYER_PERCENTILE if total == 1 else percentile_of(below, total)
        logger.info("Score %d from %r: percentile=%d rank=%s", score, name, percentile, rank)
        return SubmitResult(
            made_leaderboard=made,
            percentile=percentile,
            rank=rank,
            leaderboard=leaderboard,
        )

    def list(self) -> List[LeaderboardEntry]:
        with self.db.read() as cur:
            return self.db.get_leaderboard(cur, self.max_entries)

    def stats(self) -> Stats:
        with self.db.read() as cur:
            return Stats(total_games=self.db.total_games(cur), top_score=self.db.top_score(cur))
