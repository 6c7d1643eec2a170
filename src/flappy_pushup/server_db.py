"""
server_db.py: SQLite persistence for the leaderboard and the score histogram.
"""

import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator, List, Tuple

from .data_models import LeaderboardEntry
from .errors import StorageUnavailable

DB_FILE = "flappy_pushup.db"

SCHEMA = """
    CREATE TABLE IF NOT EXISTS leaderboard (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        score INTEGER NOT NULL,
        created_at TEXT NOT NULL
    );
    CREATE INDEX IF NOT EXISTS idx_leaderboard_score
        ON leaderboard(score DESC, created_at ASC);
    CREATE TABLE IF NOT EXISTS score_histogram (
        score INTEGER PRIMARY KEY,
        count INTEGER NOT NULL DEFAULT 0
    );
"""


class Database:
    """
    Handles all interaction with the SQLite database.

    Writes run inside transaction(), which holds a process-wide lock and an
    IMMEDIATE write lock on the file, so a submission's histogram bump and
    leaderboard admission commit or roll back together. Reads use read().
    """

    def __init__(self, db_file: str = DB_FILE):
        try:
            # check_same_thread=False: the web server handles requests on worker threads
            self.conn = sqlite3.connect(db_file, check_same_thread=False, isolation_level=None)
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Cannot open {db_file}: {e}") from e
        self.lock = threading.Lock()
        self.setup()

    def setup(self):
        """Creates tables if they don't exist."""
        with self.lock:
            try:
                self.conn.executescript(SCHEMA)
            except sqlite3.Error as e:
                raise StorageUnavailable(f"Schema setup failed: {e}") from e

    def close(self):
        with self.lock:
            self.conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Cursor]:
        with self.lock:
            cur = self.conn.cursor()
            try:
                cur.execute("BEGIN IMMEDIATE")
                yield cur
                cur.execute("COMMIT")
            except Exception as e:
                if self.conn.in_transaction:
                    self.conn.execute("ROLLBACK")
                if isinstance(e, sqlite3.Error):
                    raise StorageUnavailable(str(e)) from e
                raise
            finally:
                cur.close()

    @contextmanager
    def read(self) -> Iterator[sqlite3.Cursor]:
        """Autocommit reads; no write lock on the file."""
        with self.lock:
            cur = self.conn.cursor()
            try:
                yield cur
            except sqlite3.Error as e:
                raise StorageUnavailable(str(e)) from e
            finally:
                cur.close()

    # -------- Histogram --------

    def histogram_counts(self, cur: sqlite3.Cursor, score: int) -> Tuple[int, int]:
        """Returns (plays strictly below score, all plays)."""
        cur.execute("""
            SELECT
                COALESCE(SUM(count), 0),
                COALESCE(SUM(CASE WHEN score < ? THEN count ELSE 0 END), 0)
            FROM score_histogram
        """, (score,))
        total, below = cur.fetchone()
        return below, total

    def increment_bucket(self, cur: sqlite3.Cursor, score: int):
        cur.execute("""
            INSERT INTO score_histogram (score, count) VALUES (?, 1)
            ON CONFLICT(score) DO UPDATE SET count = count + 1
        """, (score,))

    def total_games(self, cur: sqlite3.Cursor) -> int:
        cur.execute("SELECT COALESCE(SUM(count), 0) FROM score_histogram")
        return cur.fetchone()[0]

    # -------- Leaderboard --------

    def admit(self, cur: sqlite3.Cursor, name: str, score: int,
              created_at: str, limit: int) -> bool:
        """
        Inserts the entry if the board has room or the score beats the
        current lowest, then evicts the lowest (newest among ties) when the
        board overflows.
        """
        cur.execute("SELECT COUNT(*), MIN(score) FROM leaderboard")
        count, lowest = cur.fetchone()
        if count >= limit and score <= lowest:
            return False

        cur.execute(
            "INSERT INTO leaderboard (name, score, created_at) VALUES (?, ?, ?)",
            (name, score, created_at))

        if count + 1 > limit:
            cur.execute("""
                DELETE FROM leaderboard WHERE id = (
                    SELECT id FROM leaderboard
                    ORDER BY score ASC, created_at DESC, id DESC
                    LIMIT 1
                )
            """)
        return True

    def rank_of(self, cur: sqlite3.Cursor, score: int) -> int:
        cur.execute("SELECT COUNT(*) + 1 FROM leaderboard WHERE score > ?", (score,))
        return cur.fetchone()[0]

    def top_score(self, cur: sqlite3.Cursor) -> int:
        cur.execute("SELECT COALESCE(MAX(score), 0) FROM leaderboard")
        return cur.fetchone()[0]

    def get_leaderboard(self, cur: sqlite3.Cursor, limit: int) -> List[LeaderboardEntry]:
        """Fetches the top entries, best score first, earlier submission first on ties."""
        cur.execute("""
            SELECT name, score, created_at
            FROM leaderboard
            ORDER BY score DESC, created_at ASC, id ASC
            LIMIT ?
        """, (limit,))
        return [LeaderboardEntry(name=n, score=s, created_at=c) for n, s, c in cur.fetchall()]
