import sqlite3
import threading

import pytest

from flappy_pushup.constants import MAX_LEADERBOARD, MAX_TRACKED_SCORE
from flappy_pushup.ranking import RankingService, clamp_score, percentile_of
from flappy_pushup.server_db import Database


def bucket(service, score):
    with service.db.read() as cur:
        cur.execute("SELECT count FROM score_histogram WHERE score=?", (score,))
        row = cur.fetchone()
        return row[0] if row else 0


def test_first_submission_is_fiftieth_percentile(service):
    result = service.submit('first', 0)
    assert result.percentile == 50


def test_percentile_counts_plays_strictly_below(service):
    for score in (1, 2, 3, 4):
        service.submit('p', score)
    # 5 plays counting this one, 2 of them below 3
    assert service.submit('q', 3).percentile == 40
    # 6 plays, 5 below 10
    assert service.submit('r', 10).percentile == 83
    # nothing below 0
    assert service.submit('s', 0).percentile == 0


def test_percentile_rounding():
    assert percentile_of(0, 0) == 50
    assert percentile_of(1, 3) == 33
    assert percentile_of(2, 3) == 67
    assert percentile_of(1, 8) == 13
    assert percentile_of(1, 40) == 3


def test_half_percentile_rounds_up(service):
    service.submit('low', 0)
    for i in range(6):
        service.submit(f'p{i}', 5)
    # 8 plays counting this one, 1 below 5: 12.5%
    assert service.submit('last', 5).percentile == 13


def test_scores_above_domain_share_top_bucket(service):
    service.submit('a', 250)
    service.submit('b', 999)
    assert bucket(service, MAX_TRACKED_SCORE) == 2
    assert clamp_score(999) == MAX_TRACKED_SCORE
    # The leaderboard keeps the true score
    assert [e.score for e in service.list()] == [999, 250]


def test_histogram_counts_plays_missing_the_board(service):
    for i in range(MAX_LEADERBOARD):
        service.submit(f'p{i}', 50)
    result = service.submit('late', 10)
    assert result.made_leaderboard is False
    assert result.rank is None
    assert bucket(service, 10) == 1
    assert service.stats().total_games == MAX_LEADERBOARD + 1


def test_101_ascending_scores_keep_top_100(service):
    for score in range(101):
        service.submit(f'p{score}', score)
    board = service.list()
    assert len(board) == MAX_LEADERBOARD
    assert [e.score for e in board] == list(range(100, 0, -1))


def test_equal_score_does_not_displace_full_board(service):
    for i in range(MAX_LEADERBOARD):
        service.submit(f'p{i}', 7)
    assert service.submit('tie', 7).made_leaderboard is False
    assert len(service.list()) == MAX_LEADERBOARD


def test_eviction_prefers_newest_among_lowest(service):
    service.submit('old-low', 1)
    for i in range(MAX_LEADERBOARD - 2):
        service.submit(f'mid{i}', 5)
    service.submit('new-low', 1)
    assert len(service.list()) == MAX_LEADERBOARD

    service.submit('winner', 9)
    names = [e.name for e in service.list()]
    assert len(names) == MAX_LEADERBOARD
    assert 'old-low' in names
    assert 'new-low' not in names
    assert names[0] == 'winner'


def test_rank_and_tie_order(service):
    service.submit('a', 10)
    service.submit('b', 20)
    result = service.submit('c', 10)
    assert result.rank == 2
    assert [e.name for e in result.leaderboard] == ['b', 'a', 'c']


def test_name_is_trimmed_and_truncated(service):
    result = service.submit('  ' + 'x' * 30 + '  ', 1)
    assert result.leaderboard[0].name == 'x' * 20


def test_integral_float_score_is_accepted(service):
    assert service.submit('f', 12.0).leaderboard[0].score == 12


def test_stats_derived_from_tables(service):
    assert service.stats().to_dict() == {'totalGames': 0, 'topScore': 0}
    service.submit('a', 150)
    stats = service.stats()
    assert stats.total_games >= 1
    assert stats.top_score == 150


def test_resubmitting_duplicates(service):
    service.submit('same', 42)
    service.submit('same', 42)
    board = service.list()
    assert [(e.name, e.score) for e in board] == [('same', 42), ('same', 42)]
    assert bucket(service, 42) == 2


def test_concurrent_submissions_stay_bounded(service):
    for i in range(MAX_LEADERBOARD):
        service.submit(f'seed{i}', 10)

    errors = []

    def worker(n):
        try:
            for j in range(10):
                service.submit(f't{n}-{j}', 11 + j)
        except Exception as e:  # pragma: no cover - surfaced by the assert below
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors
    assert len(service.list()) == MAX_LEADERBOARD
    assert service.stats().total_games == MAX_LEADERBOARD + 80


def test_failed_submission_rolls_back(service, monkeypatch):
    from flappy_pushup.errors import StorageUnavailable

    def broken_admit(cur, *args):
        cur.execute("SELECT * FROM missing_table")

    monkeypatch.setattr(service.db, 'admit', broken_admit)
    with pytest.raises(StorageUnavailable):
        service.submit('x', 5)
    assert bucket(service, 5) == 0


def test_reads_do_not_wait_for_writers(tmp_path):
    path = str(tmp_path / 'ranking.db')
    service = RankingService(Database(path))
    service.submit('a', 9)

    writer = sqlite3.connect(path, isolation_level=None, timeout=0.1)
    writer.execute("BEGIN IMMEDIATE")
    try:
        assert [e.score for e in service.list()] == [9]
        assert service.stats().top_score == 9
    finally:
        writer.execute("ROLLBACK")
        writer.close()
        service.db.close()
