def test_health(client):
    res = client.get('/api/health')
    assert res.status_code == 200
    assert res.get_json() == {'status': 'ok'}


def test_empty_leaderboard_and_stats(client):
    res = client.get('/api/leaderboard')
    assert res.status_code == 200
    assert res.get_json() == {'leaderboard': []}

    res = client.get('/api/stats')
    assert res.get_json() == {'totalGames': 0, 'topScore': 0}


def test_submit_score_shape(client):
    res = client.post('/api/score', json={'name': '  Alice  ', 'score': 12})
    assert res.status_code == 200
    data = res.get_json()
    assert data['madeLeaderboard'] is True
    assert data['percentile'] == 50
    assert data['rank'] == 1
    assert len(data['leaderboard']) == 1
    entry = data['leaderboard'][0]
    assert entry['name'] == 'Alice'
    assert entry['score'] == 12
    assert 'created_at' in entry


def test_stats_after_submission(client):
    client.post('/api/score', json={'name': 'Bob', 'score': 150})
    stats = client.get('/api/stats').get_json()
    assert stats['totalGames'] >= 1
    assert stats['topScore'] == 150


def test_leaderboard_is_ordered(client):
    for name, score in [('a', 3), ('b', 9), ('c', 5)]:
        client.post('/api/score', json={'name': name, 'score': score})
    board = client.get('/api/leaderboard').get_json()['leaderboard']
    assert [e['score'] for e in board] == [9, 5, 3]


def test_invalid_inputs_are_400(client):
    bad_bodies = [
        {'name': '', 'score': 1},
        {'name': '   ', 'score': 1},
        {'name': 'x', 'score': -1},
        {'name': 'x', 'score': 1.5},
        {'name': 'x', 'score': '3'},
        {'name': 'x', 'score': True},
        {'score': 3},
        {'name': 'x'},
    ]
    for body in bad_bodies:
        res = client.post('/api/score', json=body)
        assert res.status_code == 400, body
        assert 'error' in res.get_json()

    res = client.post('/api/score', data='not json', content_type='application/json')
    assert res.status_code == 400

    # Nothing was counted
    assert client.get('/api/stats').get_json()['totalGames'] == 0


def test_unknown_route_is_404_json(client):
    res = client.get('/api/nope')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Not found'}


def test_cors_headers(client):
    res = client.get('/api/leaderboard', headers={'Origin': 'http://example.com'})
    assert res.headers.get('Access-Control-Allow-Origin') == '*'

    res = client.options('/api/score', headers={
        'Origin': 'http://example.com',
        'Access-Control-Request-Method': 'POST',
        'Access-Control-Request-Headers': 'Content-Type',
    })
    assert res.status_code == 200
    assert res.headers.get('Access-Control-Allow-Origin') == '*'


def test_storage_failure_is_5xx(flask_app, client, monkeypatch):
    from flappy_pushup.errors import StorageUnavailable

    def broken(*args, **kwargs):
        raise StorageUnavailable('disk gone')

    monkeypatch.setattr(flask_app.extensions['ranking'], 'stats', broken)
    res = client.get('/api/stats')
    assert res.status_code >= 500
    assert 'error' in res.get_json()
