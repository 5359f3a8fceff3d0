def _connected(sio_client):
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')
    # Flush any initial events
    sio_client.get_received('/ws')


def test_socket_connect_and_ping(sio_client):
    _connected(sio_client)
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'pong' and pkt['args'][0] == {'n': 1} for pkt in received)


def test_watch_leaderboard_receives_new_scores(sio_client, client):
    _connected(sio_client)
    sio_client.emit('watch_leaderboard', {}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'watching' and pkt['args'][0]['room'] == 'leaderboard' for pkt in received)

    res = client.post('/api/scores', json={'playerName': 'Alice', 'score': 40, 'gameMode': 'blue'})
    assert res.status_code == 200

    events = [pkt for pkt in sio_client.get_received('/ws') if pkt['name'] == 'score_saved']
    assert len(events) == 1
    assert events[0]['args'][0] == res.get_json()


def test_mode_watchers_only_see_their_mode(sio_client, client):
    _connected(sio_client)
    sio_client.emit('watch_leaderboard', {'gameMode': 'orange'}, namespace='/ws')
    sio_client.get_received('/ws')

    client.post('/api/scores', json={'playerName': 'Alice', 'score': 40, 'gameMode': 'blue'})
    assert not [p for p in sio_client.get_received('/ws') if p['name'] == 'score_saved']

    client.post('/api/scores', json={'playerName': 'Bob', 'score': 60, 'gameMode': 'orange'})
    events = [p for p in sio_client.get_received('/ws') if p['name'] == 'score_saved']
    assert [e['args'][0]['playerName'] for e in events] == ['Bob']


def test_watch_unknown_mode_reports_error(sio_client):
    _connected(sio_client)
    sio_client.emit('watch_leaderboard', {'gameMode': 'green'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'error' for pkt in received)


def test_unwatch_stops_updates(sio_client, client):
    _connected(sio_client)
    sio_client.emit('watch_leaderboard', {}, namespace='/ws')
    sio_client.emit('unwatch_leaderboard', {}, namespace='/ws')
    sio_client.get_received('/ws')
    client.post('/api/scores', json={'playerName': 'Alice', 'score': 40, 'gameMode': 'blue'})
    assert not [p for p in sio_client.get_received('/ws') if p['name'] == 'score_saved']
