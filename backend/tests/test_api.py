def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_session_state_starts_empty(client):
    res = client.get('/api/session')
    assert res.status_code == 200
    state = res.get_json()
    assert state['players'] == []
    assert state['collectible'] is None
    assert state['win_score'] == 3


def test_session_state_reflects_joined_players(client, sio_client):
    sio_client.emit('join', {'x': 120, 'y': 130, 'spriteState': 'idle'}, namespace='/ws')
    state = client.get('/api/session').get_json()
    assert len(state['players']) == 1
    player = state['players'][0]
    assert (player['x'], player['y'], player['score']) == (120, 130, 0)
    assert player['spriteState'] == 'idle'
    assert state['collectible']['value'] == 1
    assert set(state['collectible']) == {'id', 'x', 'y', 'value', 'spriteSrcIndex'}
