from unittest.mock import MagicMock, patch

import requests

from concentration.api.games import _sessions


def create(client, **body):
    res = client.post('/api/games', json=body)
    assert res.status_code == 201
    return res.get_json()


def pairs_by_id(code):
    """Server-side view of the deck: pair_id -> [card ids]."""
    pairs = {}
    for card in _sessions[code].deck:
        pairs.setdefault(card.pair_id, []).append(card.id)
    return pairs


def remote_down():
    return patch.object(requests.Session, 'request', side_effect=requests.ConnectionError('offline'))


def test_create_game(client):
    state = create(client)
    assert len(state['game_code']) == 4
    assert state['difficulty'] == 'medium'
    assert state['pairs'] == 12
    assert len(state['cards']) == 24
    assert state['status'] == 'idle'
    assert state['name'] == 'Player'
    assert all(c['content'] is None for c in state['cards'])


def test_create_with_difficulty_and_name(client):
    state = create(client, difficulty='easy', name='Alice')
    assert state['pairs'] == 8
    assert state['name'] == 'Alice'


def test_create_rejects_unknown_difficulty(client):
    res = client.post('/api/games', json={'difficulty': 'impossible'})
    assert res.status_code == 400


def test_unknown_game_is_404(client):
    assert client.get('/api/games/ZZZZ').status_code == 404
    assert client.post('/api/games/ZZZZ/flip', json={'card_id': 'p0a'}).status_code == 404


def test_flip_reveals_card(client):
    code = create(client)['game_code']
    res = client.post(f'/api/games/{code}/flip', json={'card_id': 'p0a'})
    state = res.get_json()
    assert state['applied'] is True
    assert state['status'] == 'running'
    card = next(c for c in state['cards'] if c['id'] == 'p0a')
    assert card['content']['type'] == 'glyph'
    # same card again is a no-op
    again = client.post(f'/api/games/{code}/flip', json={'card_id': 'p0a'}).get_json()
    assert again['applied'] is False
    assert again['moves'] == 0


def test_flip_validation(client):
    code = create(client)['game_code']
    assert client.post(f'/api/games/{code}/flip', json={}).status_code == 400
    res = client.post(f'/api/games/{code}/flip', json={'card_id': 'nope'})
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Unknown card'


def test_mismatch_flow(client, scheduler):
    code = create(client)['game_code']
    client.post(f'/api/games/{code}/flip', json={'card_id': 'p0a'})
    state = client.post(f'/api/games/{code}/flip', json={'card_id': 'p1a'}).get_json()
    assert state['moves'] == 1
    assert state['status'] == 'resolving'
    assert state['locked'] is True
    blocked = client.post(f'/api/games/{code}/flip', json={'card_id': 'p2a'}).get_json()
    assert blocked['applied'] is False
    scheduler.advance(0.8)
    state = client.get(f'/api/games/{code}').get_json()
    assert state['flipped'] == []
    assert state['matches'] == 0
    assert state['status'] == 'running'


def test_full_game_records_score(client, scheduler, cache_path):
    code = create(client, difficulty='easy', name='Alice')['game_code']
    rows = [{'name': 'Alice', 'seconds': 3, 'moves': 8, 'difficulty': 'easy', 'created_at': '2025-01-01T00:00:00.000Z'}]
    leaderboard = MagicMock()
    leaderboard.status_code = 200
    leaderboard.json.return_value = rows
    submitted = MagicMock()
    submitted.status_code = 201
    with patch.object(requests.Session, 'post', return_value=submitted) as post, \
            patch.object(requests.Session, 'get', return_value=leaderboard):
        for pair_id, (a, b) in sorted(pairs_by_id(code).items()):
            client.post(f'/api/games/{code}/flip', json={'card_id': a})
            client.post(f'/api/games/{code}/flip', json={'card_id': b})
            scheduler.advance(0.6)

    state = client.get(f'/api/games/{code}').get_json()
    assert state['status'] == 'completed'
    assert state['matches'] == 8
    assert state['moves'] == 8
    assert state['stars'] == 3
    assert all(c['matched'] and c['content'] for c in state['cards'])
    assert state['last_score']['moves'] == 8
    assert state['last_score']['seconds'] == state['seconds']
    assert post.call_args.kwargs['json']['name'] == 'Alice'
    assert state['leaderboard'][0]['name'] == 'Alice'
    assert client.get(f'/api/games/{code}/leaderboard').get_json() == state['leaderboard']
    # local copy kept as well
    local = client.get('/api/games/local-leaderboard').get_json()
    assert [s['name'] for s in local] == ['Alice']


def test_completed_game_ignores_flips_and_toggle(client, scheduler):
    code = create(client, difficulty='easy')['game_code']
    with remote_down():
        for pair_id, (a, b) in sorted(pairs_by_id(code).items()):
            client.post(f'/api/games/{code}/flip', json={'card_id': a})
            client.post(f'/api/games/{code}/flip', json={'card_id': b})
            scheduler.advance(0.6)
    state = client.post(f'/api/games/{code}/flip', json={'card_id': 'p0a'}).get_json()
    assert state['applied'] is False
    state = client.post(f'/api/games/{code}/toggle').get_json()
    assert state['status'] == 'completed'
    assert state['running'] is False


def test_offline_completion_uses_local_leaderboard(client, scheduler):
    code = create(client, difficulty='easy', name='Offline')['game_code']
    with remote_down():
        for pair_id, (a, b) in sorted(pairs_by_id(code).items()):
            client.post(f'/api/games/{code}/flip', json={'card_id': a})
            client.post(f'/api/games/{code}/flip', json={'card_id': b})
            scheduler.advance(0.6)
    state = client.get(f'/api/games/{code}').get_json()
    assert state['status'] == 'completed'
    assert [s['name'] for s in state['leaderboard']] == ['Offline']


def test_timer_and_toggle(client, scheduler):
    code = create(client)['game_code']
    client.post(f'/api/games/{code}/toggle')
    scheduler.advance(65)
    state = client.get(f'/api/games/{code}').get_json()
    assert state['seconds'] == 65
    assert state['time'] == '01:05'
    state = client.post(f'/api/games/{code}/toggle').get_json()
    assert state['status'] == 'idle'
    scheduler.advance(10)
    assert client.get(f'/api/games/{code}').get_json()['seconds'] == 65


def test_restart(client, scheduler):
    code = create(client)['game_code']
    client.post(f'/api/games/{code}/flip', json={'card_id': 'p0a'})
    client.post(f'/api/games/{code}/flip', json={'card_id': 'p1a'})
    scheduler.advance(3)
    state = client.post(f'/api/games/{code}/restart').get_json()
    assert state['status'] == 'idle'
    assert (state['moves'], state['seconds'], state['matches']) == (0, 0, 0)
    scheduler.advance(3)
    assert client.get(f'/api/games/{code}').get_json()['seconds'] == 0


def test_patch_name_and_difficulty(client):
    code = create(client)['game_code']
    client.post(f'/api/games/{code}/flip', json={'card_id': 'p0a'})
    state = client.patch(f'/api/games/{code}', json={'name': 'Bob', 'difficulty': 'hard'}).get_json()
    assert state['name'] == 'Bob'
    assert state['pairs'] == 18
    assert len(state['cards']) == 36
    assert state['flipped'] == []
    assert client.patch(f'/api/games/{code}', json={'difficulty': 'nightmare'}).status_code == 400


def test_focus_navigation(client):
    code = create(client, difficulty='easy')['game_code']
    state = client.post(f'/api/games/{code}/focus', json={'step': 1}).get_json()
    assert state['focused_index'] == 0
    state = client.post(f'/api/games/{code}/focus', json={'step': -1}).get_json()
    assert state['focused_index'] == 15
    state = client.post(f'/api/games/{code}/focus', json={'flip': True}).get_json()
    assert state['flipped'] == [state['cards'][15]['id']]


def test_local_leaderboard_clear(client, flask_app):
    from concentration.services.leaderboard import ScoreRecord
    flask_app.extensions['concentration.cache'].save(ScoreRecord('A', 1, 1, 'easy', '2025-01-01T00:00:00.000Z'))
    assert len(client.get('/api/games/local-leaderboard').get_json()) == 1
    assert client.delete('/api/games/local-leaderboard').get_json() == []
    assert client.get('/api/games/local-leaderboard').get_json() == []


def test_new_session_shows_cached_leaderboard(client, flask_app):
    from concentration.services.leaderboard import ScoreRecord
    flask_app.extensions['concentration.cache'].save(ScoreRecord('Cached', 9, 9, 'easy', '2025-01-01T00:00:00.000Z'))
    state = create(client)
    assert [s['name'] for s in state['leaderboard']] == ['Cached']


def test_discard_session(client, scheduler):
    code = create(client)['game_code']
    client.post(f'/api/games/{code}/toggle')
    assert client.delete(f'/api/games/{code}').status_code == 200
    assert client.get(f'/api/games/{code}').status_code == 404
    assert scheduler.pending == 0
