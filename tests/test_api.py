"""
tests/test_api.py - Tests for the /api/game blueprint.
"""


def start(client):
    response = client.post('/api/game/start')
    assert response.status_code == 201
    return response.get_json()


class TestGameApi:
    def test_start(self, client):
        data = start(client)
        assert isinstance(data['session_id'], int)
        save = data['game_state']['save']
        assert save['version'] == 2
        assert save['stageId'] == 'lab'
        assert save['matter'] == '1000'

    def test_state(self, client):
        session_id = start(client)['session_id']
        response = client.get(f'/api/game/state/{session_id}')
        assert response.status_code == 200
        assert response.get_json()['game_state']['save']['clips'] == '0'

    def test_action_persists(self, client):
        session_id = start(client)['session_id']
        response = client.post('/api/game/action', json={
            'session_id': session_id,
            'action_type': 'click_make',
        })
        assert response.status_code == 200
        assert response.get_json()['game_state']['save']['clips'] == '1'

        state = client.get(f'/api/game/state/{session_id}').get_json()['game_state']
        assert state['save']['clips'] == '1'
        assert state['save']['wire'] == '0'

    def test_unknown_action(self, client):
        session_id = start(client)['session_id']
        response = client.post('/api/game/action', json={
            'session_id': session_id,
            'action_type': 'launch_rocket',
        })
        assert response.status_code == 400
        assert 'error' in response.get_json()

    def test_set_allocation_axis(self, client):
        session_id = start(client)['session_id']
        client.post('/api/game/action', json={
            'session_id': session_id,
            'action_type': 'set_allocation',
            'action_data': {'allocation': {'replicate': 33, 'harvest': 34, 'manufacture': 33}},
        })
        response = client.post('/api/game/action', json={
            'session_id': session_id,
            'action_type': 'set_allocation',
            'action_data': {'axis': 'harvest', 'value': 80},
        })
        allocation = response.get_json()['game_state']['save']['allocation']
        assert allocation == {'replicate': 10, 'harvest': 80, 'manufacture': 10}

    def test_set_allocation_bad_axis(self, client):
        session_id = start(client)['session_id']
        response = client.post('/api/game/action', json={
            'session_id': session_id,
            'action_type': 'set_allocation',
            'action_data': {'axis': 'mine', 'value': 10},
        })
        assert response.status_code == 400

    def test_tick_is_capped(self, client):
        session_id = start(client)['session_id']
        response = client.post('/api/game/tick', json={'session_id': session_id, 'dt': 5})
        assert response.status_code == 200
        assert response.get_json()['game_state']['save']['matter'] == '999.7'

    def test_tick_action_is_capped(self, client):
        session_id = start(client)['session_id']
        response = client.post('/api/game/action', json={
            'session_id': session_id,
            'action_type': 'tick',
            'action_data': {'dt': 100},
        })
        assert response.status_code == 200
        assert response.get_json()['game_state']['save']['matter'] == '999.7'

    def test_tick_requires_number(self, client):
        session_id = start(client)['session_id']
        response = client.post('/api/game/tick', json={'session_id': session_id, 'dt': 'soon'})
        assert response.status_code == 400

    def test_save(self, client):
        session_id = start(client)['session_id']
        response = client.post('/api/game/save', json={'session_id': session_id})
        assert response.get_json()['success'] is True

    def test_reset(self, client):
        session_id = start(client)['session_id']
        client.post('/api/game/action', json={'session_id': session_id, 'action_type': 'click_make'})

        response = client.post('/api/game/reset', json={'session_id': session_id})
        assert response.get_json()['game_state']['save']['clips'] == '0'

        state = client.get(f'/api/game/state/{session_id}').get_json()['game_state']
        assert state['save']['clips'] == '0'

    def test_stages(self, client):
        stages = client.get('/api/game/stages').get_json()['stages']
        assert [stage['id'] for stage in stages] == ['lab', 'planetary', 'space', 'universal']

    def test_missing_session(self, client):
        response = client.get('/api/game/state/9999')
        assert response.status_code == 404
        assert response.get_json() == {'error': 'Not found'}

    def test_missing_session_id(self, client):
        response = client.post('/api/game/tick', json={'dt': 1})
        assert response.status_code == 400
