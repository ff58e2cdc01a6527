"""
API tests through Flask's test client against a scratch SQLite database
"""

MANUAL_WORKOUT = {
    'name': 'Push Day',
    'focusArea': 'upper body',
    'exercises': [{'name': 'Bench Press', 'sets': 3, 'reps': '5', 'category': 'upper body'}],
}

def create(client, payload=None):
    response = client.post('/api/workouts', json=payload or MANUAL_WORKOUT)
    assert response.status_code == 201
    return response.get_json()['workout']

def test_health(client):
    data = client.get('/api/health').get_json()
    assert data['status'] == 'ok'
    assert data['database'] is True
    assert data['ai_enabled'] is False

def test_auth_flow(client):
    assert client.get('/api/workouts').status_code == 401
    assert client.post('/api/register', json={'username': 'ab', 'password': 'secret123'}).status_code == 400
    bad_chars = client.post('/api/register', json={'username': 'lift er!', 'password': 'secret123'})
    assert bad_chars.status_code == 400
    assert 'already exists' not in bad_chars.get_json()['error']
    too_long = client.post('/api/register', json={'username': 'x' * 51, 'password': 'secret123'})
    assert too_long.get_json()['error'] == 'Username must be at most 50 characters'
    assert client.post('/api/register', json={'username': 'lifter', 'password': 'secret123'}).status_code == 200
    assert client.post('/api/register', json={'username': 'lifter', 'password': 'secret123'}).status_code == 400
    assert client.get('/api/current-user').get_json()['username'] == 'lifter'

    client.post('/api/logout')
    assert client.get('/api/current-user').status_code == 401
    assert client.post('/api/login', json={'username': 'lifter', 'password': 'wrong-pass'}).status_code == 401
    assert client.post('/api/login', json={'username': 'lifter', 'password': 'secret123'}).status_code == 200
    assert client.get('/api/workouts').status_code == 200

def test_create_and_list(auth_client):
    saved = create(auth_client)
    assert saved['type'] == 'manual'
    workouts = auth_client.get('/api/workouts').get_json()['workouts']
    assert [w['id'] for w in workouts] == [saved['id']]

def test_invalid_manual_workout_is_not_stored(auth_client):
    response = auth_client.post('/api/workouts', json={'name': '', 'exercises': [{'name': 'Bench', 'reps': '5'}]})
    assert response.status_code == 400
    response = auth_client.post('/api/workouts', json={'name': 'Nothing', 'exercises': [{'name': 'Bench'}]})
    assert response.status_code == 400
    assert auth_client.get('/api/workouts').get_json()['workouts'] == []

def test_save_a_suggestion(auth_client):
    suggestion = auth_client.post('/api/suggestions', json={'mode': 'quick'}).get_json()['workouts'][0]
    saved = create(auth_client, {'workout': suggestion})
    assert saved['type'] == 'template'
    assert saved['exercises'] == suggestion['exercises']

def test_get_update_delete(auth_client):
    saved = create(auth_client)
    url = f"/api/workouts/{saved['id']}"
    assert auth_client.get(url).get_json()['workout']['name'] == 'Push Day'

    response = auth_client.put(url, json={'notes': 'bench felt heavy'})
    assert response.status_code == 200
    assert response.get_json()['workout']['notes'] == 'bench felt heavy'
    assert auth_client.put(url, json={'name': '  '}).status_code == 400

    assert auth_client.delete(url).status_code == 200
    assert auth_client.get(url).status_code == 404
    assert auth_client.delete(url).status_code == 200
    assert auth_client.put(url, json={'notes': 'x'}).status_code == 404

def test_update_cannot_remove_every_exercise(auth_client):
    saved = create(auth_client)
    url = f"/api/workouts/{saved['id']}"
    assert auth_client.put(url, json={'exercises': []}).status_code == 400
    assert auth_client.put(url, json={'exercises': [{'reps': '5'}], 'wod': None}).status_code == 400
    assert auth_client.get(url).get_json()['workout']['exercises'] == MANUAL_WORKOUT['exercises']

def test_repeat(auth_client):
    saved = create(auth_client)
    response = auth_client.post(f"/api/workouts/{saved['id']}/repeat")
    assert response.status_code == 201
    copy = response.get_json()['workout']
    assert copy['name'] == 'Push Day (Repeated)'
    assert copy['id'] != saved['id']
    assert auth_client.post('/api/workouts/12345/repeat').status_code == 404

def test_record_performance(auth_client):
    saved = create(auth_client)
    url = f"/api/workouts/{saved['id']}/performance"
    response = auth_client.post(url, json={
        'exercises': [{'index': 0, 'actualWeight': '185 lbs', 'actualReps': '5'}],
        'completed': True,
    })
    assert response.status_code == 200
    workout = auth_client.get(f"/api/workouts/{saved['id']}").get_json()['workout']
    assert workout['exercises'][0]['actualWeight'] == '185 lbs'
    assert workout['completed'] is True

    assert auth_client.post(url, json={'exercises': [{'index': 5, 'actualReps': '1'}]}).status_code == 400

def test_record_performance_on_a_malformed_section(auth_client):
    saved = create(auth_client, {'workout': {
        'name': 'Odd',
        'type': 'ai-generated',
        'strength': {'exercises': ['Back Squat 5x5']},
        'wod': {'exercises': [{'name': 'Burpees'}]},
    }})
    response = auth_client.post(f"/api/workouts/{saved['id']}/performance", json={
        'exercises': [{'section': 'strength', 'index': 0, 'actualWeight': '135'}],
    })
    assert response.status_code == 400

def test_suggestion_modes(auth_client):
    create(auth_client)
    personalized = auth_client.post('/api/suggestions', json={'mode': 'personalized'}).get_json()
    assert personalized['workouts'][0]['focusArea'] == 'lower body'

    options = auth_client.post('/api/suggestions', json={'mode': 'options',
                                                         'preferences': {'availableEquipment': []}}).get_json()
    assert len(options['workouts']) == 5

    assert auth_client.post('/api/suggestions', json={'mode': 'random'}).status_code == 400
    assert auth_client.post('/api/suggestions', json={'preferences': {'exerciseCount': 12}}).status_code == 400

def test_ai_suggestion_falls_back_without_api_key(auth_client):
    response = auth_client.post('/api/suggest-workout-ai', json={
        'preferences': {'focusArea': 'full body', 'fitnessLevel': 'advanced'},
        'requestId': 'req-7',
    })
    assert response.status_code == 200
    data = response.get_json()
    assert data['fallback'] is True
    assert data['requestId'] == 'req-7'
    assert data['message']
    assert data['workout']['strength']['exercises']
    assert data['workout']['wod']['exercises']

def test_ai_suggestion_includes_evals_when_enabled(auth_client, monkeypatch):
    monkeypatch.setenv('RUN_EVALS', 'true')
    data = auth_client.post('/api/suggest-workout-ai', json={}).get_json()
    assert data['evals']['passed'] is True

def test_ai_suggestion_rejects_bad_preferences(auth_client):
    response = auth_client.post('/api/suggest-workout-ai', json={'preferences': {'intensity': 'extreme'}})
    assert response.status_code == 400

def test_stats(auth_client):
    create(auth_client)
    data = auth_client.get('/api/stats').get_json()
    assert data['stats']['totalWorkouts'] == 1
    assert data['stats']['streakDays'] == 1
    assert data['stats']['mostUsedFocusArea'] == 'upper body'
    assert data['exerciseStats'][0]['name'] == 'bench press'

def test_usage(auth_client):
    data = auth_client.get('/api/usage').get_json()
    assert data['success'] is True
    assert data['budget']['over_daily_budget'] is False
    assert data['total']['cost'] == 0.0
