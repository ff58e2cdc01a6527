import sqlite3

import pytest

import workout_store
from database import get_cursor, get_db_connection
from workout_store import (
    InvalidWorkoutError, WorkoutNotFoundError, WorkoutStoreError, add_workout, delete_workout, get_workout,
    get_workouts, repeat_workout, update_workout, validate_manual_workout, validate_suggested_workout,
)

def sample(name='Leg Day'):
    return {'name': name, 'focusArea': 'lower body', 'exercises': [{'name': 'Squats', 'sets': 3, 'reps': '10'}]}

def other_user():
    with get_db_connection() as conn:
        cur = get_cursor(conn)
        cur.execute("INSERT INTO users (username, password_hash) VALUES (?, ?)", ('someone', 'x'))
        return cur.lastrowid

def test_add_assigns_id_and_timestamps(user_id):
    saved = add_workout(user_id, dict(sample(), id='client-id', createdAt='1999-01-01'))
    assert saved['id'] != 'client-id'
    assert saved['createdAt'] != '1999-01-01'
    assert saved['createdAt'] == saved['updatedAt']
    assert get_workout(user_id, saved['id']) == saved

def test_list_is_newest_first(user_id):
    first = add_workout(user_id, sample('First'))
    second = add_workout(user_id, sample('Second'))
    assert [w['id'] for w in get_workouts(user_id)] == [second['id'], first['id']]
    assert len(get_workouts(user_id, limit=1)) == 1

def test_workouts_are_scoped_per_user(user_id):
    saved = add_workout(user_id, sample())
    stranger = other_user()
    assert get_workouts(stranger) == []
    with pytest.raises(WorkoutNotFoundError):
        get_workout(stranger, saved['id'])

def test_update_merges(user_id):
    saved = add_workout(user_id, sample())
    updated = update_workout(user_id, saved['id'], {'notes': 'felt strong', 'id': 'ignored'})
    assert updated['notes'] == 'felt strong'
    assert updated['name'] == 'Leg Day'
    assert updated['id'] == saved['id']
    assert updated['createdAt'] == saved['createdAt']
    assert get_workout(user_id, saved['id'])['notes'] == 'felt strong'

@pytest.mark.parametrize('updates', [
    {'exercises': []},
    {'exercises': [{'reps': '10'}], 'strength': None},
    {'name': ''},
])
def test_update_cannot_empty_a_workout(user_id, updates):
    saved = add_workout(user_id, sample())
    with pytest.raises(InvalidWorkoutError):
        update_workout(user_id, saved['id'], updates)
    assert get_workout(user_id, saved['id'])['exercises'] == sample()['exercises']

def test_update_missing_workout(user_id):
    with pytest.raises(WorkoutNotFoundError):
        update_workout(user_id, 999, {'notes': 'x'})

def test_delete_and_delete_again(user_id):
    saved = add_workout(user_id, sample())
    assert delete_workout(user_id, saved['id']) is True
    assert get_workouts(user_id) == []
    assert delete_workout(user_id, saved['id']) is True
    assert delete_workout(user_id, 'not-a-number') is True

def test_repeat_makes_a_new_copy(user_id):
    saved = add_workout(user_id, dict(sample(), completed=True, actualDuration=50))
    copy = repeat_workout(user_id, saved['id'])
    assert copy['id'] != saved['id']
    assert copy['name'] == 'Leg Day (Repeated)'
    assert copy['exercises'] == saved['exercises']
    assert 'completed' not in copy
    assert len(get_workouts(user_id)) == 2

def test_store_failures_raise(user_id, monkeypatch):
    def broken_connection():
        raise sqlite3.OperationalError('disk I/O error')
    monkeypatch.setattr(workout_store, 'get_db_connection', broken_connection)
    with pytest.raises(WorkoutStoreError):
        add_workout(user_id, sample())
    with pytest.raises(WorkoutStoreError):
        get_workouts(user_id)

def test_validate_manual_workout():
    workout, error = validate_manual_workout({'name': '  Push Day ', 'exercises': [
        {'name': 'Bench', 'reps': '5'},
        {'name': '', 'reps': '5'},
        {'name': 'Plank', 'duration': '60 seconds'},
        {'name': 'Curls'},
    ]})
    assert error is None
    assert workout['name'] == 'Push Day'
    assert workout['type'] == 'manual'
    assert [ex['name'] for ex in workout['exercises']] == ['Bench', 'Plank']

    assert validate_manual_workout({'exercises': [{'name': 'Bench', 'reps': '5'}]})[1]
    assert validate_manual_workout({'name': 'Empty', 'exercises': [{'name': 'Bench'}]})[1]
    assert validate_manual_workout('nope')[1]

def test_validate_suggested_workout():
    workout, error = validate_suggested_workout({'name': 'AI', 'type': 'ai-generated', 'id': 'x',
                                                 'strength': {'exercises': [{'name': 'Deadlift'}]}})
    assert error is None
    assert 'id' not in workout
    assert validate_suggested_workout({'name': 'AI', 'wod': {'exercises': []}})[1]
