import pytest

from workout_modifier import PerformanceError, record_performance
from workout_parser import create_fallback_workout

def planned():
    workout = create_fallback_workout({'fitnessLevel': 'intermediate', 'availableEquipment': ['barbell']})
    workout['strength']['exercises'][0]['actualWeight'] = '185'
    return workout

def test_records_actuals_on_a_copy():
    workout = planned()
    updated = record_performance(workout, {
        'exercises': [
            {'section': 'strength', 'index': 0, 'actualSets': '5', 'actualReps': '5', 'ignored': 'x'},
            {'section': 'wod', 'index': 1, 'notes': 'step-ups instead'},
            {'section': 'warmup', 'index': 0, 'completed': True},
        ],
        'actualDuration': 48,
        'completed': True,
    })
    lift = updated['strength']['exercises'][0]
    assert lift['actualSets'] == '5'
    assert lift['actualWeight'] == '185'
    assert 'ignored' not in lift
    assert updated['wod']['exercises'][1]['notes'] == 'step-ups instead'
    assert updated['warmup']['exercises'][0]['completed'] is True
    assert updated['actualDuration'] == 48
    assert updated['completed'] is True
    assert 'actualSets' not in workout['strength']['exercises'][0]

def test_empty_values_never_clear_actuals():
    updated = record_performance(planned(), {'exercises': [
        {'section': 'strength', 'index': 0, 'actualWeight': '', 'actualReps': None},
    ], 'notes': '   '})
    assert updated['strength']['exercises'][0]['actualWeight'] == '185'
    assert 'actualReps' not in updated['strength']['exercises'][0]
    assert 'notes' not in updated

def test_legacy_exercise_list():
    workout = {'name': 'Manual', 'exercises': [{'name': 'Bench', 'reps': '5'}]}
    updated = record_performance(workout, {'exercises': [{'index': 0, 'actualWeight': '135 lbs'}]})
    assert updated['exercises'][0]['actualWeight'] == '135 lbs'

@pytest.mark.parametrize('change', [
    {'section': 'strength', 'index': 9},
    {'section': 'strength', 'index': '0'},
    {'section': 'finisher', 'index': 0},
    {'section': 'exercises', 'index': 0},
])
def test_bad_targets_are_rejected(change):
    workout = planned()
    workout.pop('exercises')
    with pytest.raises(PerformanceError):
        record_performance(workout, {'exercises': [change]})

def test_non_exercise_entries_are_rejected():
    workout = {'name': 'Odd', 'strength': {'exercises': ['Back Squat 5x5']}, 'wod': {'exercises': [{'name': 'Burpees'}]}}
    with pytest.raises(PerformanceError):
        record_performance(workout, {'exercises': [{'section': 'strength', 'index': 0, 'actualWeight': '135'}]})
    assert workout['strength']['exercises'] == ['Back Squat 5x5']
