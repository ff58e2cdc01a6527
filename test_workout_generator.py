import random

from exercise_catalog import FOCUS_AREAS, required_equipment
from workout_generator import (
    adjust_intensity, generate_workout, generate_workout_options, get_personalized_suggestion,
    get_quick_workout, normalize_preferences, title_case, validate_preferences,
)

def test_high_intensity_scales_up():
    adjusted = adjust_intensity({'name': 'Squats', 'sets': 3, 'reps': '8-10'}, 'high')
    assert adjusted['sets'] == 4
    assert adjusted['reps'] == '10-13'

def test_low_intensity_scales_down():
    adjusted = adjust_intensity({'name': 'Squats', 'sets': 3, 'reps': '8-10'}, 'low')
    assert adjusted['sets'] == 2
    assert adjusted['reps'] == '6-8'

def test_low_intensity_floors():
    adjusted = adjust_intensity({'name': 'Pull-ups', 'sets': 1, 'reps': '2-4'}, 'low')
    assert adjusted['sets'] == 1
    assert adjusted['reps'] == '1-3'

def test_intensity_keeps_rep_suffix_and_extends_durations():
    assert adjust_intensity({'sets': 3, 'reps': '10-12 each arm'}, 'high')['reps'] == '12-15 each arm'
    assert adjust_intensity({'sets': 3, 'duration': '30 seconds'}, 'high')['duration'] == '45 seconds'
    assert adjust_intensity({'sets': 3, 'duration': '1 minute'}, 'high')['duration'] == '75 seconds'

def test_moderate_intensity_is_a_copy():
    exercise = {'name': 'Plank', 'sets': 3, 'reps': '8-12'}
    adjusted = adjust_intensity(exercise, 'moderate')
    assert adjusted == exercise
    assert adjusted is not exercise

def test_beginner_core_without_equipment():
    workout = generate_workout({
        'fitnessLevel': 'beginner',
        'focusArea': 'core',
        'exerciseCount': 3,
        'availableEquipment': [],
    })
    assert [ex['name'] for ex in workout['exercises']] == ['Plank', 'Crunches', 'Leg Raises']
    assert all(ex['category'] == 'core' for ex in workout['exercises'])
    assert all(required_equipment(ex['name']) == () for ex in workout['exercises'])
    assert workout['name'] == 'Core Beginner Workout'
    assert workout['type'] == 'template'

def test_full_body_splits_strength_and_cardio():
    workout = generate_workout({'focusArea': 'full body', 'exerciseCount': 5,
                                'availableEquipment': ['dumbbells', 'barbell']})
    categories = [ex['category'] for ex in workout['exercises']]
    assert len(workout['exercises']) == 5
    assert categories.count('cardio') == 2
    assert [ex['name'] for ex in workout['exercises']] == [
        'Barbell Back Squats', 'Dumbbell Push-ups', 'Dumbbell Squats',
        'Barbell Thrusters', 'Dumbbell Thrusters',
    ]

def test_generated_exercises_only_use_owned_equipment():
    for level in ('beginner', 'intermediate', 'advanced'):
        for area in FOCUS_AREAS:
            workout = generate_workout({'fitnessLevel': level, 'focusArea': area, 'exerciseCount': 8,
                                        'availableEquipment': ['dumbbells']}, rng=random.Random(1))
            for exercise in workout['exercises']:
                assert set(required_equipment(exercise['name'])) <= {'dumbbells'}
            assert len(workout['exercises']) <= 8
            assert len({ex['name'] for ex in workout['exercises']}) == len(workout['exercises'])

def test_no_equipment_full_body_returns_what_it_can():
    workout = generate_workout({'focusArea': 'full body', 'availableEquipment': []})
    assert workout['exercises']
    assert all(required_equipment(ex['name']) == () for ex in workout['exercises'])

def test_validate_preferences():
    prefs, error = validate_preferences({})
    assert error is None
    assert prefs['fitnessLevel'] == 'beginner'
    assert prefs['availableEquipment'] == ['dumbbells', 'barbell']

    assert validate_preferences({'exerciseCount': 9})[1]
    assert validate_preferences({'fitnessLevel': 'expert'})[1]
    assert validate_preferences({'duration': 0})[1]
    assert validate_preferences({'availableEquipment': ['dumbbells', 'jetpack']})[1] == 'Unknown equipment: jetpack'

    prefs, error = validate_preferences({'focusArea': 'Upper Body', 'availableEquipment': []})
    assert error is None
    assert prefs['focusArea'] == 'upper body'
    assert prefs['availableEquipment'] == []

def test_normalize_preferences_never_fails():
    prefs = normalize_preferences({'exerciseCount': 20, 'fitnessLevel': 'expert', 'duration': 'abc'})
    assert prefs['exerciseCount'] == 8
    assert prefs['fitnessLevel'] == 'beginner'
    assert prefs['duration'] == 45
    assert normalize_preferences({'availableEquipment': 'Dumbbells, jetpack'})['availableEquipment'] == ['dumbbells']
    assert normalize_preferences(None)['focusArea'] == 'full body'

def test_quick_workout():
    workout = get_quick_workout({'exerciseCount': 8, 'intensity': 'high'})
    assert workout['name'].startswith('Quick ')
    assert workout['estimatedDuration'] == 15
    assert workout['intensity'] == 'moderate'
    assert len(workout['exercises']) <= 4

def test_options_cover_every_focus_area():
    options = generate_workout_options({'availableEquipment': ['dumbbells']})
    assert [option['focusArea'] for option in options] == list(FOCUS_AREAS)

def test_personalized_suggestion_targets_least_worked_area():
    history = [{'exercises': [{'name': 'Push-ups', 'category': 'upper body'}]}] * 3
    assert get_personalized_suggestion(history, {})['focusArea'] == 'lower body'
    assert get_personalized_suggestion([], {})['focusArea'] == 'full body'

def test_title_case():
    assert title_case('full body') == 'Full Body'
