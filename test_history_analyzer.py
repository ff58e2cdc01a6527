from datetime import date

from history_analyzer import (
    calculate_streak_days, compute_exercise_stats, compute_stats, least_used_focus_area, normalize_exercise_name,
    parse_leading_int,
)

TODAY = date(2026, 10, 19)

def workout_on(day, **fields):
    return dict({'createdAt': f"{day}T08:00:00+00:00"}, **fields)

def test_push_up_spellings_share_a_key():
    for spelling in ('Push Ups', 'push-ups', 'pushups', 'Push-Up', ' PUSH UP '):
        assert normalize_exercise_name(spelling) == 'push-ups'

def test_synonym_inside_longer_name():
    assert normalize_exercise_name('Heavy Kettlebell Swings') == 'kettlebell swings'
    assert normalize_exercise_name('Weighted Pull-ups') == 'pull-ups'

def test_short_keys_do_not_match_inside_words():
    assert normalize_exercise_name('Dumbbell Rows') == 'Dumbbell rows'
    assert normalize_exercise_name('Goblet Squat') == 'Goblet squat'

def test_empty_names():
    assert normalize_exercise_name('') == ''
    assert normalize_exercise_name(None) == ''

def test_parse_leading_int():
    assert parse_leading_int('135 lbs') == 135
    assert parse_leading_int(12) == 12
    assert parse_leading_int('') is None
    assert parse_leading_int('heavy') is None

def test_streak_counts_consecutive_days_from_today():
    assert calculate_streak_days([workout_on('2026-10-19'), workout_on('2026-10-18')], today=TODAY) == 2
    assert calculate_streak_days([workout_on('2026-10-19'), workout_on('2026-10-16')], today=TODAY) == 1
    assert calculate_streak_days([workout_on('2026-10-18')], today=TODAY) == 0
    assert calculate_streak_days([], today=TODAY) == 0

def test_streak_counts_a_day_once():
    workouts = [workout_on('2026-10-19'), workout_on('2026-10-19'), workout_on('2026-10-18')]
    assert calculate_streak_days(workouts, today=TODAY) == 2

def test_streak_uses_utc_calendar_days():
    # 2026-10-19 03:00 and 20:00 UTC
    assert calculate_streak_days([{'createdAt': '2026-10-18T22:00:00-05:00'}], today=TODAY) == 1
    assert calculate_streak_days([{'createdAt': '2026-10-20T01:00:00+05:00'}], today=TODAY) == 1

def test_exercise_stats_fold_all_sections():
    workouts = [
        workout_on('2026-10-18', strength={'exercises': [{'name': 'Back Squat', 'actualWeight': '135 lbs', 'actualReps': '5'}]}),
        workout_on('2026-10-19', strength={'exercises': [{'name': 'back squats', 'actualWeight': '155', 'actualSets': 5}]},
                   wod={'exercises': [{'name': 'Burpee'}]},
                   exercises=[{'name': 'Pushups'}]),
    ]
    stats = compute_exercise_stats(workouts)
    squat = stats['back squats']
    assert squat['maxWeight'] == 155
    assert squat['maxReps'] == 5
    assert squat['maxSets'] == 5
    assert squat['totalWorkouts'] == 2
    assert squat['category'] == 'strength'
    assert squat['lastPerformed'].startswith('2026-10-19')
    assert stats['burpees']['category'] == 'wod'
    assert stats['push-ups']['category'] == 'general'

def test_stats_without_workouts():
    assert compute_stats([], today=TODAY) == {
        'totalWorkouts': 0,
        'totalExercises': 0,
        'averageWorkoutDuration': 0,
        'mostUsedFocusArea': 'None',
        'streakDays': 0,
        'workoutsThisWeek': 0,
    }

def test_stats_summary():
    workouts = [
        workout_on('2026-10-19', focusArea='upper body', estimatedDuration=45, actualDuration='30 min',
                   exercises=[{'name': 'Push-ups'}]),
        workout_on('2026-10-18', focusArea='upper body', estimatedDuration=40, exercises=[{'name': 'Pull-ups'}]),
        workout_on('2026-09-01', focusArea='core', estimatedDuration=20, exercises=[{'name': 'Plank'}]),
    ]
    stats = compute_stats(workouts, today=TODAY)
    assert stats['totalWorkouts'] == 3
    assert stats['totalExercises'] == 3
    assert stats['averageWorkoutDuration'] == 30
    assert stats['mostUsedFocusArea'] == 'upper body'
    assert stats['streakDays'] == 2
    assert stats['workoutsThisWeek'] == 2

def test_least_used_focus_area():
    assert least_used_focus_area([]) == 'full body'
    history = [{'exercises': [{'name': 'Plank', 'category': 'core'}, {'name': 'Rows', 'category': 'upper body'}]}]
    assert least_used_focus_area(history) == 'lower body'
