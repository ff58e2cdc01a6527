"""
Recording actual performance against a planned workout
"""

import copy
from typing import Any, Dict

EXERCISE_SECTIONS = ('exercises', 'strength', 'wod')
CHECKLIST_SECTIONS = ('warmup', 'cooldown')

EXERCISE_FIELDS = ('actualSets', 'actualReps', 'actualWeight', 'actualRest', 'notes')
CHECKLIST_FIELDS = ('completed', 'notes')
WORKOUT_FIELDS = ('actualDuration', 'notes', 'completed', 'difficulty')

class PerformanceError(ValueError):
    """A performance change points at a section or exercise the workout doesn't have"""

def _is_empty(value):
    return value is None or (isinstance(value, str) and not value.strip())

def _section_exercises(workout, section):
    if section == 'exercises':
        exercises = workout.get('exercises')
    else:
        block = workout.get(section)
        exercises = block.get('exercises') if isinstance(block, dict) else None
    if not isinstance(exercises, list):
        raise PerformanceError(f"Workout has no {section} section")
    return exercises

def _apply_fields(target, change, fields):
    for field in fields:
        if field not in change:
            continue
        value = change[field]
        # Blank inputs leave recorded values alone
        if _is_empty(value):
            continue
        target[field] = bool(value) if field == 'completed' else value

def record_performance(workout: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply recorded actuals to a copy of a workout.

    changes = {
        "exercises": [{"section": "strength", "index": 0, "actualWeight": "135 lbs", ...}],
        "actualDuration": 50, "notes": "...", "completed": true
    }

    Only known fields are copied. An empty value never clears an existing actual.
    """
    if not isinstance(changes, dict):
        raise PerformanceError('Performance changes must be an object')

    updated = copy.deepcopy(workout)

    for change in changes.get('exercises') or []:
        if not isinstance(change, dict):
            raise PerformanceError('Each exercise change must be an object')
        section = change.get('section', 'exercises')
        if section not in EXERCISE_SECTIONS + CHECKLIST_SECTIONS:
            raise PerformanceError(f"Unknown section: {section}")

        exercises = _section_exercises(updated, section)
        index = change.get('index')
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(exercises):
            raise PerformanceError(f"No exercise at {section}[{index}]")
        if not isinstance(exercises[index], dict):
            raise PerformanceError(f"Entry at {section}[{index}] is not an exercise")

        fields = CHECKLIST_FIELDS if section in CHECKLIST_SECTIONS else EXERCISE_FIELDS
        _apply_fields(exercises[index], change, fields)

    _apply_fields(updated, changes, WORKOUT_FIELDS)
    return updated
