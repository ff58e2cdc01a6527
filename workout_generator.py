"""
Template workout generator
Builds complete workouts from the static exercise catalog and user preferences
"""

import math
import random
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from equipment import filter_by_equipment, prioritize_by_equipment
from exercise_catalog import (
    EQUIPMENT_TAGS, FITNESS_LEVELS, FOCUS_AREAS, INTENSITIES, FOCUS_AREA_EXERCISES, LEVEL_DEFAULT_REPS,
    LEVEL_DEFAULT_REST, WORKOUT_TEMPLATES, find_catalog_entry, tier_exercises,
)
from history_analyzer import least_used_focus_area

DEFAULT_PREFERENCES = {
    'fitnessLevel': 'beginner',
    'focusArea': 'full body',
    'duration': 45,
    'intensity': 'moderate',
    'exerciseCount': 5,
    'availableEquipment': ['dumbbells', 'barbell'],
}

MIN_EXERCISES = 3
MAX_EXERCISES = 8
QUICK_WORKOUT_MINUTES = 15
QUICK_WORKOUT_MAX_EXERCISES = 4

RANGE_PATTERN = re.compile(r'^\s*(\d+)\s*-\s*(\d+)(.*)$')
DURATION_PATTERN = re.compile(r'^\s*(\d+)\s*(seconds?|secs?|s|minutes?|mins?)?\b', re.IGNORECASE)

def _now_iso():
    return datetime.now(timezone.utc).isoformat()

def title_case(text: str) -> str:
    """Capitalize the first letter of every word, leave the rest alone"""
    return ' '.join(word[:1].upper() + word[1:] for word in str(text).split(' '))

def _clean_enum(value, allowed):
    if not isinstance(value, str):
        return None
    value = value.strip().lower().replace('_', ' ').replace('-', ' ')
    return value if value in allowed else None

def _clean_int(value):
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None

def _clean_equipment(value):
    if value is None:
        return None
    if isinstance(value, str):
        value = value.split(',')
    if not isinstance(value, (list, tuple, set)):
        return None
    return [str(tag).strip().lower() for tag in value if str(tag).strip()]

def validate_preferences(raw: Optional[Dict[str, Any]]) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Validate user preferences from a request.
    Returns (preferences, None) on success or (None, error_message).
    Missing keys take their defaults; present keys must be valid.
    """
    raw = raw or {}
    if not isinstance(raw, dict):
        return None, 'Preferences must be an object'

    prefs = dict(DEFAULT_PREFERENCES)
    prefs['availableEquipment'] = list(DEFAULT_PREFERENCES['availableEquipment'])

    checks = (
        ('fitnessLevel', FITNESS_LEVELS),
        ('focusArea', FOCUS_AREAS),
        ('intensity', INTENSITIES),
    )
    for key, allowed in checks:
        if key in raw:
            value = _clean_enum(raw[key], allowed)
            if value is None:
                return None, f"{key} must be one of: {', '.join(allowed)}"
            prefs[key] = value

    if 'duration' in raw:
        duration = _clean_int(raw['duration'])
        if duration is None or duration <= 0:
            return None, 'duration must be a positive number of minutes'
        prefs['duration'] = duration

    if 'exerciseCount' in raw:
        count = _clean_int(raw['exerciseCount'])
        if count is None or not MIN_EXERCISES <= count <= MAX_EXERCISES:
            return None, f'exerciseCount must be between {MIN_EXERCISES} and {MAX_EXERCISES}'
        prefs['exerciseCount'] = count

    if 'availableEquipment' in raw:
        equipment = _clean_equipment(raw['availableEquipment'])
        if equipment is None:
            return None, 'availableEquipment must be a list of equipment tags'
        unknown = [tag for tag in equipment if tag not in EQUIPMENT_TAGS]
        if unknown:
            return None, f"Unknown equipment: {', '.join(unknown)}"
        prefs['availableEquipment'] = equipment

    return prefs, None

def normalize_preferences(raw: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Like validate_preferences, but never fails: bad values fall back to defaults"""
    raw = raw if isinstance(raw, dict) else {}
    prefs = dict(DEFAULT_PREFERENCES)
    prefs['fitnessLevel'] = _clean_enum(raw.get('fitnessLevel'), FITNESS_LEVELS) or prefs['fitnessLevel']
    prefs['focusArea'] = _clean_enum(raw.get('focusArea'), FOCUS_AREAS) or prefs['focusArea']
    prefs['intensity'] = _clean_enum(raw.get('intensity'), INTENSITIES) or prefs['intensity']

    duration = _clean_int(raw.get('duration'))
    prefs['duration'] = duration if duration and duration > 0 else prefs['duration']

    count = _clean_int(raw.get('exerciseCount'))
    if count is not None:
        prefs['exerciseCount'] = min(MAX_EXERCISES, max(MIN_EXERCISES, count))

    equipment = _clean_equipment(raw.get('availableEquipment'))
    if equipment is None:
        equipment = list(DEFAULT_PREFERENCES['availableEquipment'])
    prefs['availableEquipment'] = [tag for tag in equipment if tag in EQUIPMENT_TAGS]
    return prefs

def _synthetic_entry(name, fitness_level, focus_area):
    return {
        'name': name,
        'sets': 3,
        'reps': LEVEL_DEFAULT_REPS[fitness_level],
        'rest': LEVEL_DEFAULT_REST[fitness_level],
        'category': focus_area,
        'instructions': f"Perform {name} with controlled form",
    }

def _duration_seconds(text):
    match = DURATION_PATTERN.match(str(text))
    if not match:
        return None
    value = int(match.group(1))
    unit = (match.group(2) or 'seconds').lower()
    return value * 60 if unit.startswith('m') else value

def adjust_intensity(exercise: Dict[str, Any], intensity: str) -> Dict[str, Any]:
    """
    Scale a planned exercise for the requested intensity. Returns a new dict.

    high: +1 set, rep range min+2 / max+3, timed work +15 seconds
    low: -1 set (never below 1), rep range min-2 (floor 1) / max-2 (floor 3)
    """
    adjusted = dict(exercise)
    if intensity not in ('high', 'low'):
        return adjusted

    sets = adjusted.get('sets')
    if isinstance(sets, int) and not isinstance(sets, bool):
        if intensity == 'high':
            adjusted['sets'] = sets + 1
        elif sets > 1:
            adjusted['sets'] = sets - 1

    reps = adjusted.get('reps')
    match = RANGE_PATTERN.match(reps) if isinstance(reps, str) else None
    if match:
        low, high, suffix = int(match.group(1)), int(match.group(2)), match.group(3)
        if intensity == 'high':
            low, high = low + 2, high + 3
        else:
            low, high = max(1, low - 2), max(3, high - 2)
        adjusted['reps'] = f"{low}-{high}{suffix}"

    if intensity == 'high' and adjusted.get('duration'):
        seconds = _duration_seconds(adjusted['duration'])
        if seconds is not None:
            adjusted['duration'] = f"{seconds + 15} seconds"

    return adjusted

def _select_full_body(fitness_level, count, equipment):
    template = WORKOUT_TEMPLATES[fitness_level]
    strength_count = math.ceil(count * 0.6)
    cardio_count = count - strength_count

    strength = prioritize_by_equipment(filter_by_equipment([dict(e) for e in template['strength']], equipment), equipment)
    cardio = prioritize_by_equipment(filter_by_equipment([dict(e) for e in template['cardio']], equipment), equipment)
    return strength[:strength_count] + cardio[:cardio_count]

def _select_focus_area(fitness_level, focus_area, count, equipment):
    candidates = []
    for name in FOCUS_AREA_EXERCISES.get(focus_area, FOCUS_AREA_EXERCISES['full body']):
        entry = find_catalog_entry(name, fitness_level)
        candidates.append(entry or _synthetic_entry(name, fitness_level, focus_area))
    candidates = filter_by_equipment(candidates, equipment)
    return prioritize_by_equipment(candidates, equipment)[:count]

def _backfill(exercises, fitness_level, count, equipment, rng):
    pool = filter_by_equipment([dict(e) for e in tier_exercises(fitness_level)], equipment)
    names = {ex['name'] for ex in exercises}
    while len(exercises) < count and pool:
        candidate = pool.pop(rng.randrange(len(pool)))
        if candidate['name'] not in names:
            exercises.append(candidate)
            names.add(candidate['name'])
    return exercises

def generate_workout(preferences: Optional[Dict[str, Any]], rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """Compose a workout from the catalog for the given preferences"""
    prefs = normalize_preferences(preferences)
    rng = rng or random.Random()
    level = prefs['fitnessLevel']
    focus_area = prefs['focusArea']
    count = prefs['exerciseCount']
    equipment = prefs['availableEquipment']

    if focus_area == 'full body':
        exercises = _select_full_body(level, count, equipment)
    else:
        exercises = _select_focus_area(level, focus_area, count, equipment)

    if len(exercises) < count:
        exercises = _backfill(exercises, level, count, equipment, rng)

    exercises = [adjust_intensity(ex, prefs['intensity']) for ex in exercises[:count]]

    return {
        'name': f"{title_case(focus_area)} {title_case(level)} Workout",
        'exercises': exercises,
        'estimatedDuration': prefs['duration'],
        'difficulty': level,
        'focusArea': focus_area,
        'intensity': prefs['intensity'],
        'type': 'template',
        'createdAt': _now_iso(),
    }

def generate_workout_options(preferences: Optional[Dict[str, Any]], rng: Optional[random.Random] = None) -> List[Dict[str, Any]]:
    """One template workout per focus area"""
    prefs = normalize_preferences(preferences)
    return [generate_workout(dict(prefs, focusArea=area), rng=rng) for area in FOCUS_AREAS]

def get_personalized_suggestion(workout_history: List[Dict[str, Any]], preferences: Optional[Dict[str, Any]],
                                rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """Template workout aimed at the least worked focus area of the last 5 workouts"""
    prefs = normalize_preferences(preferences)
    focus_area = least_used_focus_area((workout_history or [])[:5])
    return generate_workout(dict(prefs, focusArea=focus_area), rng=rng)

def get_quick_workout(preferences: Optional[Dict[str, Any]], rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """Short moderate workout for busy days"""
    prefs = normalize_preferences(preferences)
    quick_prefs = dict(
        prefs,
        duration=QUICK_WORKOUT_MINUTES,
        intensity='moderate',
        exerciseCount=min(prefs['exerciseCount'], QUICK_WORKOUT_MAX_EXERCISES),
    )
    workout = generate_workout(quick_prefs, rng=rng)
    workout['name'] = f"Quick {workout['name']}"
    workout['estimatedDuration'] = QUICK_WORKOUT_MINUTES
    return workout
