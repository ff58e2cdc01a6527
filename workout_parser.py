#!/usr/bin/env python3
"""
AI Workout Response Parser
Turns free-form model output into a structured workout.

Tiers, first success wins:
1. JSON object in the text with strength + wod sections -> accepted as-is,
   missing pieces filled from defaults
2. JSON with only a flat "exercises" list -> converted to strength + wod
3. No JSON at all -> "* Exercise: detail" bullet lines
4. Anything else, or any error -> synthetic fallback workout

parse_workout_response never raises.
"""

import json
import random
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from equipment import is_fallback_exercise_available
from exercise_catalog import CORE_POOL, FALLBACK_POOLS, LEVEL_DEFAULT_REPS
from workout_generator import normalize_preferences, title_case

STRENGTH_KEYWORDS = ('squat', 'row', 'press', 'deadlift', 'bench')

# Bullet names that belong to warmup or cooldown, not the main workout
WARMUP_COOLDOWN_KEYWORDS = (
    'jumping jack', 'high knee', 'butt kick', 'arm circle', 'stretch', 'cool-down', 'cool down',
    'cooldown', 'warm-up', 'warm up', 'warmup', 'static', 'dynamic',
)

BULLET_PATTERN = re.compile(r'^\s*\*+\s*([^:\n]+?)\s*:\s*(.+?)\s*$', re.MULTILINE)
JSON_SPAN_PATTERN = re.compile(r'\{[\s\S]*\}')

DEFAULT_TEXT_EXERCISES = (
    {'name': 'Back Squats', 'sets': 3, 'reps': '8', 'weight': 'Barbell', 'category': 'strength'},
    {'name': 'Dumbbell Rows', 'sets': 3, 'reps': '10 per arm', 'weight': 'Dumbbell', 'category': 'strength'},
    {'name': 'Box Jumps', 'sets': 3, 'reps': '10', 'weight': 'Bodyweight', 'category': 'conditioning'},
    {'name': 'Plank', 'sets': 3, 'reps': '30 seconds', 'weight': 'Bodyweight', 'category': 'core'},
    {'name': 'Burpees', 'sets': 3, 'reps': '15', 'weight': 'Bodyweight', 'category': 'conditioning'},
)

STRENGTH_SCALING = {
    'beginner': 'Start with lighter weights and focus on form',
    'intermediate': 'Moderate weight with good form',
    'advanced': 'Heavy weight while maintaining form',
}

WOD_SCALING = {
    'beginner': 'Reduce reps or use easier variation',
    'intermediate': 'Moderate pace',
    'advanced': 'Fast pace with good form',
}

BARBELL_LIFTS = (
    ('Back Squat', '5x5', '3 minutes'),
    ('Deadlift', '5x5', '3 minutes'),
    ('Bench Press', '5x5', '3 minutes'),
    ('Overhead Press', '5x5', '3 minutes'),
)

DUMBBELL_LIFTS = (
    ('Dumbbell Squats', '3x8-12', '2 minutes'),
    ('Dumbbell Deadlifts', '3x8-12', '2 minutes'),
    ('Dumbbell Bench Press', '3x8-12', '2 minutes'),
    ('Dumbbell Shoulder Press', '3x8-12', '2 minutes'),
)

# Default WOD picks the first two conditioning and first two strength/gymnastics moves
DEFAULT_WOD_EXERCISES = (
    ('Burpees', '10', 'conditioning'),
    ('Air Squats', '15', 'strength'),
    ('Push-ups', '10', 'gymnastics'),
    ('Dumbbell Thrusters', '8', 'strength'),
    ('Box Jumps', '12', 'conditioning'),
    ('Pull-ups', '5', 'gymnastics'),
    ('Mountain Climbers', '20', 'conditioning'),
)

class WorkoutParseError(Exception):
    """A parsing tier could not produce a workout"""

def _now_iso():
    return datetime.now(timezone.utc).isoformat()

def _default_name(prefs):
    return f"{title_case(prefs['focusArea'])} {title_case(prefs['fitnessLevel'])} Workout"

# ============================================================================
# Default sections
# ============================================================================

def create_default_warmup(preferences=None) -> Dict[str, Any]:
    return {
        'duration': '5-8 minutes',
        'exercises': [
            {'name': 'Light Jogging', 'duration': '2 minutes', 'instructions': 'Easy pace to get blood flowing'},
            {'name': 'Arm Circles', 'duration': '30 seconds each direction', 'instructions': 'Forward and backward arm circles'},
            {'name': 'Hip Circles', 'duration': '30 seconds each direction', 'instructions': 'Standing hip circles to loosen hips'},
            {'name': 'Air Squats', 'duration': '10 reps', 'instructions': 'Slow, controlled squats to warm up legs'},
            {'name': 'Push-ups', 'duration': '5-10 reps', 'instructions': 'Easy push-ups to warm up upper body'},
        ],
    }

def create_default_cooldown(preferences=None) -> Dict[str, Any]:
    return {
        'duration': '3-5 minutes',
        'exercises': [
            {'name': 'Light Walking', 'duration': '2 minutes', 'instructions': 'Easy walking to gradually lower heart rate'},
            {'name': 'Static Stretches', 'duration': '30 seconds each', 'instructions': 'Hold stretches for major muscle groups'},
            {'name': 'Deep Breathing', 'duration': '1 minute', 'instructions': 'Slow, deep breaths to relax'},
        ],
    }

def create_default_strength(preferences, rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """One main lift, barbell if the user has one"""
    prefs = normalize_preferences(preferences)
    rng = rng or random.Random()
    lifts = BARBELL_LIFTS if 'barbell' in prefs['availableEquipment'] else DUMBBELL_LIFTS
    name, scheme, rest = rng.choice(lifts)
    sets, reps = scheme.split('x', 1)
    return {
        'duration': '10-15 minutes',
        'focus': name,
        'exercises': [{
            'name': name,
            'sets': int(sets),
            'reps': reps,
            'rest': rest,
            'category': 'strength',
            'instructions': f"Focus on proper form and progressive loading for {name}",
            'scaling': STRENGTH_SCALING[prefs['fitnessLevel']],
        }],
    }

def create_default_wod(preferences) -> Dict[str, Any]:
    """10 minute AMRAP mixing conditioning with strength/gymnastics"""
    prefs = normalize_preferences(preferences)
    conditioning = [ex for ex in DEFAULT_WOD_EXERCISES if ex[2] == 'conditioning'][:2]
    strength = [ex for ex in DEFAULT_WOD_EXERCISES if ex[2] in ('strength', 'gymnastics')][:2]
    return {
        'duration': '10-15 minutes',
        'workoutType': 'AMRAP',
        'description': 'Complete as many rounds as possible in 10 minutes',
        'exercises': [
            {
                'name': name,
                'reps': reps,
                'category': category,
                'instructions': f"Perform {reps} {name} with good form",
                'scaling': WOD_SCALING[prefs['fitnessLevel']],
            }
            for name, reps, category in conditioning + strength
        ],
    }

def _named_exercises(items):
    if not isinstance(items, list):
        return []
    return [ex for ex in items if isinstance(ex, dict) and isinstance(ex.get('name'), str) and ex['name'].strip()]

def _clean_section(section):
    """Copy of a section keeping only named exercise entries, or None when none survive"""
    if not isinstance(section, dict):
        return None
    exercises = _named_exercises(section.get('exercises'))
    if not exercises:
        return None
    return dict(section, exercises=exercises)

# ============================================================================
# Tier 1: JSON extraction
# ============================================================================

def extract_json_span(response_text: str) -> Optional[str]:
    """From the first '{' to the last '}', or None when the text has no braces"""
    match = JSON_SPAN_PATTERN.search(response_text or '')
    return match.group(0) if match else None

def accept_structured_workout(workout_data: Dict[str, Any], preferences: Dict[str, Any]) -> Dict[str, Any]:
    """Keep a model workout that already has strength and wod, filling gaps from defaults"""
    prefs = normalize_preferences(preferences)
    strength = _clean_section(workout_data.get('strength'))
    wod = _clean_section(workout_data.get('wod'))
    warmup = _clean_section(workout_data.get('warmup'))
    cooldown = _clean_section(workout_data.get('cooldown'))

    return {
        'name': workout_data.get('name') or _default_name(prefs),
        'difficulty': workout_data.get('difficulty') or prefs['fitnessLevel'],
        'intensity': workout_data.get('intensity') or prefs['intensity'],
        'focusArea': workout_data.get('focusArea') or prefs['focusArea'],
        'estimatedDuration': workout_data.get('estimatedDuration') or prefs['duration'],
        'warmup': warmup or create_default_warmup(prefs),
        'strength': strength or create_default_strength(prefs),
        'wod': wod or create_default_wod(prefs),
        'cooldown': cooldown or create_default_cooldown(prefs),
        'type': 'ai-generated',
        'createdAt': _now_iso(),
    }

# ============================================================================
# Tier 2: legacy flat "exercises" list
# ============================================================================

def _is_strength_exercise(exercise):
    name = exercise['name'].lower()
    return exercise.get('category') == 'strength' or any(keyword in name for keyword in STRENGTH_KEYWORDS)

def convert_to_crossfit_structure(workout_data: Dict[str, Any], preferences: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Split a flat exercise list into strength and WOD sections.
    Returns None when there is nothing usable to convert.
    """
    prefs = normalize_preferences(preferences)
    exercises = _named_exercises(workout_data.get('exercises'))
    if not exercises:
        return None

    strength_exercises = [ex for ex in exercises if _is_strength_exercise(ex)]
    wod_exercises = [ex for ex in exercises if not _is_strength_exercise(ex)]

    # Keep at least one lift and, where possible, two WOD movements
    if not strength_exercises and wod_exercises:
        strength_exercises.append(wod_exercises.pop(0))
    if len(wod_exercises) < 2 and len(strength_exercises) > 1:
        wod_exercises.append(strength_exercises.pop(1))

    strength = {
        'duration': '10-15 minutes',
        'focus': strength_exercises[0]['name'] if strength_exercises else 'Strength Work',
        'exercises': [{
            'name': ex['name'],
            'sets': ex.get('sets') or 3,
            'reps': ex.get('reps') or '8-12',
            'rest': ex.get('rest') or '90 seconds',
            'category': 'strength',
            'instructions': ex.get('instructions') or f"Perform {ex['name']} with proper form",
            'scaling': ex.get('scaling') or 'Adjust weight as needed',
        } for ex in strength_exercises],
    }
    wod = {
        'duration': '10-15 minutes',
        'workoutType': 'AMRAP',
        'description': 'Complete as many rounds as possible in 10 minutes',
        'exercises': [{
            'name': ex['name'],
            'reps': ex.get('reps') or '10',
            'category': ex.get('category') or 'conditioning',
            'instructions': ex.get('instructions') or f"Perform {ex.get('reps') or '10'} {ex['name']}",
            'scaling': ex.get('scaling') or 'Scale as needed for your level',
        } for ex in wod_exercises],
    }
    warmup = workout_data.get('warmup')
    cooldown = workout_data.get('cooldown')

    return {
        'name': workout_data.get('name') or _default_name(prefs),
        'difficulty': workout_data.get('difficulty') or prefs['fitnessLevel'],
        'intensity': workout_data.get('intensity') or prefs['intensity'],
        'focusArea': workout_data.get('focusArea') or prefs['focusArea'],
        'estimatedDuration': workout_data.get('estimatedDuration') or prefs['duration'],
        'warmup': warmup if isinstance(warmup, dict) else create_default_warmup(prefs),
        'strength': strength if strength['exercises'] else create_default_strength(prefs),
        'wod': wod if wod['exercises'] else create_default_wod(prefs),
        'cooldown': cooldown if isinstance(cooldown, dict) else create_default_cooldown(prefs),
        'type': 'ai-generated-converted',
        'createdAt': _now_iso(),
    }

# ============================================================================
# Tier 3: bullet-point text
# ============================================================================

def _extract_workout_name(response_text):
    wod_match = re.search(r'WOD[:\s]+"([^"]+)"|Workout of the Day[:\s]+"([^"]+)"|"([^"]+)"\s*\(', response_text)
    if wod_match:
        return next(group for group in wod_match.groups() if group)
    name_match = (re.search(r'workout[:\s]+([^\n]+)', response_text, re.IGNORECASE)
                  or re.search(r'wod[:\s]+([^\n]+)', response_text, re.IGNORECASE))
    if name_match:
        return name_match.group(1).strip(' *#:') or 'CrossFit Workout'
    first_line = response_text.strip().split('\n', 1)[0].strip(' *#:')
    return first_line[:80] or 'CrossFit Workout'

def parse_exercise_line(name: str, details: str) -> Optional[Dict[str, Any]]:
    """
    One "* Name: detail" bullet into a placeholder exercise, or None for
    warmup/cooldown lines.
    """
    name = name.strip(' *_#')
    name_lower = name.lower()
    if not name or any(keyword in name_lower for keyword in WARMUP_COOLDOWN_KEYWORDS):
        return None

    weight = 'Bodyweight'
    category = 'conditioning'
    if 'squat' in name_lower and 'air' not in name_lower:
        weight = 'Barbell'
        category = 'strength'
    elif 'row' in name_lower:
        weight = 'Dumbbell'
        category = 'strength'
    elif 'plank' in name_lower:
        category = 'core'

    return {
        'name': name,
        'sets': 3,
        'reps': details.strip(' *_'),
        'weight': weight,
        'category': category,
    }

def parse_text_workout(response_text: str, preferences: Dict[str, Any]) -> Dict[str, Any]:
    """Build a workout from bullet lines; a fixed exercise set stands in when none are found"""
    prefs = normalize_preferences(preferences)

    exercises = []
    for name, details in BULLET_PATTERN.findall(response_text or ''):
        parsed = parse_exercise_line(name, details)
        if parsed:
            exercises.append(parsed)

    if not exercises:
        print("⚠ No exercises found in AI text, using default set")
        exercises = [dict(ex) for ex in DEFAULT_TEXT_EXERCISES]

    def is_strength(ex):
        return ex['category'] == 'strength' or any(keyword in ex['name'].lower() for keyword in STRENGTH_KEYWORDS)

    # Split by position; identical bullets are separate sets of work
    strength_positions = [i for i, ex in enumerate(exercises) if is_strength(ex)] or [0]
    strength_exercises = [exercises[i] for i in strength_positions]
    wod_exercises = [ex for i, ex in enumerate(exercises) if i not in strength_positions]

    return {
        'name': _extract_workout_name(response_text or ''),
        'difficulty': prefs['fitnessLevel'],
        'intensity': prefs['intensity'],
        'focusArea': prefs['focusArea'],
        'estimatedDuration': prefs['duration'],
        'warmup': create_default_warmup(prefs),
        'strength': {
            'duration': '10-15 minutes',
            'focus': strength_exercises[0]['name'],
            'exercises': strength_exercises,
        },
        'wod': {
            'duration': '10-15 minutes',
            'workoutType': 'AMRAP',
            'description': 'Complete as many rounds as possible in 10 minutes',
            'exercises': wod_exercises,
        } if wod_exercises else create_default_wod(prefs),
        'cooldown': create_default_cooldown(prefs),
        'type': 'ai-generated',
        'createdAt': _now_iso(),
    }

# ============================================================================
# Tier 4: synthetic fallback
# ============================================================================

def create_fallback_workout(preferences, rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """Complete workout built without the model; cannot fail for any preferences"""
    prefs = normalize_preferences(preferences)
    rng = rng or random.Random()
    focus_area = prefs['focusArea']
    equipment = prefs['availableEquipment']

    pool = FALLBACK_POOLS.get(focus_area, FALLBACK_POOLS['full body'])
    selected = [
        (name, movement_type) for name, movement_type in pool
        if is_fallback_exercise_available(name, equipment, movement_type)
    ]

    if focus_area == 'full body' and not any(name in CORE_POOL for name, _ in selected):
        selected.append((rng.choice(CORE_POOL), 'core'))

    exercises = [{
        'name': name,
        'sets': 3,
        'reps': LEVEL_DEFAULT_REPS[prefs['fitnessLevel']],
        'category': movement_type,
    } for name, movement_type in selected]

    return {
        'name': f"CrossFit {title_case(focus_area)} {title_case(prefs['fitnessLevel'])} WOD",
        'difficulty': prefs['fitnessLevel'],
        'intensity': prefs['intensity'],
        'focusArea': focus_area,
        'estimatedDuration': prefs['duration'],
        'warmup': create_default_warmup(prefs),
        'strength': create_default_strength(prefs, rng=rng),
        'wod': create_default_wod(prefs),
        'cooldown': create_default_cooldown(prefs),
        'type': 'ai-generated-fallback',
        'createdAt': _now_iso(),
        'exercises': exercises,
    }

# ============================================================================
# Cascade
# ============================================================================

def _parse_structured(response_text, prefs):
    span = extract_json_span(response_text)
    if span is None:
        print("⚠ No JSON found in AI response, parsing as text workout")
        return parse_text_workout(response_text, prefs)

    workout_data = json.loads(span)
    if not isinstance(workout_data, dict):
        raise WorkoutParseError('AI response JSON is not an object')

    if workout_data.get('strength') and workout_data.get('wod'):
        return accept_structured_workout(workout_data, prefs)

    if isinstance(workout_data.get('exercises'), list) and workout_data['exercises']:
        print("⚠ AI response missing strength/wod sections, converting exercise list")
        converted = convert_to_crossfit_structure(workout_data, prefs)
        if converted:
            return converted

    raise WorkoutParseError('AI response has neither strength/wod sections nor usable exercises')

def parse_workout_response(response_text, preferences) -> Dict[str, Any]:
    """Normalize raw model output into a workout; always returns a complete workout"""
    prefs = normalize_preferences(preferences)
    if not isinstance(response_text, str):
        response_text = ''

    try:
        return _parse_structured(response_text, prefs)
    except Exception as e:
        print(f"⚠ Could not parse AI workout ({e}), using fallback workout")
        return create_fallback_workout(prefs)

def count_main_exercises(workout: Dict[str, Any]) -> int:
    """Strength + WOD exercises; the legacy list only counts when there are no sections"""
    sections = [workout.get(key) for key in ('strength', 'wod') if isinstance(workout.get(key), dict)]
    if sections:
        return sum(len(section.get('exercises') or []) for section in sections)
    return len(workout.get('exercises') or [])

def list_exercise_names(workout: Dict[str, Any]) -> List[str]:
    names = []
    for key in ('warmup', 'strength', 'wod', 'cooldown'):
        section = workout.get(key)
        if isinstance(section, dict):
            names.extend(ex.get('name', '') for ex in section.get('exercises') or [] if isinstance(ex, dict))
    names.extend(ex.get('name', '') for ex in workout.get('exercises') or [] if isinstance(ex, dict))
    return names
