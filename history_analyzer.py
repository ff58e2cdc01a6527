"""
Workout history analysis
Dashboard stats, per-exercise bests and streaks computed from stored workouts
"""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from exercise_catalog import FOCUS_AREAS

# Common spellings mapped to one canonical exercise key
EXERCISE_SYNONYMS = {
    'kettlebell swing': 'kettlebell swings',
    'kettlebell swings': 'kettlebell swings',
    'kb swing': 'kettlebell swings',
    'kb swings': 'kettlebell swings',
    'push up': 'push-ups',
    'push ups': 'push-ups',
    'push-up': 'push-ups',
    'push-ups': 'push-ups',
    'pushup': 'push-ups',
    'pushups': 'push-ups',
    'pull up': 'pull-ups',
    'pull ups': 'pull-ups',
    'pull-up': 'pull-ups',
    'pull-ups': 'pull-ups',
    'pullup': 'pull-ups',
    'pullups': 'pull-ups',
    'sit up': 'sit-ups',
    'sit ups': 'sit-ups',
    'sit-up': 'sit-ups',
    'sit-ups': 'sit-ups',
    'situp': 'sit-ups',
    'situps': 'sit-ups',
    'box jump': 'box jumps',
    'box jumps': 'box jumps',
    'air squat': 'air squats',
    'air squats': 'air squats',
    'back squat': 'back squats',
    'back squats': 'back squats',
    'front squat': 'front squats',
    'front squats': 'front squats',
    'dead lift': 'deadlifts',
    'deadlift': 'deadlifts',
    'deadlifts': 'deadlifts',
    'bench press': 'bench press',
    'benchpress': 'bench press',
    'overhead press': 'overhead press',
    'ohp': 'overhead press',
    'clean and press': 'clean & press',
    'clean & press': 'clean & press',
    'clean and jerk': 'clean & jerk',
    'clean & jerk': 'clean & jerk',
    'snatch': 'snatches',
    'snatches': 'snatches',
    'thruster': 'thrusters',
    'thrusters': 'thrusters',
    'burpee': 'burpees',
    'burpees': 'burpees',
    'mountain climber': 'mountain climbers',
    'mountain climbers': 'mountain climbers',
    'pistol squat': 'pistol squats',
    'pistol squats': 'pistol squats',
    'lunge': 'lunges',
    'lunges': 'lunges',
    'row': 'rowing',
    'rowing': 'rowing',
    'run': 'running',
    'running': 'running',
    'bike': 'cycling',
    'cycling': 'cycling',
    'jump rope': 'jump rope',
    'jump roping': 'jump rope',
    'double under': 'double-unders',
    'double unders': 'double-unders',
    'double-unders': 'double-unders',
    'toes to bar': 'toes-to-bar',
    'toes-to-bar': 'toes-to-bar',
    'toes to bars': 'toes-to-bar',
    'l sit': 'l-sits',
    'l sits': 'l-sits',
    'l-sits': 'l-sits',
    'plank': 'plank',
    'planks': 'plank',
    'russian twist': 'russian twists',
    'russian twists': 'russian twists',
    'medicine ball': 'medicine ball',
    'med ball': 'medicine ball',
    'wall ball': 'wall balls',
    'wall balls': 'wall balls',
    'wallball': 'wall balls',
    'wallballs': 'wall balls',
}

# Longest keys first so "kettlebell swings" wins over "kettlebell swing"
_SYNONYM_PATTERNS = [
    (re.compile(r'(?<![\w-])' + re.escape(key) + r'(?![\w-])'), value)
    for key, value in sorted(EXERCISE_SYNONYMS.items(), key=lambda item: -len(item[0]))
]

def normalize_exercise_name(name: Optional[str]) -> str:
    """
    Map an exercise name to a canonical key so spelling variants share stats.

    Exact synonym match first, then a synonym appearing as whole words inside
    the name ("Heavy Kettlebell Swings" -> "kettlebell swings"). A short key
    never matches inside a longer word, so "Dumbbell Rows" stays its own
    exercise instead of becoming "rowing". Unknown names are capitalized.
    """
    if not name:
        return ''
    normalized = str(name).lower().strip()
    if not normalized:
        return ''

    if normalized in EXERCISE_SYNONYMS:
        return EXERCISE_SYNONYMS[normalized]

    for pattern, value in _SYNONYM_PATTERNS:
        if pattern.search(normalized):
            return value

    stripped = str(name).strip()
    return stripped[:1].upper() + stripped[1:].lower()

def parse_leading_int(value) -> Optional[int]:
    """'135 lbs' -> 135, '' -> None"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    match = re.match(r'\s*([+-]?\d+)', str(value))
    return int(match.group(1)) if match else None

def parse_timestamp(value) -> Optional[datetime]:
    """Accept datetime, date or ISO-8601 strings as stored by the workout store"""
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

def _today():
    return datetime.now(timezone.utc).date()

def iter_planned_exercises(workout: Dict[str, Any]):
    """Yield (exercise, default_category) over the legacy list, strength and WOD sections"""
    for exercise in workout.get('exercises') or []:
        if isinstance(exercise, dict):
            yield exercise, 'general'
    for section_key in ('strength', 'wod'):
        section = workout.get(section_key)
        if isinstance(section, dict):
            for exercise in section.get('exercises') or []:
                if isinstance(exercise, dict):
                    yield exercise, 'strength' if section_key == 'strength' else 'wod'

def compute_exercise_stats(workouts: Iterable[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Fold all workouts into per-exercise bests keyed by normalized name"""
    exercise_data = {}
    for workout in workouts or []:
        performed_at = parse_timestamp(workout.get('createdAt'))
        for exercise, default_category in iter_planned_exercises(workout):
            name = normalize_exercise_name(exercise.get('name'))
            if not name:
                continue
            stat = exercise_data.setdefault(name, {
                'name': name,
                'maxWeight': 0,
                'maxReps': 0,
                'maxSets': 0,
                'totalWorkouts': 0,
                'lastPerformed': None,
                'category': exercise.get('category') or default_category,
            })

            for field, stat_key in (('actualWeight', 'maxWeight'), ('actualReps', 'maxReps'), ('actualSets', 'maxSets')):
                value = parse_leading_int(exercise.get(field))
                if value is not None and value > stat[stat_key]:
                    stat[stat_key] = value

            stat['totalWorkouts'] += 1

            if performed_at is not None:
                last = parse_timestamp(stat['lastPerformed'])
                if last is None or performed_at > last:
                    stat['lastPerformed'] = performed_at.isoformat()

    return exercise_data

def calculate_streak_days(workouts: Iterable[Dict[str, Any]], today: Optional[date] = None) -> int:
    """
    Consecutive days with at least one workout, counting back from today.
    A workout today is day 0; no workout today means no streak.
    """
    today = today or _today()
    days = set()
    for workout in workouts or []:
        created = parse_timestamp(workout.get('createdAt'))
        if created is not None:
            days.add(created.astimezone(timezone.utc).date())

    streak = 0
    for day in sorted(days, reverse=True):
        diff = (today - day).days
        if diff < 0:
            continue
        if diff == streak:
            streak += 1
        else:
            break
    return streak

def least_used_focus_area(workouts: Iterable[Dict[str, Any]]) -> str:
    """
    Focus area with the fewest exercises in the given workouts, counted by
    exercise category. With no categorized history, suggest full body.
    """
    counts = {area: 0 for area in FOCUS_AREAS}
    seen = False
    for workout in workouts or []:
        for exercise, _ in iter_planned_exercises(workout):
            category = str(exercise.get('category') or '').lower()
            if category in counts:
                counts[category] += 1
                seen = True
    if not seen:
        return 'full body'
    return min(FOCUS_AREAS, key=lambda area: counts[area])

def compute_stats(workouts: List[Dict[str, Any]], today: Optional[date] = None) -> Dict[str, Any]:
    """Dashboard summary over all of a user's workouts"""
    workouts = workouts or []
    today = today or _today()
    total_duration = 0
    focus_area_counts = {}
    week_ago = today - timedelta(days=7)
    this_week = 0

    for workout in workouts:
        duration = parse_leading_int(workout.get('actualDuration')) or parse_leading_int(workout.get('estimatedDuration')) or 0
        total_duration += duration

        focus_area = workout.get('focusArea')
        if focus_area:
            focus_area_counts[focus_area] = focus_area_counts.get(focus_area, 0) + 1

        created = parse_timestamp(workout.get('createdAt'))
        if created is not None and created.astimezone(timezone.utc).date() >= week_ago:
            this_week += 1

    most_used = 'None'
    if focus_area_counts:
        most_used = max(focus_area_counts.items(), key=lambda item: item[1])[0]

    return {
        'totalWorkouts': len(workouts),
        'totalExercises': len(compute_exercise_stats(workouts)),
        'averageWorkoutDuration': round(total_duration / len(workouts)) if workouts else 0,
        'mostUsedFocusArea': most_used,
        'streakDays': calculate_streak_days(workouts, today=today),
        'workoutsThisWeek': this_week,
    }
