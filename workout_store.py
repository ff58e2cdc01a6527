"""
Workout persistence
One JSON document per workout in the workouts table, always scoped by user_id.
"""

import json
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from database import adapt_query, get_cursor, get_db_connection, is_sqlite

REPEATED_SUFFIX = ' (Repeated)'

# Keys owned by the store, never taken from client documents
STORE_KEYS = ('id', 'createdAt', 'updatedAt')

class WorkoutStoreError(Exception):
    """The database rejected or failed an operation"""

class WorkoutNotFoundError(WorkoutStoreError):
    """No workout with that id for this user"""

class InvalidWorkoutError(WorkoutStoreError):
    """An update would leave the workout without a name or exercises"""

def _now_iso():
    return datetime.now(timezone.utc).isoformat()

def _clean_user_id(user_id):
    # user_id must be an integer to keep every query scoped
    try:
        return int(user_id)
    except (TypeError, ValueError):
        raise WorkoutStoreError(f"Invalid user id: {user_id!r}")

def _clean_workout_id(workout_id):
    try:
        return int(workout_id)
    except (TypeError, ValueError):
        raise WorkoutNotFoundError(f"Workout {workout_id!r} not found")

def _strip_store_keys(data):
    return {key: value for key, value in (data or {}).items() if key not in STORE_KEYS}

def _row_to_workout(row):
    workout_id, data, created_at, updated_at = row[0], row[1], row[2], row[3]
    workout = json.loads(data) if data else {}
    workout['id'] = str(workout_id)
    workout['createdAt'] = created_at
    workout['updatedAt'] = updated_at
    return workout

def add_workout(user_id, data: Dict[str, Any]) -> Dict[str, Any]:
    """Insert a workout document and return it with its generated id and timestamps"""
    user_id = _clean_user_id(user_id)
    document = _strip_store_keys(data)
    now = _now_iso()

    try:
        with get_db_connection() as conn:
            cur = get_cursor(conn)
            if is_sqlite():
                cur.execute(adapt_query("""
                    INSERT INTO workouts (user_id, data, created_at, updated_at)
                    VALUES (?, ?, ?, ?)
                """), (user_id, json.dumps(document), now, now))
                workout_id = cur.lastrowid
            else:
                cur.execute(adapt_query("""
                    INSERT INTO workouts (user_id, data, created_at, updated_at)
                    VALUES (?, ?, ?, ?)
                    RETURNING id
                """), (user_id, json.dumps(document), now, now))
                workout_id = cur.fetchone()[0]
    except Exception as e:
        print(f"Error adding workout to database: {e}")
        traceback.print_exc()
        raise WorkoutStoreError('Failed to save workout') from e

    return dict(document, id=str(workout_id), createdAt=now, updatedAt=now)

def get_workouts(user_id, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """All of a user's workouts, newest first"""
    user_id = _clean_user_id(user_id)
    query = """
        SELECT id, data, created_at, updated_at
        FROM workouts
        WHERE user_id = ?
        ORDER BY created_at DESC, id DESC
    """
    params = [user_id]
    if limit:
        query += " LIMIT ?"
        params.append(int(limit))

    try:
        with get_db_connection() as conn:
            cur = get_cursor(conn)
            cur.execute(adapt_query(query), tuple(params))
            rows = cur.fetchall()
    except Exception as e:
        print(f"Error getting workouts from database: {e}")
        traceback.print_exc()
        raise WorkoutStoreError('Failed to load workouts') from e

    return [_row_to_workout(row) for row in rows]

def _fetch_workout(cur, user_id, workout_id):
    cur.execute(adapt_query("""
        SELECT id, data, created_at, updated_at
        FROM workouts
        WHERE id = ? AND user_id = ?
    """), (workout_id, user_id))
    return cur.fetchone()

def get_workout(user_id, workout_id) -> Dict[str, Any]:
    user_id = _clean_user_id(user_id)
    workout_id = _clean_workout_id(workout_id)
    try:
        with get_db_connection() as conn:
            row = _fetch_workout(get_cursor(conn), user_id, workout_id)
    except Exception as e:
        print(f"Error getting workout from database: {e}")
        traceback.print_exc()
        raise WorkoutStoreError('Failed to load workout') from e

    if row is None:
        raise WorkoutNotFoundError(f"Workout {workout_id} not found")
    return _row_to_workout(row)

def update_workout(user_id, workout_id, updates: Dict[str, Any]) -> Dict[str, Any]:
    """Merge updates into the stored document; last write wins"""
    user_id = _clean_user_id(user_id)
    workout_id = _clean_workout_id(workout_id)
    now = _now_iso()

    try:
        with get_db_connection() as conn:
            cur = get_cursor(conn)
            row = _fetch_workout(cur, user_id, workout_id)
            if row is None:
                raise WorkoutNotFoundError(f"Workout {workout_id} not found")
            current = _row_to_workout(row)
            merged = dict(_strip_store_keys(current), **_strip_store_keys(updates))
            if not str(merged.get('name') or '').strip():
                raise InvalidWorkoutError('Workout name is required')
            if not _named_exercises(merged):
                raise InvalidWorkoutError('Workout must contain at least one exercise')
            cur.execute(adapt_query("""
                UPDATE workouts
                SET data = ?, updated_at = ?
                WHERE id = ? AND user_id = ?
            """), (json.dumps(merged), now, workout_id, user_id))
    except (WorkoutNotFoundError, InvalidWorkoutError):
        raise
    except Exception as e:
        print(f"Error updating workout in database: {e}")
        traceback.print_exc()
        raise WorkoutStoreError('Failed to update workout') from e

    return dict(merged, id=str(workout_id), createdAt=current['createdAt'], updatedAt=now)

def delete_workout(user_id, workout_id) -> bool:
    """Delete a workout. A workout that is already gone counts as deleted."""
    user_id = _clean_user_id(user_id)
    try:
        workout_id = int(workout_id)
    except (TypeError, ValueError):
        return True

    try:
        with get_db_connection() as conn:
            cur = get_cursor(conn)
            if _fetch_workout(cur, user_id, workout_id) is None:
                print(f"⚠ Workout {workout_id} already deleted")
                return True
            cur.execute(adapt_query("""
                DELETE FROM workouts WHERE id = ? AND user_id = ?
            """), (workout_id, user_id))
    except Exception as e:
        print(f"Error deleting workout from database: {e}")
        traceback.print_exc()
        raise WorkoutStoreError('Failed to delete workout') from e
    return True

def repeat_workout(user_id, workout_id) -> Dict[str, Any]:
    """Store a copy of a workout under a new id, name suffixed with (Repeated)"""
    original = get_workout(user_id, workout_id)
    copy = _strip_store_keys(original)
    copy['name'] = f"{original.get('name') or 'Workout'}{REPEATED_SUFFIX}"
    copy.pop('completed', None)
    copy.pop('actualDuration', None)
    return add_workout(user_id, copy)

def _has_value(value):
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True

def validate_manual_workout(data) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Check a hand-built workout before it is stored.
    Needs a name and at least one exercise with a name and reps or duration;
    blank exercise rows are dropped.
    """
    if not isinstance(data, dict):
        return None, 'Workout data must be an object'

    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        return None, 'Workout name is required'

    exercises = []
    for exercise in data.get('exercises') or []:
        if not isinstance(exercise, dict):
            continue
        exercise_name = exercise.get('name')
        if not isinstance(exercise_name, str) or not exercise_name.strip():
            continue
        if not (_has_value(exercise.get('reps')) or _has_value(exercise.get('duration'))):
            continue
        exercises.append(dict(exercise, name=exercise_name.strip()))

    if not exercises:
        return None, 'At least one exercise with a name and reps or duration is required'

    workout = _strip_store_keys(data)
    workout.update({
        'name': name.strip(),
        'exercises': exercises,
        'type': 'manual',
    })
    workout.setdefault('focusArea', 'full body')
    workout.setdefault('difficulty', 'beginner')
    workout.setdefault('intensity', 'moderate')
    workout.setdefault('estimatedDuration', 45)
    return workout, None

def _named_exercises(workout):
    exercises = [ex for ex in workout.get('exercises') or [] if isinstance(ex, dict)]
    for key in ('strength', 'wod'):
        section = workout.get(key)
        if isinstance(section, dict):
            exercises.extend(ex for ex in section.get('exercises') or [] if isinstance(ex, dict))
    return [ex for ex in exercises if str(ex.get('name') or '').strip()]

def validate_suggested_workout(data) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """Template or AI workouts are stored as generated, once they have a name and an exercise"""
    if not isinstance(data, dict):
        return None, 'Workout data must be an object'
    if not str(data.get('name') or '').strip():
        return None, 'Workout name is required'
    if not _named_exercises(data):
        return None, 'Workout must contain at least one exercise'
    return _strip_store_keys(data), None
