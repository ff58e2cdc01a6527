#!/usr/bin/env python3
"""
Workout AI Tracker
JSON API for logging, suggesting and tracking workouts
"""

import os
import secrets
from datetime import datetime, timedelta
from functools import wraps

from flask import Flask, request, jsonify, session
from werkzeug.middleware.proxy_fix import ProxyFix
from werkzeug.security import generate_password_hash, check_password_hash

from ai_coach import generate_ai_workout
from config import get_daily_budget, get_monthly_budget, is_ai_enabled, is_production_env, run_evals_enabled
from database import adapt_query, check_db_connection, get_cursor, get_db_connection, init_db, is_sqlite
from history_analyzer import compute_exercise_stats, compute_stats
from usage import check_budget, load_usage
from workout_generator import (
    generate_workout_options, get_personalized_suggestion, get_quick_workout, validate_preferences,
)
from workout_modifier import PerformanceError, record_performance
from workout_store import (
    InvalidWorkoutError, WorkoutNotFoundError, WorkoutStoreError, add_workout, delete_workout, get_workout,
    get_workouts, repeat_workout, update_workout, validate_manual_workout, validate_suggested_workout,
)

app = Flask(__name__)
is_production = is_production_env() or os.getenv('FLASK_ENV') == 'production'

# Trust Railway's proxy headers for HTTPS detection
if is_production_env():
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=1)
# IMPORTANT: Set SECRET_KEY in production for session persistence
app.secret_key = os.getenv('SECRET_KEY', secrets.token_hex(32))
app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(days=365)  # Sessions last 1 year
app.config['SESSION_COOKIE_SECURE'] = is_production
app.config['SESSION_COOKIE_HTTPONLY'] = True
app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'
if is_production:
    app.config['SESSION_COOKIE_PATH'] = '/'

USE_DATABASE = False

SUGGESTION_MODES = ('personalized', 'quick', 'options')
HISTORY_FOR_SUGGESTIONS = 5

def init_storage():
    """Connect to the database and create tables; sets USE_DATABASE"""
    global USE_DATABASE
    try:
        if check_db_connection():
            init_db()
            print("✓ Database initialized")
            USE_DATABASE = True
        else:
            print("⚠ Database not available")
            USE_DATABASE = False
    except Exception as e:
        print(f"⚠ Database initialization failed: {e}")
        USE_DATABASE = False
    return USE_DATABASE

init_storage()

# ============================================================================
# Authentication Helper Functions
# ============================================================================

def get_current_user_id():
    """Get current user ID from session - validates it's an integer for security"""
    user_id = session.get('user_id')
    if user_id is not None:
        try:
            return int(user_id)
        except (ValueError, TypeError):
            return None
    return None

def require_auth(f):
    """Decorator to require authentication for routes"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not USE_DATABASE:
            return jsonify({'error': 'Database not available'}), 500
        if not get_current_user_id():
            return jsonify({'error': 'Authentication required'}), 401
        return f(*args, **kwargs)
    return decorated_function

def create_user(username, password):
    """Create a new user; None if the name is invalid or taken"""
    if not username or not isinstance(username, str):
        return None
    username = username.strip()
    if len(username) < 3 or len(username) > 50:
        return None
    # Only allow alphanumeric, underscore, and hyphen
    if not username.replace('_', '').replace('-', '').isalnum():
        return None
    if not password or not isinstance(password, str) or len(password) < 6:
        return None

    try:
        with get_db_connection() as conn:
            cur = get_cursor(conn)
            cur.execute(adapt_query("SELECT id FROM users WHERE username = ?"), (username,))
            if cur.fetchone():
                return None

            password_hash = generate_password_hash(password)
            if is_sqlite():
                cur.execute("""
                    INSERT INTO users (username, password_hash)
                    VALUES (?, ?)
                """, (username, password_hash))
                user_id = cur.lastrowid
            else:
                cur.execute("""
                    INSERT INTO users (username, password_hash)
                    VALUES (%s, %s)
                    RETURNING id
                """, (username, password_hash))
                user_id = cur.fetchone()[0]
            return user_id
    except Exception as e:
        print(f"Error creating user: {e}")
        return None

def authenticate_user(username, password):
    """Return user_id if the password matches"""
    if not username or not isinstance(username, str):
        return None
    username = username.strip()

    try:
        with get_db_connection() as conn:
            cur = get_cursor(conn)
            cur.execute(adapt_query("SELECT id, password_hash FROM users WHERE username = ?"), (username,))
            result = cur.fetchone()
            if result and check_password_hash(result[1], password):
                return result[0]
            return None
    except Exception as e:
        print(f"Error authenticating user: {e}")
        return None

def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}

def _start_session(user_id, username):
    session.permanent = True
    session['user_id'] = user_id
    session['username'] = username
    session.modified = True

# ============================================================================
# Health & Auth
# ============================================================================

@app.route('/api/health', methods=['GET'])
def health():
    return jsonify({
        'status': 'ok',
        'database': USE_DATABASE,
        'ai_enabled': is_ai_enabled()
    })

@app.route('/api/register', methods=['POST'])
def register():
    """Register a new user"""
    if not USE_DATABASE:
        return jsonify({'error': 'Database not available'}), 500

    data = _json_body()
    username = str(data.get('username') or '').strip()
    password = data.get('password') or ''

    if not username or not password:
        return jsonify({'error': 'Username and password required'}), 400

    if len(username) < 3:
        return jsonify({'error': 'Username must be at least 3 characters'}), 400

    if len(username) > 50:
        return jsonify({'error': 'Username must be at most 50 characters'}), 400

    if not username.replace('_', '').replace('-', '').isalnum():
        return jsonify({'error': 'Username may only contain letters, numbers, underscores and hyphens'}), 400

    if len(password) < 6:
        return jsonify({'error': 'Password must be at least 6 characters'}), 400

    user_id = create_user(username, password)
    if not user_id:
        return jsonify({'error': 'Username already exists'}), 400

    _start_session(user_id, username)
    return jsonify({
        'success': True,
        'user_id': user_id,
        'username': username
    })

@app.route('/api/login', methods=['POST'])
def login():
    """Login a user"""
    if not USE_DATABASE:
        return jsonify({'error': 'Database not available'}), 500

    data = _json_body()
    username = str(data.get('username') or '').strip()
    password = data.get('password') or ''

    if not username or not password:
        return jsonify({'error': 'Username and password required'}), 400

    user_id = authenticate_user(username, password)
    if not user_id:
        return jsonify({'error': 'Invalid username or password'}), 401

    _start_session(user_id, username)
    return jsonify({
        'success': True,
        'user_id': user_id,
        'username': username
    })

@app.route('/api/logout', methods=['POST'])
def logout():
    """Logout the current user"""
    session.clear()
    return jsonify({'success': True})

@app.route('/api/current-user', methods=['GET'])
def get_current_user():
    """Get current user info"""
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({'authenticated': False}), 401

    return jsonify({
        'authenticated': True,
        'user_id': user_id,
        'username': session.get('username', '')
    })

# ============================================================================
# Workouts
# ============================================================================

@app.route('/api/workouts', methods=['GET'])
@require_auth
def list_workouts():
    """All workouts for the current user, newest first"""
    limit = request.args.get('limit', type=int)
    try:
        workouts = get_workouts(get_current_user_id(), limit=limit)
    except WorkoutStoreError:
        return jsonify({'error': 'Failed to load workouts'}), 500
    return jsonify({'success': True, 'workouts': workouts})

@app.route('/api/workouts', methods=['POST'])
@require_auth
def create_workout():
    """Save a hand-built workout or an accepted suggestion"""
    data = _json_body()
    data = data.get('workout') if isinstance(data.get('workout'), dict) else data

    if data.get('type', 'manual') == 'manual':
        workout, error = validate_manual_workout(data)
    else:
        workout, error = validate_suggested_workout(data)
    if error:
        return jsonify({'error': error}), 400

    try:
        saved = add_workout(get_current_user_id(), workout)
    except WorkoutStoreError:
        return jsonify({'error': 'Failed to save workout'}), 500
    print(f"✓ Saved workout {saved['id']}: {saved['name']}")
    return jsonify({'success': True, 'workout': saved}), 201

@app.route('/api/workouts/<workout_id>', methods=['GET'])
@require_auth
def get_one_workout(workout_id):
    try:
        workout = get_workout(get_current_user_id(), workout_id)
    except WorkoutNotFoundError:
        return jsonify({'error': 'Workout not found'}), 404
    except WorkoutStoreError:
        return jsonify({'error': 'Failed to load workout'}), 500
    return jsonify({'success': True, 'workout': workout})

@app.route('/api/workouts/<workout_id>', methods=['PUT'])
@require_auth
def edit_workout(workout_id):
    """Merge the given fields into a stored workout"""
    updates = request.get_json(silent=True)
    if not isinstance(updates, dict) or not updates:
        return jsonify({'error': 'Workout updates must be a non-empty object'}), 400
    if 'name' in updates and not str(updates['name'] or '').strip():
        return jsonify({'error': 'Workout name is required'}), 400

    try:
        workout = update_workout(get_current_user_id(), workout_id, updates)
    except WorkoutNotFoundError:
        return jsonify({'error': 'Workout not found'}), 404
    except InvalidWorkoutError as e:
        return jsonify({'error': str(e)}), 400
    except WorkoutStoreError:
        return jsonify({'error': 'Failed to update workout'}), 500
    return jsonify({'success': True, 'workout': workout})

@app.route('/api/workouts/<workout_id>', methods=['DELETE'])
@require_auth
def remove_workout(workout_id):
    try:
        delete_workout(get_current_user_id(), workout_id)
    except WorkoutStoreError:
        return jsonify({'error': 'Failed to delete workout'}), 500
    return jsonify({'success': True})

@app.route('/api/workouts/<workout_id>/repeat', methods=['POST'])
@require_auth
def repeat(workout_id):
    try:
        workout = repeat_workout(get_current_user_id(), workout_id)
    except WorkoutNotFoundError:
        return jsonify({'error': 'Workout not found'}), 404
    except WorkoutStoreError:
        return jsonify({'error': 'Failed to repeat workout'}), 500
    return jsonify({'success': True, 'workout': workout}), 201

@app.route('/api/workouts/<workout_id>/performance', methods=['POST'])
@require_auth
def record_workout_performance(workout_id):
    """Record actual sets/reps/weights and workout notes"""
    user_id = get_current_user_id()
    try:
        workout = get_workout(user_id, workout_id)
        modified = record_performance(workout, _json_body())
        saved = update_workout(user_id, workout_id, modified)
    except PerformanceError as e:
        return jsonify({'error': str(e)}), 400
    except WorkoutNotFoundError:
        return jsonify({'error': 'Workout not found'}), 404
    except InvalidWorkoutError as e:
        return jsonify({'error': str(e)}), 400
    except WorkoutStoreError:
        return jsonify({'error': 'Failed to save performance'}), 500
    return jsonify({'success': True, 'workout': saved})

# ============================================================================
# Suggestions
# ============================================================================

@app.route('/api/suggestions', methods=['POST'])
@require_auth
def suggestions():
    """Template-based suggestions: personalized, quick or one per focus area"""
    data = _json_body()
    mode = data.get('mode', 'personalized')
    if mode not in SUGGESTION_MODES:
        return jsonify({'error': f"mode must be one of: {', '.join(SUGGESTION_MODES)}"}), 400

    prefs, error = validate_preferences(data.get('preferences'))
    if error:
        return jsonify({'error': error}), 400

    if mode == 'personalized':
        try:
            history = get_workouts(get_current_user_id(), limit=HISTORY_FOR_SUGGESTIONS)
        except WorkoutStoreError:
            return jsonify({'error': 'Failed to load workouts'}), 500
        workouts = [get_personalized_suggestion(history, prefs)]
    elif mode == 'quick':
        workouts = [get_quick_workout(prefs)]
    else:
        workouts = generate_workout_options(prefs)

    return jsonify({'success': True, 'mode': mode, 'workouts': workouts})

@app.route('/api/suggest-workout-ai', methods=['POST'])
@require_auth
def suggest_workout_ai():
    """AI suggestion; always answers with a workout, falling back when the model can't"""
    data = _json_body()
    prefs, error = validate_preferences(data.get('preferences'))
    if error:
        return jsonify({'error': error}), 400

    user_id = get_current_user_id()
    try:
        history = get_workouts(user_id, limit=HISTORY_FOR_SUGGESTIONS)
    except WorkoutStoreError:
        print("⚠ Could not load history for AI prompt, continuing without it")
        history = []

    workout, usage = generate_ai_workout(prefs, history, user_id=user_id)
    is_fallback = workout.get('type') == 'ai-generated-fallback'

    response = {
        'success': True,
        'workout': workout,
        'fallback': is_fallback
    }
    if data.get('requestId') is not None:
        response['requestId'] = data['requestId']
    if is_fallback:
        response['message'] = 'AI generation unavailable, showing a generated workout instead'
    if usage:
        budget = check_budget(user_id)
        response['usage'] = {
            'cost': usage['cost'],
            'daily_cost': budget['daily_cost']
        }

    # Run evals on the workout (optional, for debugging/improvement)
    if run_evals_enabled():
        try:
            from evals import run_evals, summarize_evals
            response['evals'] = summarize_evals(run_evals(workout))
        except Exception as e:
            print(f"⚠ Evals failed: {e}")

    return jsonify(response)

# ============================================================================
# Stats & Usage
# ============================================================================

@app.route('/api/stats', methods=['GET'])
@require_auth
def stats():
    """Dashboard stats and per-exercise bests"""
    try:
        workouts = get_workouts(get_current_user_id())
    except WorkoutStoreError:
        return jsonify({'error': 'Failed to load workouts'}), 500
    exercise_stats = sorted(compute_exercise_stats(workouts).values(), key=lambda s: s['name'])
    return jsonify({
        'success': True,
        'stats': compute_stats(workouts),
        'exerciseStats': exercise_stats
    })

@app.route('/api/usage', methods=['GET'])
@require_auth
def get_usage():
    """Get usage statistics"""
    user_id = get_current_user_id()
    budget = check_budget(user_id)
    usage = load_usage(user_id)
    today = datetime.now().strftime("%Y-%m-%d")

    return jsonify({
        'success': True,
        'budget': budget,
        'today': usage["daily"].get(today, {"input_tokens": 0, "output_tokens": 0, "cost": 0.0, "requests": 0}),
        'total': usage["total"],
        'recent_days': dict(sorted(usage["daily"].items(), reverse=True)[:7])  # Last 7 days
    })

if __name__ == '__main__':
    print("\n" + "="*50)
    print("Workout AI Tracker")
    print("="*50)
    print(f"AI generation: {'enabled' if is_ai_enabled() else 'disabled (fallback workouts only)'}")
    budget = check_budget()
    print(f"Daily Budget: ${get_daily_budget():.2f} (${budget['daily_remaining']:.2f} remaining)")
    print(f"Monthly Budget: ${get_monthly_budget():.2f} (${budget['monthly_remaining']:.2f} remaining)")
    print("="*50 + "\n")
    port = int(os.getenv('PORT', '5001'))
    print(f"Starting server on http://localhost:{port}")
    print("Press Ctrl+C to stop\n")
    app.run(debug=not is_production, host='0.0.0.0', port=port)
