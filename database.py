"""
Database module for Workout AI Tracker
Handles PostgreSQL and SQLite connections and schema

Workouts are stored as JSON documents, one row per workout, scoped by user_id.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path

# Try to import psycopg2 for PostgreSQL support
try:
    import psycopg2
    HAS_POSTGRES = True
except ImportError:
    HAS_POSTGRES = False

def get_db_url():
    """Get database URL from environment variable"""
    # Railway provides DATABASE_URL, local dev can use POSTGRES_URL
    db_url = os.getenv('DATABASE_URL') or os.getenv('POSTGRES_URL')
    if not db_url:
        # Fallback to SQLite for local development
        return 'sqlite:///workout_tracker.db'
    return db_url

def is_sqlite(db_url=None):
    """Check if database URL is SQLite"""
    if db_url is None:
        db_url = get_db_url()
    return bool(db_url) and db_url.startswith('sqlite:///')

def adapt_query(query):
    """Queries are written with '?' placeholders; PostgreSQL wants '%s'"""
    if is_sqlite():
        return query
    return query.replace('?', '%s')

def get_cursor(conn):
    """Get a cursor from connection - handles both SQLite and PostgreSQL"""
    return conn.cursor()

@contextmanager
def get_db_connection():
    """Get a database connection with automatic cleanup"""
    db_url = get_db_url()
    if not db_url:
        raise ValueError("No database URL found. Set DATABASE_URL or POSTGRES_URL environment variable.")

    if is_sqlite(db_url):
        db_path = db_url.replace('sqlite:///', '')
        # Make path absolute
        if not os.path.isabs(db_path):
            db_path = str(Path(__file__).parent / db_path)
        conn = sqlite3.connect(db_path)
        conn.row_factory = sqlite3.Row  # Enable column access by name
        conn.execute("PRAGMA foreign_keys = ON")
    else:
        if not HAS_POSTGRES:
            raise ValueError("PostgreSQL URL provided but psycopg2 not installed. Install with: pip install psycopg2-binary")

        # Handle Railway's postgres:// URL format (convert to postgresql://)
        if db_url.startswith('postgres://'):
            db_url = db_url.replace('postgres://', 'postgresql://', 1)
        conn = psycopg2.connect(db_url)

    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()

def init_db():
    """Initialize database tables - works with both PostgreSQL and SQLite"""
    use_sqlite = is_sqlite()
    id_column = "INTEGER PRIMARY KEY AUTOINCREMENT" if use_sqlite else "SERIAL PRIMARY KEY"

    with get_db_connection() as conn:
        cur = get_cursor(conn)

        cur.execute(f"""
            CREATE TABLE IF NOT EXISTS users (
                id {id_column},
                username TEXT UNIQUE NOT NULL,
                password_hash TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        cur.execute("""
            CREATE INDEX IF NOT EXISTS idx_users_username ON users(username)
        """)

        # One JSON document per workout; timestamps are ISO-8601 UTC strings
        # written by the store so they sort lexicographically.
        cur.execute(f"""
            CREATE TABLE IF NOT EXISTS workouts (
                id {id_column},
                user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                data TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        cur.execute("""
            CREATE INDEX IF NOT EXISTS idx_workouts_user_created ON workouts(user_id, created_at)
        """)

        cur.execute(f"""
            CREATE TABLE IF NOT EXISTS usage (
                id {id_column},
                user_id INTEGER REFERENCES users(id) ON DELETE CASCADE,
                date TEXT NOT NULL,
                input_tokens INTEGER DEFAULT 0,
                output_tokens INTEGER DEFAULT 0,
                cost REAL DEFAULT 0.0,
                requests INTEGER DEFAULT 0,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                UNIQUE(user_id, date)
            )
        """)
        cur.execute("""
            CREATE INDEX IF NOT EXISTS idx_usage_user_id ON usage(user_id)
        """)

        print("Database tables initialized successfully")

def check_db_connection():
    """Check if database connection works"""
    try:
        with get_db_connection() as conn:
            cur = get_cursor(conn)
            cur.execute("SELECT 1")
            return True
    except Exception as e:
        print(f"Database connection failed: {e}")
        return False
