"""
Shared test setup: every test gets its own SQLite file and AI stays disabled
unless a test passes a fake client.
"""

import os
import tempfile

import pytest

# Must be set before app/config are imported so the module-level init uses a scratch DB
_BOOT_DIR = tempfile.mkdtemp(prefix='workout-tracker-tests-')
os.environ['DATABASE_URL'] = f"sqlite:///{os.path.join(_BOOT_DIR, 'boot.db')}"
os.environ['ANTHROPIC_API_KEY'] = ''
os.environ.pop('POSTGRES_URL', None)
os.environ.pop('SECRET_KEY', None)
os.environ['RUN_EVALS'] = 'false'

@pytest.fixture
def db(tmp_path, monkeypatch):
    """Fresh database with tables; returns the URL"""
    db_url = f"sqlite:///{tmp_path / 'test.db'}"
    monkeypatch.setenv('DATABASE_URL', db_url)
    from database import init_db
    init_db()
    return db_url

@pytest.fixture
def user_id(db):
    from database import get_db_connection, get_cursor
    with get_db_connection() as conn:
        cur = get_cursor(conn)
        cur.execute("INSERT INTO users (username, password_hash) VALUES (?, ?)", ('tester', 'x'))
        return cur.lastrowid

@pytest.fixture
def client(db):
    import app as app_module
    app_module.init_storage()
    app_module.app.config['TESTING'] = True
    with app_module.app.test_client() as test_client:
        yield test_client

@pytest.fixture
def auth_client(client):
    response = client.post('/api/register', json={'username': 'lifter', 'password': 'secret123'})
    assert response.status_code == 200
    return client
