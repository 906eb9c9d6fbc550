import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


REF_LIFTS = [
    ("Back Squat", 100.0, None),
    ("Front Squat", 85.0, None),
    ("Deadlift", 120.0, None),
    ("Bench Press", 75.0, None),
    ("Chin-up", 70.0, "Bodyweight plus added load"),
]


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "higher_endeavors_test.db"
    # Point the app to this temp DB
    os.environ["HE_DB_PATH"] = str(path)
    # Initialize schema
    schema = Path(_PROJECT_ROOT / "schema.sql").read_text(encoding="utf-8")
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(schema)
        conn.commit()
    finally:
        conn.close()
    return str(path)


@pytest.fixture()
def client(tmp_db_path):
    # Ensure schemas required by logging/config exist before creating client
    from endeavors.logs import ensure_log_schema
    from endeavors.services.config_svc import ensure_default_config
    ensure_log_schema()
    ensure_default_config()
    # Import app after DB ready so startup hooks can use it
    from endeavors.api import app
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert os.environ.get("HE_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    # children before parents
    tables = [
        "cme_session_templates",
        "cme_sessions_activities",
        "cme_sessions",
        "cme_activity_library",
        "cme_activity_family",
        "resist_program_exercises",
        "resist_programs",
        "struct_balanced_lifts",
        "struct_bal_ref_lifts",
        "body_composition_entries",
        "heart_rate_zones",
        "user_settings",
        "user_exercise_library",
        "exercise_library",
        "tier_continuum",
        "web_vitals_metrics",
        "contact_messages",
        "users",
        "config",
        "operation_log",
    ]
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in tables:
            try:
                conn.execute(f"DELETE FROM {t}")
            except sqlite3.OperationalError:
                # operation_log only exists once ensure_log_schema() ran
                pass
        conn.commit()
    finally:
        conn.close()
    yield


def _insert_user(name: str, is_admin: bool = False) -> dict:
    from endeavors.services.user_svc import create_user, get_user
    return get_user(create_user(name, f"{name.lower()}@example.com", is_admin))


@pytest.fixture()
def user(tmp_db_path):
    return _insert_user("Alice")


@pytest.fixture()
def other_user(tmp_db_path):
    return _insert_user("Bob")


@pytest.fixture()
def admin(tmp_db_path):
    return _insert_user("Root", is_admin=True)


@pytest.fixture()
def ref_lifts(tmp_db_path):
    from endeavors.db import get_conn
    from endeavors.repository import reference_lift_repo
    with get_conn() as conn:
        for name, load, note in REF_LIFTS:
            reference_lift_repo.upsert_ref_lift(conn, name, load, note)
        rows = reference_lift_repo.list_ref_lifts(conn)
    return {r["exercise_name"]: r["id"] for r in rows}


@pytest.fixture()
def library(tmp_db_path):
    """Library exercise ids by name, mirroring the reference lifts."""
    from endeavors.db import get_conn
    from endeavors.repository import exercise_repo
    with get_conn() as conn:
        for name, _, _ in REF_LIFTS:
            exercise_repo.insert_library_exercise(conn, name, None, "Barbell", None)
        rows = exercise_repo.list_library(conn)
    return {r["exercise_name"]: r["exercise_library_id"] for r in rows}
