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


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "inventory_test.db"
    # Point the service to this temp DB
    os.environ["INVENTORY_DB_PATH"] = str(path)
    schema = Path(_PROJECT_ROOT / "inventory_api" / "schema.sql").read_text(encoding="utf-8")
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(schema)
        conn.commit()
    finally:
        conn.close()
    return str(path)


@pytest.fixture()
def db(tmp_db_path):
    from inventory_api.db import get_executor
    with get_executor(tmp_db_path) as ex:
        yield ex


@pytest.fixture()
def client(tmp_db_path):
    from inventory_api.api import app
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Clean tables before each test for isolation
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert os.environ.get("INVENTORY_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    tables = [
        "inventories",
        "operation_log",
        "sqlite_sequence",
    ]
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in tables:
            try:
                conn.execute(f"DELETE FROM {t}")
            except sqlite3.OperationalError:
                pass
        conn.commit()
    finally:
        conn.close()
    yield
