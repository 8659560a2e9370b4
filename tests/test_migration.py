import logging
import os
import sqlite3
import tempfile

import pytest

from migration.runner import current_revision, main, migrate
from storefront.config import DatabaseSettings
from storefront.vector import HNSW_INDEX_DDL, VECTOR_EXTENSION_DDL, vector_index_ddl


@pytest.fixture
def db_path():
    with tempfile.TemporaryDirectory() as tmp:
        yield os.path.join(tmp, "test.db")


def _tables(path):
    conn = sqlite3.connect(path)
    try:
        return {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    finally:
        conn.close()


def test_migration_creates_schema(db_path):
    settings = DatabaseSettings(database_url=f"sqlite:///{db_path}")
    assert current_revision(settings) is None

    migrate(settings)

    tables = _tables(db_path)
    assert {"user", "account", "session", "verificationToken", "product", "reviews"} <= tables
    assert {"cart", "order", "orderItems", "project_logs", "users", "projects"} <= tables
    assert current_revision(settings) == "0002"


def test_migration_is_idempotent(db_path):
    settings = DatabaseSettings(database_url=f"sqlite:///{db_path}")
    migrate(settings)

    conn = sqlite3.connect(db_path)
    try:
        conn.execute("INSERT INTO project_logs (project, visit_count) VALUES ('demo', 3)")
        conn.commit()
    finally:
        conn.close()

    # second run is a no-op and keeps data
    migrate(settings)
    assert current_revision(settings) == "0002"
    conn = sqlite3.connect(db_path)
    try:
        assert conn.execute("SELECT visit_count FROM project_logs WHERE project = 'demo'").fetchone() == (3,)
    finally:
        conn.close()


def test_migrated_schema_enforces_constraints(db_path):
    migrate(DatabaseSettings(database_url=f"sqlite:///{db_path}"))
    conn = sqlite3.connect(db_path)
    try:
        conn.execute("PRAGMA foreign_keys=ON")
        conn.execute("""INSERT INTO "user" (id, email) VALUES ('u1', 'a@example.com')""")
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("""INSERT INTO "user" (id, email) VALUES ('u2', 'a@example.com')""")
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute(
                'INSERT INTO "order" (id, userId, shippingAddress, paymentMethod, itemsPrice, shippingPrice, taxPrice, totalPrice) '
                "VALUES ('o1', 'missing', '{}', 'PayPal', 0, 0, 0, 0)"
            )
    finally:
        conn.close()


def test_cli_reports_failure(tmp_path):
    missing_dir = tmp_path / "does-not-exist" / "test.db"
    assert main(["--database-url", f"sqlite:///{missing_dir}", "--log-level", "CRITICAL"]) == 1


def test_cli_runs_migrations(db_path):
    assert main(["--database-url", f"sqlite:///{db_path}"]) == 0
    assert "product" in _tables(db_path)


def test_vector_index_ddl_is_rerunnable():
    statements = vector_index_ddl("postgresql")
    assert statements == [VECTOR_EXTENSION_DDL, HNSW_INDEX_DDL]
    assert all("IF NOT EXISTS" in s for s in statements)
    assert "USING hnsw" in HNSW_INDEX_DDL and "vector_cosine_ops" in HNSW_INDEX_DDL


def test_vector_index_skipped_without_pgvector():
    assert vector_index_ddl("sqlite") == []


def test_cli_logs_sql_rendering_failure(db_path, caplog):
    caplog.set_level(logging.ERROR)
    args = ["--database-url", f"sqlite:///{db_path}", "--sql", "--revision", "no-such-revision"]
    assert main(args) == 1
    assert any("rendering upgrade SQL" in r.getMessage() for r in caplog.records)
