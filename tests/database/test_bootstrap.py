from pathlib import Path

from src.attendance_ledger.attendance_ledger.database.bootstrap import REQUIRED_TABLES, schema_statements

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_schema_file_yields_one_statement_per_required_table():
    statements = schema_statements(SCHEMA.read_text(encoding="utf-8"))

    assert len(statements) == len(REQUIRED_TABLES)
    assert all(s.upper().startswith("CREATE TABLE IF NOT EXISTS") for s in statements)
    for table in REQUIRED_TABLES:
        assert any(f"EXISTS {table} (" in s for s in statements)


def test_database_header_and_comments_are_dropped():
    sql = """
    -- header
    CREATE DATABASE IF NOT EXISTS other_db;
    USE other_db;
    CREATE TABLE IF NOT EXISTS t (id INT);
    """

    assert schema_statements(sql) == ["CREATE TABLE IF NOT EXISTS t (id INT)"]
